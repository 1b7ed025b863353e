# phantom_manager/package_manager.py
# -*- coding: utf-8 -*-
"""
Makes sure the command-line tools the installer relies on are present,
using whichever package manager the host provides (apt-get or yum).
"""

import logging
import subprocess
from typing import List, Optional

from common.command_utils import command_exists, log_phantom, run_command
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import DependencyError

module_logger = logging.getLogger(__name__)

APT_GET = "apt-get"
YUM = "yum"


def detect_package_manager() -> Optional[str]:
    """Return 'apt-get' or 'yum', whichever is found first, else None."""
    for candidate in (APT_GET, YUM):
        if command_exists(candidate):
            return candidate
    return None


def _install_with_apt(
    tools: List[str],
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    run_command(
        [APT_GET, "update", "-y"],
        app_settings,
        capture_output=True,
        current_logger=logger_to_use,
    )
    run_command(
        [APT_GET, "install", "-y", "-qq", *tools],
        app_settings,
        capture_output=True,
        current_logger=logger_to_use,
    )


def _install_with_yum(
    tools: List[str],
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    run_command(
        [YUM, "install", "-y", *tools],
        app_settings,
        capture_output=True,
        current_logger=logger_to_use,
    )


def ensure_dependencies(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Install the tools listed in ``app_settings.required_tools``.

    With apt-get the package lists are refreshed first. Without a supported
    package manager a warning is logged and each tool is looked up on PATH
    instead; any tool that is missing then is an error.

    Raises:
        DependencyError: The package manager failed, or a tool is missing and
            cannot be installed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    tools = list(app_settings.required_tools)
    log_phantom(
        f"Checking for dependencies ({', '.join(tools)})...",
        "info",
        logger_to_use,
        app_settings,
    )

    manager = detect_package_manager()
    try:
        if manager == APT_GET:
            _install_with_apt(tools, app_settings, logger_to_use)
        elif manager == YUM:
            _install_with_yum(tools, app_settings, logger_to_use)
        else:
            log_phantom(
                f"Unsupported package manager. Checking that {', '.join(tools)} are already installed.",
                "warning",
                logger_to_use,
                app_settings,
            )
            missing = [tool for tool in tools if not command_exists(tool)]
            if missing:
                raise DependencyError(
                    f"Missing required tools and no supported package manager to install them: {', '.join(missing)}"
                )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise DependencyError(
            f"Failed to install dependencies with {manager}: {e}",
            original_error=e,
        ) from e

    log_phantom(
        "Dependencies are satisfied.", "success", logger_to_use, app_settings
    )
