# phantom_manager/uninstaller.py
# -*- coding: utf-8 -*-
"""
Completely remove Phantom Tunnel: service, binaries, data directory, legacy
files and temporary files. Every removal is skipped when its target is
already gone, so running the uninstaller again is harmless.
"""

import logging
import subprocess
from typing import Optional

import click

from common.command_utils import log_phantom, run_command
from common.file_utils import remove_file_if_exists, remove_tree_if_exists
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import PhantomManagerError
from phantom_manager.prompts import prompt_confirmation
from phantom_manager.systemd import SystemdManager

module_logger = logging.getLogger(__name__)

SEPARATOR = "-" * 46


def stop_and_disable_service(
    systemd: SystemdManager,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    log_phantom(
        "Stopping and disabling the Phantom service...",
        "info",
        logger_to_use,
        app_settings,
    )
    if not systemd.unit_known():
        log_phantom(
            "Phantom service not found. Skipping.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return

    if systemd.is_active():
        systemd.stop()
        log_phantom("Service stopped.", "info", logger_to_use, app_settings)
    if systemd.is_enabled():
        systemd.disable()
        log_phantom("Service disabled.", "info", logger_to_use, app_settings)


def kill_remaining_processes(
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    """
    Send SIGTERM to processes named like either executable. pkill exits 1
    when nothing matched, which is expected here.
    """
    log_phantom(
        "Killing any remaining 'phantom' processes...",
        "info",
        logger_to_use,
        app_settings,
    )
    for name in app_settings.executable_names:
        result = run_command(
            ["pkill", "-x", name],
            app_settings,
            check=False,
            capture_output=True,
            current_logger=logger_to_use,
        )
        if result.returncode == 0:
            log_phantom(
                f"Terminated running '{name}' processes.",
                "info",
                logger_to_use,
                app_settings,
            )
        else:
            log_phantom(
                f"No '{name}' process to terminate (pkill rc {result.returncode}).",
                "debug",
                logger_to_use,
                app_settings,
            )


def remove_service_file(
    systemd: SystemdManager,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    service_file = app_settings.service_file_path
    if not service_file.is_file():
        return
    log_phantom(
        "Removing systemd service file...", "info", logger_to_use, app_settings
    )
    service_file.unlink()
    systemd.daemon_reload()
    log_phantom(
        "Systemd daemon reloaded.", "info", logger_to_use, app_settings
    )


def remove_installed_files(
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    for executable in app_settings.executable_paths:
        remove_file_if_exists(
            executable, app_settings, logger_to_use, description="executable"
        )

    remove_tree_if_exists(
        app_settings.paths.working_dir, app_settings, logger_to_use
    )

    legacy_dir = app_settings.paths.legacy_dir
    log_phantom(
        f"Searching for and removing legacy files from {legacy_dir}...",
        "info",
        logger_to_use,
        app_settings,
    )
    for file_name in app_settings.legacy_files:
        legacy_file = legacy_dir / file_name
        if legacy_file.is_file():
            remove_file_if_exists(
                legacy_file,
                app_settings,
                logger_to_use,
                description="legacy file",
            )

    log_phantom(
        "Cleaning up temporary files...", "info", logger_to_use, app_settings
    )
    for temp_file in app_settings.temp_files:
        if temp_file.is_dir() and not temp_file.is_symlink():
            continue
        remove_file_if_exists(
            temp_file, app_settings, logger_to_use, description="temporary file"
        )


def uninstall(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    systemd: Optional[SystemdManager] = None,
    assume_yes: bool = False,
) -> bool:
    """
    Uninstall Phantom Tunnel after an explicit confirmation.

    Args:
        app_settings: The application settings.
        current_logger: Optional logger instance.
        systemd: Optional SystemdManager, created from the settings if omitted.
        assume_yes: Skip the confirmation prompt.

    Returns:
        bool: True when uninstallation completed or was cancelled, False when
        a step failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    systemd = systemd or SystemdManager(app_settings, logger=logger_to_use)

    click.echo(SEPARATOR)
    click.echo("--- Uninstalling Phantom Tunnel Completely ---")
    click.echo(SEPARATOR)
    log_phantom(
        "WARNING: This will remove the binary, all configuration files, databases, "
        "and the systemd service. This cannot be undone.",
        "warning",
        logger_to_use,
        app_settings,
    )
    click.echo()

    if not assume_yes and not prompt_confirmation(
        "Are you sure you want to continue?",
        app_settings,
        current_logger=logger_to_use,
    ):
        log_phantom(
            "Uninstallation cancelled.", "info", logger_to_use, app_settings
        )
        return True

    try:
        stop_and_disable_service(systemd, app_settings, logger_to_use)
        kill_remaining_processes(app_settings, logger_to_use)
        remove_service_file(systemd, app_settings, logger_to_use)
        remove_installed_files(app_settings, logger_to_use)
    except PhantomManagerError as e:
        log_phantom(str(e), "error", logger_to_use, app_settings)
        return False
    except (subprocess.CalledProcessError, OSError) as e:
        log_phantom(
            f"Uninstallation failed: {e}", "error", logger_to_use, app_settings
        )
        return False

    click.echo()
    log_phantom(
        "Phantom Tunnel has been completely uninstalled from your system.",
        "success",
        logger_to_use,
        app_settings,
    )
    click.echo(
        "If you installed the executable in a non-standard path, please remove it manually."
    )
    return True
