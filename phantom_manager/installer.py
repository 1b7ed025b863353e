# phantom_manager/installer.py
# -*- coding: utf-8 -*-
"""
Install or update Phantom Tunnel.

The operation runs these steps in order and stops at the first failure:

1. map the host architecture to a release asset,
2. make sure the required tools are installed,
3. look up the latest release tag,
4. download the asset into a temporary directory,
5. stop the running service,
6. install the binary and its compatibility symlink,
7. write the systemd unit file and reload systemd,
8. run first-time setup when there is no configuration database yet,
9. enable and start the service and report whether it came up.

Nothing is rolled back: a failure after step 6 leaves the new binary in
place.
"""

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Optional

import click

from common.command_utils import log_phantom, run_command
from common.file_utils import path_present, temporary_directory
from common.system_utils import get_machine_architecture
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import FirstRunSetupError, PhantomManagerError
from phantom_manager.package_manager import ensure_dependencies
from phantom_manager.prompts import FirstRunAnswers, prompt_first_run
from phantom_manager.release import (
    build_download_url,
    download_asset,
    fetch_latest_tag,
    resolve_asset_name,
)
from phantom_manager.systemd import SystemdManager, write_unit_file

module_logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def install_binary(
    downloaded_file: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Move the downloaded binary to the primary executable path, mark it
    executable and point the compatibility symlink at it.
    """
    logger_to_use = current_logger if current_logger else module_logger
    install_dir = app_settings.paths.install_dir
    target = app_settings.executable_path
    symlink = app_settings.symlink_path

    log_phantom(
        f"Installing executable to {install_dir}...",
        "info",
        logger_to_use,
        app_settings,
    )
    app_settings.paths.working_dir.mkdir(parents=True, exist_ok=True)
    install_dir.mkdir(parents=True, exist_ok=True)

    # Unlink first so a busy executable is replaced instead of rewritten.
    if path_present(target):
        target.unlink()
    shutil.move(str(downloaded_file), str(target))
    os.chmod(target, EXECUTABLE_MODE)

    if path_present(symlink):
        symlink.unlink()
    symlink.symlink_to(target)

    log_phantom(
        "Phantom binary installed/updated.",
        "success",
        logger_to_use,
        app_settings,
    )


def run_first_time_setup(
    answers: FirstRunAnswers,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Invoke the installed binary once with the setup flags."""
    logger_to_use = current_logger if current_logger else module_logger
    log_phantom(
        "Running initial setup to configure the database...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        run_command(
            [
                str(app_settings.executable_path),
                f"--setup-port={answers.port}",
                f"--setup-user={answers.username}",
                f"--setup-pass={answers.password}",
            ],
            app_settings,
            cwd=str(app_settings.paths.working_dir),
            current_logger=logger_to_use,
            secrets=[answers.password],
        )
    except subprocess.CalledProcessError as e:
        # CalledProcessError renders the full command line, password included.
        raise FirstRunSetupError(
            f"Initial setup failed (rc {e.returncode}). Installation aborted."
        ) from None


def _install_or_update(
    app_settings: AppSettings,
    systemd: SystemdManager,
    logger_to_use: logging.Logger,
) -> bool:
    # Resolved before anything touches the network or the filesystem.
    architecture = get_machine_architecture(app_settings, logger_to_use)
    asset_name = resolve_asset_name(architecture, app_settings)

    ensure_dependencies(app_settings, current_logger=logger_to_use)

    tag = fetch_latest_tag(app_settings, current_logger=logger_to_use)
    download_url = build_download_url(app_settings, tag, asset_name)

    with temporary_directory(
        app_settings, current_logger=logger_to_use
    ) as tmp_dir:
        log_phantom(
            f"Downloading the latest binary ({asset_name}) for {architecture}...",
            "info",
            logger_to_use,
            app_settings,
        )
        downloaded = download_asset(
            download_url,
            tmp_dir / app_settings.primary_executable,
            app_settings,
            current_logger=logger_to_use,
        )
        log_phantom(
            "Binary downloaded successfully.",
            "success",
            logger_to_use,
            app_settings,
        )

        if systemd.is_active():
            log_phantom(
                "An existing Phantom service is running. It will be stopped for the update.",
                "warning",
                logger_to_use,
                app_settings,
            )
            systemd.stop()

        install_binary(downloaded, app_settings, current_logger=logger_to_use)

    log_phantom(
        "Configuring systemd service...", "info", logger_to_use, app_settings
    )
    write_unit_file(app_settings, current_logger=logger_to_use)
    systemd.daemon_reload()
    log_phantom(
        "Systemd service file created/updated.",
        "success",
        logger_to_use,
        app_settings,
    )

    if not app_settings.config_db_path.is_file():
        answers = prompt_first_run(app_settings, current_logger=logger_to_use)
        run_first_time_setup(answers, app_settings, current_logger=logger_to_use)
    else:
        log_phantom(
            "Existing configuration found, skipping initial setup questions.",
            "info",
            logger_to_use,
            app_settings,
        )

    log_phantom(
        "Enabling and starting the Phantom service...",
        "info",
        logger_to_use,
        app_settings,
    )
    systemd.enable_now()
    log_phantom(
        "Service has been enabled and started.",
        "success",
        logger_to_use,
        app_settings,
    )
    log_phantom(
        "Installation/Update complete!", "success", logger_to_use, app_settings
    )

    time.sleep(app_settings.status_grace_seconds)
    if systemd.is_active():
        log_phantom(
            "Phantom Tunnel is now RUNNING!",
            "success",
            logger_to_use,
            app_settings,
        )
        return True

    log_phantom(
        f"The service failed to start. Please check logs with: journalctl -u {app_settings.service_name}",
        "error",
        logger_to_use,
        app_settings,
    )
    return False


def install_or_update(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    systemd: Optional[SystemdManager] = None,
) -> bool:
    """
    Install Phantom Tunnel, or update an existing installation to the latest
    release.

    Returns:
        bool: True if the service is running at the end, False if any step
        failed or the service did not come up.
    """
    logger_to_use = current_logger if current_logger else module_logger
    systemd = systemd or SystemdManager(app_settings, logger=logger_to_use)
    log_phantom(
        "Starting Phantom Tunnel Installation/Update...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        return _install_or_update(app_settings, systemd, logger_to_use)
    except PhantomManagerError as e:
        log_phantom(str(e), "error", logger_to_use, app_settings)
    except click.Abort:
        log_phantom(
            "No input received. Installation aborted.",
            "error",
            logger_to_use,
            app_settings,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        log_phantom(
            f"Installation failed: {e}", "error", logger_to_use, app_settings
        )
    except OSError as e:
        log_phantom(
            f"Installation failed due to a filesystem error: {e}",
            "error",
            logger_to_use,
            app_settings,
        )
    return False
