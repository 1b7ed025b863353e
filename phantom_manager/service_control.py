# phantom_manager/service_control.py
# -*- coding: utf-8 -*-
"""
Restart, stop, status and log operations for an installed Phantom service.

Each operation first checks that the primary executable exists and issues
no systemd command at all when it does not.
"""

import logging
from typing import Optional

from common.command_utils import log_phantom
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import NotInstalledError, PhantomManagerError
from phantom_manager.systemd import SystemdManager

module_logger = logging.getLogger(__name__)


def is_installed(app_settings: AppSettings) -> bool:
    return app_settings.executable_path.is_file()


def ensure_installed(app_settings: AppSettings) -> None:
    """
    Raises:
        NotInstalledError: The primary executable is missing.
    """
    if not is_installed(app_settings):
        raise NotInstalledError()


class ServiceController:
    """Service lifecycle operations offered by the menu."""

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        systemd: Optional[SystemdManager] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.systemd = systemd or SystemdManager(app_settings, logger=self.logger)

    def _log(self, message: str, level: str = "info") -> None:
        log_phantom(message, level, self.logger, self.app_settings)

    def restart(self) -> bool:
        try:
            ensure_installed(self.app_settings)
            self._log("Restarting Phantom service...")
            self.systemd.restart()
        except PhantomManagerError as e:
            self._log(str(e), "error")
            return False
        self._log("Service restarted.", "success")
        return True

    def stop(self) -> bool:
        try:
            ensure_installed(self.app_settings)
            self._log("Stopping Phantom service...")
            self.systemd.stop()
        except PhantomManagerError as e:
            self._log(str(e), "error")
            return False
        self._log("Service stopped.", "success")
        return True

    def status(self) -> bool:
        try:
            ensure_installed(self.app_settings)
        except NotInstalledError as e:
            self._log(str(e), "error")
            return False
        self._log("Showing status for Phantom service...")
        try:
            self.systemd.status()
        except FileNotFoundError as e:
            self._log(f"Could not run systemctl: {e}", "error")
            return False
        return True

    def view_logs(self) -> bool:
        try:
            ensure_installed(self.app_settings)
        except NotInstalledError as e:
            self._log(str(e), "error")
            return False
        self._log("Displaying live logs... (Press Ctrl+C to exit)")
        try:
            self.systemd.follow_logs()
        except FileNotFoundError as e:
            self._log(f"Could not run journalctl: {e}", "error")
            return False
        return True
