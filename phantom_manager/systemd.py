# phantom_manager/systemd.py
# -*- coding: utf-8 -*-
"""
systemd integration for the Phantom Tunnel service.

``SystemdManager`` wraps the systemctl and journalctl calls the manager
needs. State queries branch on the command's return code; commands that
change service state raise ``ServiceCommandError`` when they fail.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from common.command_utils import log_phantom, run_command
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import ServiceCommandError

module_logger = logging.getLogger(__name__)


def render_unit_file(app_settings: AppSettings) -> str:
    """Render the unit file text for the installed executable."""
    service_cfg = app_settings.service
    return service_cfg.unit_template.format(
        description=service_cfg.description,
        exec_path=app_settings.executable_path,
        start_flag=service_cfg.start_flag,
        working_dir=app_settings.paths.working_dir,
        restart_sec=service_cfg.restart_sec,
        limit_nofile=service_cfg.limit_nofile,
        user=service_cfg.user,
        group=service_cfg.group,
    )


def write_unit_file(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """Write the rendered unit file to its path, replacing any previous one."""
    logger_to_use = current_logger if current_logger else module_logger
    unit_path = app_settings.service_file_path
    unit_path.parent.mkdir(parents=True, exist_ok=True)
    unit_path.write_text(render_unit_file(app_settings), encoding="utf-8")
    log_phantom(
        f"Wrote unit file {unit_path}", "debug", logger_to_use, app_settings
    )
    return unit_path


class SystemdManager:
    """
    Runs systemctl and journalctl against a single unit.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.service_name = app_settings.service_name
        self.logger = logger or logging.getLogger(__name__)

    def _query(self, args: List[str]) -> subprocess.CompletedProcess:
        return run_command(
            ["systemctl", *args],
            self.app_settings,
            check=False,
            capture_output=True,
            current_logger=self.logger,
        )

    def _change(self, args: List[str], action: str) -> None:
        try:
            run_command(
                ["systemctl", *args],
                self.app_settings,
                capture_output=True,
                current_logger=self.logger,
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            raise ServiceCommandError(
                f"Failed to {action} {self.service_name}: {e}",
                original_error=e,
            ) from e

    def unit_known(self) -> bool:
        """True if systemd lists the unit in any load or active state."""
        result = self._query(["list-units", "--full", "--all", "--no-legend"])
        if result.returncode != 0 or not result.stdout:
            return False
        return any(
            self.service_name in line.split()
            for line in result.stdout.splitlines()
        )

    def is_active(self) -> bool:
        return self._query(["is-active", "--quiet", self.service_name]).returncode == 0

    def is_enabled(self) -> bool:
        return self._query(["is-enabled", "--quiet", self.service_name]).returncode == 0

    def daemon_reload(self) -> None:
        self._change(["daemon-reload"], "reload systemd for")

    def start(self) -> None:
        self._change(["start", self.service_name], "start")

    def stop(self) -> None:
        self._change(["stop", self.service_name], "stop")

    def restart(self) -> None:
        self._change(["restart", self.service_name], "restart")

    def enable_now(self) -> None:
        self._change(["enable", "--now", self.service_name], "enable and start")

    def disable(self) -> None:
        self._change(["disable", self.service_name], "disable")

    def status(self) -> int:
        """
        Show ``systemctl status`` on the terminal. Returns the exit code,
        which is non-zero for a stopped unit and is not treated as an error.
        """
        result = run_command(
            ["systemctl", "status", "--no-pager", self.service_name],
            self.app_settings,
            check=False,
            current_logger=self.logger,
        )
        return result.returncode

    def follow_logs(self) -> None:
        """Stream the unit's journal until the operator presses Ctrl+C."""
        try:
            run_command(
                ["journalctl", "-u", self.service_name, "-f"],
                self.app_settings,
                check=False,
                current_logger=self.logger,
            )
        except KeyboardInterrupt:
            log_phantom(
                "Stopped following logs.",
                "info",
                self.logger,
                self.app_settings,
            )
