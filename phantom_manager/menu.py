# phantom_manager/menu.py
"""
Interactive numbered menu for managing Phantom Tunnel.
"""
import logging
from typing import Callable, Dict, List, Optional, Tuple

import click

from common.command_utils import log_phantom
from phantom_manager.config_models import AppSettings
from phantom_manager.installer import install_or_update
from phantom_manager.service_control import ServiceController, is_installed
from phantom_manager.systemd import SystemdManager
from phantom_manager.uninstaller import uninstall

module_logger = logging.getLogger(__name__)

TITLE = "Phantom Tunnel Manager"
RULE_HEAVY = "=" * 42
RULE_LIGHT = "-" * 42
EXIT_CHOICE = "7"

MENU_ITEMS: List[Tuple[str, str]] = [
    ("1", "Install or Update Phantom Tunnel"),
    ("2", "Uninstall Phantom Tunnel"),
    ("3", "Restart Service"),
    ("4", "Stop Service"),
    ("5", "View Service Status"),
    ("6", "View Live Logs"),
    (EXIT_CHOICE, "Exit"),
]


class ManagerMenu:
    """
    The menu loop. It has one state, awaiting a choice: options 1-6 run an
    operation and come back to it, option 7 (or end of input) leaves.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        systemd: Optional[SystemdManager] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger
        self.systemd = systemd or SystemdManager(app_settings, logger=self.logger)
        self.controller = ServiceController(
            app_settings, logger=self.logger, systemd=self.systemd
        )
        self.actions: Dict[str, Callable[[], bool]] = {
            "1": lambda: install_or_update(
                self.app_settings, self.logger, systemd=self.systemd
            ),
            "2": lambda: uninstall(
                self.app_settings, self.logger, systemd=self.systemd
            ),
            "3": self.controller.restart,
            "4": self.controller.stop,
            "5": self.controller.status,
            "6": self.controller.view_logs,
        }

    def _echo_state(self, label: str, value: str, ok: bool) -> None:
        styled = click.style(value, fg="green" if ok else "red")
        click.echo(
            f"{label}: {styled}",
            color=self.app_settings.use_color,
        )

    def render_header(self) -> None:
        click.clear()
        click.echo(RULE_HEAVY)
        click.echo(f"        {TITLE}")
        click.echo(RULE_HEAVY)
        if is_installed(self.app_settings):
            self._echo_state("Status", "Installed", True)
            if self.systemd.is_active():
                self._echo_state("Service", "Running", True)
            else:
                self._echo_state("Service", "Stopped", False)
        else:
            self._echo_state("Status", "Not Installed", False)
        click.echo(RULE_LIGHT)
        for number, label in MENU_ITEMS:
            click.echo(f"{number}. {label}")
        click.echo(RULE_LIGHT)

    def read_choice(self) -> Optional[str]:
        """Return the entered choice, or None at end of input."""
        try:
            return click.prompt(
                "Please enter your choice [1-7]",
                default="",
                show_default=False,
            ).strip()
        except click.Abort:
            return None

    def handle_choice(self, choice: str) -> bool:
        """
        Run the operation for ``choice``. Returns False when the menu should
        exit, True to keep looping.
        """
        if choice == EXIT_CHOICE:
            click.echo("Exiting.")
            return False

        action = self.actions.get(choice)
        if action is None:
            log_phantom(
                "Invalid option. Please try again.",
                "warning",
                self.logger,
                self.app_settings,
            )
            return True

        try:
            action()
        except Exception as e:
            log_phantom(
                f"Unexpected error: {e}",
                "error",
                self.logger,
                self.app_settings,
                exc_info=self.logger.isEnabledFor(logging.DEBUG),
            )
        return True

    def run(self) -> None:
        while True:
            self.render_header()
            choice = self.read_choice()
            if choice is None:
                click.echo()
                click.echo("Exiting.")
                return
            if not self.handle_choice(choice):
                return
            click.echo()
            click.pause("Press any key to return to the menu...")
