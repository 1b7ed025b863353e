# phantom_manager/cli.py
# -*- coding: utf-8 -*-
"""
Command-line entry point for the Phantom Tunnel manager.

Run without a subcommand to get the interactive menu, or name one operation
to run it once and exit with status 0 on success and 1 on failure.
"""

import logging
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from common.command_utils import log_phantom
from common.core_utils import setup_logging
from common.system_utils import is_running_as_root
from phantom_manager.config_loader import DEFAULT_CONFIG_PATH, load_app_settings
from phantom_manager.config_models import AppSettings
from phantom_manager.installer import install_or_update
from phantom_manager.menu import ManagerMenu
from phantom_manager.service_control import ServiceController
from phantom_manager.uninstaller import uninstall

module_logger = logging.getLogger(__name__)


def _settings(ctx: click.Context) -> AppSettings:
    return ctx.obj["settings"]


def _exit_with(ctx: click.Context, ok: bool) -> None:
    ctx.exit(0 if ok else 1)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="YAML configuration file. A missing file is not an error.",
)
@click.option(
    "-v", "--verbose", is_flag=True, help="Enable debug logging."
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Also append detailed logs to this file.",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Force colored output on or off. Defaults to on for terminals.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str,
    verbose: bool,
    log_file: Optional[str],
    color: Optional[bool],
):
    """
    Install, update, control and remove Phantom Tunnel.

    Without a subcommand the interactive menu is shown.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    setup_logging(log_level=log_level, use_color=color)

    if not is_running_as_root():
        log_phantom(
            "This tool must be run as root. Please use 'sudo phantom-manager' "
            "or 'sudo python3 install.py'.",
            "error",
            module_logger,
        )
        ctx.exit(1)

    cli_overrides: Dict[str, Any] = {"use_color": color}
    try:
        app_settings = load_app_settings(
            cli_overrides=cli_overrides,
            config_file_path=config_path,
            current_logger=module_logger,
        )
    except ValidationError as e:
        log_phantom(
            f"Invalid configuration: {e}", "error", module_logger
        )
        ctx.exit(1)

    setup_logging(
        log_level=log_level,
        log_file=log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
        colors=app_settings.colors,
        use_color=app_settings.use_color,
    )
    ctx.obj = {"settings": app_settings}

    if ctx.invoked_subcommand is None:
        ManagerMenu(app_settings, logger=module_logger).run()


@cli.command(name="install")
@click.pass_context
def install_command(ctx: click.Context):
    """Install Phantom Tunnel or update it to the latest release."""
    _exit_with(ctx, install_or_update(_settings(ctx), module_logger))


@cli.command(name="uninstall")
@click.option(
    "--yes", "assume_yes", is_flag=True, help="Do not ask for confirmation."
)
@click.pass_context
def uninstall_command(ctx: click.Context, assume_yes: bool):
    """Remove Phantom Tunnel, its service and all of its data."""
    _exit_with(
        ctx, uninstall(_settings(ctx), module_logger, assume_yes=assume_yes)
    )


@cli.command(name="restart")
@click.pass_context
def restart_command(ctx: click.Context):
    """Restart the Phantom service."""
    _exit_with(ctx, ServiceController(_settings(ctx), module_logger).restart())


@cli.command(name="stop")
@click.pass_context
def stop_command(ctx: click.Context):
    """Stop the Phantom service."""
    _exit_with(ctx, ServiceController(_settings(ctx), module_logger).stop())


@cli.command(name="status")
@click.pass_context
def status_command(ctx: click.Context):
    """Show the systemd status of the Phantom service."""
    _exit_with(ctx, ServiceController(_settings(ctx), module_logger).status())


@cli.command(name="logs")
@click.pass_context
def logs_command(ctx: click.Context):
    """Follow the Phantom service journal until Ctrl+C."""
    _exit_with(
        ctx, ServiceController(_settings(ctx), module_logger).view_logs()
    )


def main() -> None:
    cli(prog_name="phantom-manager")


if __name__ == "__main__":
    main()
