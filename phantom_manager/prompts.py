# phantom_manager/prompts.py
# -*- coding: utf-8 -*-
"""
Interactive prompts used by the manager operations.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

import click

from common.command_utils import log_phantom
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import InvalidPortError

module_logger = logging.getLogger(__name__)


@dataclass
class FirstRunAnswers:
    """Values passed to the binary's one-time setup flags."""

    port: str
    username: str
    password: str = field(repr=False)


def prompt_confirmation(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Ask a yes/no question defaulting to No. Only 'y' or 'Y' confirms; end of
    input counts as No.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        user_input = click.prompt(
            f"{prompt_message} [y/N]",
            default="",
            show_default=False,
        )
    except click.Abort:
        log_phantom(
            f"No user input (EOF), defaulting to 'N' for prompt: '{prompt_message}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
    return user_input.strip() in ("y", "Y")


def validate_port(value: str, app_settings: AppSettings) -> str:
    """
    Return the port unchanged if it matches the configured pattern.

    Raises:
        InvalidPortError: The value is not a number.
    """
    if not re.fullmatch(app_settings.first_run.port_pattern, value):
        raise InvalidPortError(value)
    return value


def prompt_first_run(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> FirstRunAnswers:
    """
    Collect the panel port, admin username and admin password.

    The port is checked before the other questions are asked. The password
    is read without echo.

    Raises:
        InvalidPortError: The port is not a number.
    """
    logger_to_use = current_logger if current_logger else module_logger
    first_run = app_settings.first_run
    log_phantom(
        "First-time setup: Please provide initial configuration.",
        "info",
        logger_to_use,
        app_settings,
    )

    port = click.prompt(
        "Enter the port for the web panel (e.g., 8080)",
        default="",
        show_default=False,
    ).strip()
    validate_port(port, app_settings)

    username = click.prompt(
        f"Enter the admin username for the panel [default: {first_run.default_username}]",
        default="",
        show_default=False,
    ).strip()

    password = click.prompt(
        f"Enter the admin password for the panel [default: {first_run.default_password}]",
        default="",
        show_default=False,
        hide_input=True,
    )

    return FirstRunAnswers(
        port=port,
        username=username or first_run.default_username,
        password=password or first_run.default_password,
    )
