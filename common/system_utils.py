# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the Phantom Tunnel manager.

This module reports host facts the installer branches on: the CPU
architecture and whether the process runs with root privileges.
"""

import logging
import os
import platform
from typing import Optional

from common.command_utils import log_phantom
from phantom_manager.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def get_machine_architecture(
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Return the machine hardware name, as `uname -m` reports it
    (e.g. 'x86_64', 'aarch64').
    """
    logger_to_use = current_logger if current_logger else module_logger
    arch = platform.machine()
    log_phantom(
        f"Detected machine architecture: {arch or 'unknown'}",
        "debug",
        logger_to_use,
        app_settings,
    )
    return arch


def is_running_as_root() -> bool:
    """True when the effective user id is 0."""
    return os.geteuid() == 0
