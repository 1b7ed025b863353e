#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core utility functions for the project.

This module provides helper functions for:
- Logging setup with colored, labelled status lines on the console.
- A plain, timestamped format for the optional log file.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from phantom_manager.config_models import COLORS_DEFAULT, SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

DETAILED_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"
CONSOLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER = (
    "{log_prefix}%(symbol)s %(message)s"
)
CONSOLE_LOG_FORMAT_NO_PREFIX = "%(symbol)s %(message)s"


def _level_key(levelno: int) -> str:
    if levelno >= logging.CRITICAL:
        return "critical"
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warning"
    if levelno >= SUCCESS_LEVEL:
        return "success"
    if levelno >= logging.INFO:
        return "info"
    return "debug"


class StatusFormatter(logging.Formatter):
    """
    A formatter that prefixes each message with a status label such as
    ``[INFO]`` or ``[ERROR]``, optionally wrapped in an ANSI color.
    """

    def __init__(
        self,
        fmt=None,
        datefmt=None,
        style="%",
        validate=True,
        symbols: Optional[Dict[str, str]] = None,
        colors: Optional[Dict[str, str]] = None,
        use_color: bool = False,
    ):
        super().__init__(fmt, datefmt, style, validate)
        self.symbols = symbols or SYMBOLS_DEFAULT
        self.colors = colors or COLORS_DEFAULT
        self.use_color = use_color

    def format(self, record):
        key = _level_key(record.levelno)
        label = self.symbols.get(key, f"[{record.levelname}]")
        if self.use_color and key in self.colors:
            label = f"{self.colors[key]}{label}{self.colors.get('reset', '')}"
        record.symbol = label
        return super().format(record)


class MaxLevelFilter(logging.Filter):
    """Passes records strictly below ``max_level``."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
    colors: Optional[Dict[str, str]] = None,
    use_color: Optional[bool] = None,
) -> None:
    """
    Configures logging for the manager.

    Console output is split by level: records below ERROR go to stdout and
    ERROR and above go to stderr, each rendered as ``[LABEL] message``. When a
    log file is given, every record is also written there in a detailed,
    timestamped format without colors.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        Path of a log file to append to. Defaults to None (no file).
    log_to_console: bool
        Whether to log to the console. Defaults to True.
    log_prefix: Optional[str]
        Optional string placed in front of every console line.
    symbols: Optional[Dict[str, str]]
        Status labels per level name. Defaults to SYMBOLS_DEFAULT.
    colors: Optional[Dict[str, str]]
        ANSI color codes per level name. Defaults to COLORS_DEFAULT.
    use_color: Optional[bool]
        Force color on or off. None enables it when stdout is a terminal.

    Returns:
    None
    """
    handlers: List[logging.Handler] = []
    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode="a")
            file_handler.setFormatter(
                logging.Formatter(
                    DETAILED_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
                )
            )
            handlers.append(file_handler)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    if log_to_console:
        if use_color is None:
            use_color = sys.stdout.isatty()

        actual_prefix = (
            (log_prefix.strip() + " ")
            if log_prefix and log_prefix.strip()
            else ""
        )
        if actual_prefix:
            console_format = CONSOLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER.format(
                log_prefix=actual_prefix
            )
        else:
            console_format = CONSOLE_LOG_FORMAT_NO_PREFIX

        formatter = StatusFormatter(
            fmt=console_format,
            symbols=symbols,
            colors=colors,
            use_color=use_color,
        )

        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.addFilter(MaxLevelFilter(logging.ERROR))
        stdout_handler.setFormatter(formatter)
        handlers.append(stdout_handler)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(formatter)
        handlers.append(stderr_handler)

    if not handlers:  # pragma: no cover
        handlers.append(logging.NullHandler())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}."
    )
