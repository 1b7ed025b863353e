# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence, Union

from common.core_utils import SUCCESS_LEVEL
from phantom_manager.config_models import AppSettings

module_logger = logging.getLogger(__name__)

MASK = "****"


def log_phantom(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a message at a named level.

    Args:
        message (str): The log message to be recorded.
        level (str): One of "debug", "info", "success", "warning", "error"
            or "critical". Defaults to "info".
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not provided,
            a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings. Accepted so callers can
            pass their settings through uniformly.
        exc_info (bool): Include exception details in the log. Defaults to False.

    Returns:
        None
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    elif level == "success":
        effective_logger.log(SUCCESS_LEVEL, message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def mask_secrets(text: str, secrets: Optional[Sequence[str]]) -> str:
    """Replace every non-empty secret in ``text`` with a fixed mask."""
    if not secrets:
        return text
    for secret in secrets:
        if secret:
            text = text.replace(secret, MASK)
    return text


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    secrets: Optional[Sequence[str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results.

    The returned ``CompletedProcess`` is the result callers branch on: with
    ``check=False`` a non-zero ``returncode`` is an ordinary value, with
    ``check=True`` it raises ``CalledProcessError`` after logging.

    Args:
        command (Union[List[str], str]): The command to execute. A list is run
            directly; a string requires ``shell=True``.
        app_settings (Optional[AppSettings]): Application settings passed through to logging.
        check (bool): Raise CalledProcessError on a non-zero exit code. Defaults to True.
        shell (bool): Run through the shell. Defaults to False.
        capture_output (bool): Capture stdout and stderr instead of inheriting
            the terminal. Defaults to False.
        text (bool): Decode output streams as text. Defaults to True.
        cmd_input (Optional[str]): Data passed to the command's standard input.
        current_logger (Optional[logging.Logger]): Logger to use; defaults to the module logger.
        cwd (Optional[str]): Working directory for the command.
        env (Optional[Dict[str, str]]): Environment for the command.
        secrets (Optional[Sequence[str]]): Values masked in every logged line.

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: Non-zero exit code with ``check=True``.
        FileNotFoundError: The executable was not found.
    """
    effective_logger = current_logger if current_logger else module_logger
    command_to_run: Union[List[str], str]

    if shell:
        command_to_run = (
            " ".join(command) if isinstance(command, list) else command
        )
        command_to_log_str = str(command_to_run)
    else:
        if isinstance(command, str):
            log_phantom(
                f"Running string command '{mask_secrets(command, secrets)}' without shell=True. Consider list format.",
                "warning",
                effective_logger,
                app_settings,
            )
            command_to_run = command.split()
            command_to_log_str = command
        else:
            command_to_run = list(command)
            command_to_log_str = subprocess.list2cmdline(command_to_run)

    command_to_log_str = mask_secrets(command_to_log_str, secrets)
    log_phantom(
        f"Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}".rstrip(),
        "debug",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
        if capture_output:
            if result.stdout and result.stdout.strip():
                log_phantom(
                    f"   stdout: {mask_secrets(result.stdout.strip(), secrets)}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if result.stderr and result.stderr.strip():
                log_phantom(
                    f"   stderr: {mask_secrets(result.stderr.strip(), secrets)}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        stdout_info = (
            e.stdout.strip()
            if e.stdout and hasattr(e.stdout, "strip")
            else "N/A"
        )
        stderr_info = (
            e.stderr.strip()
            if e.stderr and hasattr(e.stderr, "strip")
            else "N/A"
        )

        log_phantom(
            f"Command `{command_to_log_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if stdout_info != "N/A":
            log_phantom(
                f"   stdout: {mask_secrets(stdout_info, secrets)}",
                "error",
                effective_logger,
                app_settings,
            )
        if stderr_info != "N/A":
            log_phantom(
                f"   stderr: {mask_secrets(stderr_info, secrets)}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_phantom(
            f"Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None
