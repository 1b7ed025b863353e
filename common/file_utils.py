# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: idempotent removals and a scoped temporary
directory.
"""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from phantom_manager.config_models import AppSettings

from .command_utils import log_phantom

module_logger = logging.getLogger(__name__)


def path_present(path: Path) -> bool:
    """True for an existing path or a symlink, including a dangling one."""
    return path.is_symlink() or path.exists()


def remove_file_if_exists(
    file_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    description: str = "file",
) -> bool:
    """
    Remove a regular file or symlink if it is present.

    Parameters:
        file_path (Union[str, Path]): The file to remove.
        app_settings (Optional[AppSettings]): Application settings passed through to logging.
        current_logger (Optional[logging.Logger]): Logger to use; defaults to the module logger.
        description (str): Wording used in the log line, e.g. "executable".

    Returns:
        bool: True if something was removed, False if nothing was there.

    Raises:
        IsADirectoryError: The path is a directory.
        OSError: The removal failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path = Path(file_path)

    if not path_present(path):
        log_phantom(
            f"No {description} at {path}. Skipping.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False
    if path.is_dir() and not path.is_symlink():
        raise IsADirectoryError(f"Refusing to remove directory {path} as a {description}.")

    log_phantom(
        f"Removing {description}: {path}",
        "info",
        logger_to_use,
        app_settings,
    )
    path.unlink()
    return True


def remove_tree_if_exists(
    directory_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Remove a directory and all its contents if it exists.

    Returns:
        bool: True if the directory was removed, False if it did not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path = Path(directory_path)

    if path.is_symlink() or not path.exists():
        log_phantom(
            f"Directory {path} not found. Skipping.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False

    log_phantom(
        f"Removing data directory and all its contents: {path}",
        "info",
        logger_to_use,
        app_settings,
    )
    shutil.rmtree(path)
    return True


@contextmanager
def temporary_directory(
    app_settings: Optional[AppSettings],
    prefix: str = "phantom-",
    current_logger: Optional[logging.Logger] = None,
) -> Iterator[Path]:
    """
    Yield a fresh temporary directory that is removed when the block exits,
    whether it returns normally, returns early or raises.

    The parent directory comes from ``app_settings.paths.temp_root`` when set,
    otherwise the system default is used.
    """
    logger_to_use = current_logger if current_logger else module_logger
    parent = (
        app_settings.paths.temp_root
        if app_settings and app_settings.paths.temp_root
        else None
    )
    if parent is not None:
        Path(parent).mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(
        prefix=prefix, dir=str(parent) if parent else None
    ) as tmp_dir:
        log_phantom(
            f"Created temporary directory {tmp_dir}",
            "debug",
            logger_to_use,
            app_settings,
        )
        try:
            yield Path(tmp_dir)
        finally:
            log_phantom(
                f"Removing temporary directory {tmp_dir}",
                "debug",
                logger_to_use,
                app_settings,
            )
