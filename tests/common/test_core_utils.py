import logging
import sys

import pytest

from common.core_utils import (
    SUCCESS_LEVEL,
    MaxLevelFilter,
    StatusFormatter,
    setup_logging,
)
from phantom_manager.config_models import COLORS_DEFAULT


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


def _record(level, message="hello"):
    return logging.LogRecord(
        "phantom", level, __file__, 1, message, None, None
    )


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, "[DEBUG] hello"),
        (logging.INFO, "[INFO] hello"),
        (SUCCESS_LEVEL, "[SUCCESS] hello"),
        (logging.WARNING, "[WARN] hello"),
        (logging.ERROR, "[ERROR] hello"),
    ],
)
def test_status_formatter_labels(level, expected):
    formatter = StatusFormatter(fmt="%(symbol)s %(message)s")
    assert formatter.format(_record(level)) == expected


def test_status_formatter_colors_label_only():
    formatter = StatusFormatter(fmt="%(symbol)s %(message)s", use_color=True)
    output = formatter.format(_record(logging.ERROR))
    assert output == (
        f"{COLORS_DEFAULT['error']}[ERROR]{COLORS_DEFAULT['reset']} hello"
    )


def test_status_formatter_custom_symbols():
    formatter = StatusFormatter(
        fmt="%(symbol)s %(message)s", symbols={"info": "ℹ️"}
    )
    assert formatter.format(_record(logging.INFO)) == "ℹ️ hello"
    # Levels without a configured label fall back to the level name.
    assert formatter.format(_record(logging.ERROR)) == "[ERROR] hello"


def test_success_level_is_registered():
    assert logging.getLevelName(SUCCESS_LEVEL) == "SUCCESS"


def test_max_level_filter():
    level_filter = MaxLevelFilter(logging.ERROR)
    assert level_filter.filter(_record(logging.WARNING)) is True
    assert level_filter.filter(_record(logging.ERROR)) is False


def test_setup_logging_splits_console_by_level(restore_root_logger):
    setup_logging(log_level=logging.DEBUG, use_color=False)

    handlers = restore_root_logger.handlers
    assert restore_root_logger.level == logging.DEBUG
    assert len(handlers) == 2
    stdout_handler, stderr_handler = handlers
    assert stdout_handler.stream is sys.stdout
    assert stderr_handler.stream is sys.stderr
    assert stderr_handler.level == logging.ERROR
    assert any(isinstance(f, MaxLevelFilter) for f in stdout_handler.filters)


def test_setup_logging_routes_errors_to_stderr(restore_root_logger, capsys):
    setup_logging(log_level=logging.INFO, use_color=False)
    logger = logging.getLogger("phantom_manager.test")

    logger.info("Fetching the latest version from GitHub...")
    logger.log(SUCCESS_LEVEL, "Dependencies are satisfied.")
    logger.error("Unsupported architecture: mips.")

    captured = capsys.readouterr()
    assert "[INFO] Fetching the latest version from GitHub..." in captured.out
    assert "[SUCCESS] Dependencies are satisfied." in captured.out
    assert "Unsupported architecture" not in captured.out
    assert "[ERROR] Unsupported architecture: mips." in captured.err


def test_setup_logging_with_prefix(restore_root_logger, capsys):
    setup_logging(log_prefix="phantom", use_color=False)
    logging.getLogger("phantom_manager.test").info("hello")
    assert "phantom [INFO] hello" in capsys.readouterr().out


def test_setup_logging_with_file(restore_root_logger, tmp_path):
    log_file = tmp_path / "logs" / "manager.log"

    setup_logging(
        log_level=logging.DEBUG,
        log_file=str(log_file),
        log_to_console=False,
    )
    logging.getLogger("phantom_manager.test").warning("written to file")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert len(restore_root_logger.handlers) == 1
    content = log_file.read_text()
    assert "WARNING - phantom_manager.test" in content
    assert "written to file" in content


def test_setup_logging_without_handlers_uses_null_handler(restore_root_logger):
    setup_logging(log_to_console=False, log_file=None)
    assert len(restore_root_logger.handlers) == 1
    assert isinstance(restore_root_logger.handlers[0], logging.NullHandler)
