# tests/conftest.py
import logging
import subprocess
from unittest.mock import MagicMock

import pytest

from phantom_manager.config_models import AppSettings, PathSettings
from phantom_manager.systemd import SystemdManager


@pytest.fixture
def app_settings(tmp_path):
    """Settings with every path the manager touches under tmp_path."""
    return AppSettings(
        paths=PathSettings(
            install_dir=tmp_path / "usr" / "local" / "bin",
            working_dir=tmp_path / "etc" / "phantom",
            systemd_dir=tmp_path / "etc" / "systemd" / "system",
            legacy_dir=tmp_path / "root",
            temp_root=tmp_path / "tmp",
        ),
        temp_files=[
            tmp_path / "tmp" / "phantom.pid",
            tmp_path / "tmp" / "phantom-panel.log",
            tmp_path / "tmp" / "phantom-tunnel.log",
        ],
        status_grace_seconds=0,
        use_color=False,
    )


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_systemd():
    """A SystemdManager double reporting an unknown, inactive unit."""
    systemd = MagicMock(spec=SystemdManager)
    systemd.unit_known.return_value = False
    systemd.is_active.return_value = False
    systemd.is_enabled.return_value = False
    systemd.status.return_value = 0
    return systemd


@pytest.fixture
def completed():
    """Factory for CompletedProcess results."""

    def _completed(args=None, returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(
            args or [], returncode, stdout=stdout, stderr=stderr
        )

    return _completed
