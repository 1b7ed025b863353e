import os
import stat
import subprocess

import pytest
import requests
from pytest_mock import MockerFixture

from phantom_manager.exceptions import (
    DownloadError,
    FirstRunSetupError,
    InvalidPortError,
)
from phantom_manager.installer import (
    install_binary,
    install_or_update,
    run_first_time_setup,
)
from phantom_manager.prompts import FirstRunAnswers
from phantom_manager.systemd import render_unit_file


def _fake_download(url, destination, app_settings, current_logger=None):
    destination.write_bytes(b"new-binary")
    return destination


@pytest.fixture
def install_mocks(mocker: MockerFixture):
    """Patch every external effect of an install on a supported host."""
    return {
        "architecture": mocker.patch(
            "phantom_manager.installer.get_machine_architecture",
            return_value="x86_64",
        ),
        "dependencies": mocker.patch(
            "phantom_manager.installer.ensure_dependencies"
        ),
        "tag": mocker.patch(
            "phantom_manager.installer.fetch_latest_tag", return_value="v1.2.0"
        ),
        "download": mocker.patch(
            "phantom_manager.installer.download_asset",
            side_effect=_fake_download,
        ),
        "prompt": mocker.patch(
            "phantom_manager.installer.prompt_first_run",
            return_value=FirstRunAnswers(
                port="8080", username="admin", password="hunter2"
            ),
        ),
        "run_command": mocker.patch("phantom_manager.installer.run_command"),
        "sleep": mocker.patch("phantom_manager.installer.time.sleep"),
    }


def test_install_binary_replaces_target_and_links(app_settings, tmp_path):
    downloaded = tmp_path / "download"
    downloaded.write_bytes(b"new-binary")
    install_dir = app_settings.paths.install_dir
    install_dir.mkdir(parents=True)
    app_settings.executable_path.write_bytes(b"old-binary")
    app_settings.symlink_path.symlink_to(install_dir / "somewhere-else")

    install_binary(downloaded, app_settings)

    target = app_settings.executable_path
    assert target.read_bytes() == b"new-binary"
    assert stat.S_IMODE(target.stat().st_mode) == 0o755
    assert app_settings.symlink_path.is_symlink()
    assert os.readlink(app_settings.symlink_path) == str(target)
    assert app_settings.paths.working_dir.is_dir()
    assert not downloaded.exists()


def test_successful_install(app_settings, install_mocks, mock_systemd):
    mock_systemd.is_active.side_effect = [False, True]

    assert install_or_update(app_settings, systemd=mock_systemd) is True

    target = app_settings.executable_path
    assert target.read_bytes() == b"new-binary"
    assert os.access(target, os.X_OK)
    assert app_settings.symlink_path.resolve() == target.resolve()
    assert app_settings.paths.working_dir.is_dir()
    assert app_settings.service_file_path.read_text() == render_unit_file(
        app_settings
    )
    install_mocks["download"].assert_called_once()
    assert install_mocks["download"].call_args.args[0] == (
        "https://github.com/0fariid0/Phantom-Tunnel/releases/download/"
        "v1.2.0/phantom-amd64"
    )
    mock_systemd.stop.assert_not_called()
    mock_systemd.daemon_reload.assert_called_once()
    mock_systemd.enable_now.assert_called_once()
    install_mocks["sleep"].assert_called_once_with(0)
    assert list(app_settings.paths.temp_root.iterdir()) == []


def test_first_install_runs_setup_with_answers(
    app_settings, install_mocks, mock_systemd
):
    mock_systemd.is_active.side_effect = [False, True]

    install_or_update(app_settings, systemd=mock_systemd)

    install_mocks["prompt"].assert_called_once()
    run_command = install_mocks["run_command"]
    run_command.assert_called_once()
    assert run_command.call_args.args[0] == [
        str(app_settings.executable_path),
        "--setup-port=8080",
        "--setup-user=admin",
        "--setup-pass=hunter2",
    ]
    assert run_command.call_args.kwargs["cwd"] == str(
        app_settings.paths.working_dir
    )
    assert run_command.call_args.kwargs["secrets"] == ["hunter2"]


def test_existing_config_skips_setup(
    app_settings, install_mocks, mock_systemd
):
    app_settings.paths.working_dir.mkdir(parents=True)
    app_settings.config_db_path.write_text("existing")
    mock_systemd.is_active.side_effect = [True, True]

    assert install_or_update(app_settings, systemd=mock_systemd) is True

    install_mocks["prompt"].assert_not_called()
    install_mocks["run_command"].assert_not_called()
    assert app_settings.config_db_path.read_text() == "existing"


def test_running_service_is_stopped_before_replacing_binary(
    app_settings, install_mocks, mock_systemd
):
    app_settings.paths.working_dir.mkdir(parents=True)
    app_settings.config_db_path.write_text("existing")
    mock_systemd.is_active.side_effect = [True, True]

    install_or_update(app_settings, systemd=mock_systemd)

    mock_systemd.stop.assert_called_once()


def test_unsupported_architecture_changes_nothing(
    app_settings, install_mocks, mock_systemd, mocker: MockerFixture
):
    install_mocks["architecture"].return_value = "mips"
    mock_get = mocker.patch("phantom_manager.release.requests.get")

    assert install_or_update(app_settings, systemd=mock_systemd) is False

    install_mocks["dependencies"].assert_not_called()
    install_mocks["tag"].assert_not_called()
    install_mocks["download"].assert_not_called()
    mock_get.assert_not_called()
    assert mock_systemd.method_calls == []
    assert not app_settings.paths.install_dir.exists()
    assert not app_settings.paths.working_dir.exists()
    assert not app_settings.service_file_path.exists()
    assert not app_settings.paths.temp_root.exists()


def test_empty_release_tag_stops_before_download(
    app_settings, mock_systemd, mocker: MockerFixture
):
    mocker.patch(
        "phantom_manager.installer.get_machine_architecture",
        return_value="aarch64",
    )
    mocker.patch("phantom_manager.installer.ensure_dependencies")
    mock_download = mocker.patch("phantom_manager.installer.download_asset")
    mock_get = mocker.patch("phantom_manager.release.requests.get")
    mock_get.return_value.json.return_value = {"tag_name": ""}

    assert install_or_update(app_settings, systemd=mock_systemd) is False

    mock_get.assert_called_once()
    mock_download.assert_not_called()
    assert not app_settings.executable_path.exists()


def test_failed_download_leaves_installation_untouched(
    app_settings, install_mocks, mock_systemd
):
    install_dir = app_settings.paths.install_dir
    install_dir.mkdir(parents=True)
    app_settings.executable_path.write_bytes(b"old-binary")
    install_mocks["download"].side_effect = DownloadError(
        "Download failed. Connection error: offline"
    )

    assert install_or_update(app_settings, systemd=mock_systemd) is False

    assert app_settings.executable_path.read_bytes() == b"old-binary"
    assert not app_settings.symlink_path.exists()
    assert not app_settings.service_file_path.exists()
    assert list(app_settings.paths.temp_root.iterdir()) == []
    mock_systemd.stop.assert_not_called()


def test_failed_http_download_removes_temp_dir(
    app_settings, mock_systemd, mocker: MockerFixture
):
    mocker.patch(
        "phantom_manager.installer.get_machine_architecture",
        return_value="x86_64",
    )
    mocker.patch("phantom_manager.installer.ensure_dependencies")
    mocker.patch(
        "phantom_manager.installer.fetch_latest_tag", return_value="v1.2.0"
    )
    mock_get = mocker.patch("phantom_manager.release.requests.get")
    response = mock_get.return_value.__enter__.return_value
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(
        "404 Not Found"
    )

    assert install_or_update(app_settings, systemd=mock_systemd) is False

    assert not app_settings.executable_path.exists()
    assert not app_settings.service_file_path.exists()
    assert list(app_settings.paths.temp_root.iterdir()) == []


def test_invalid_port_aborts_before_setup(
    app_settings, install_mocks, mock_systemd
):
    install_mocks["prompt"].side_effect = InvalidPortError("80a")

    assert install_or_update(app_settings, systemd=mock_systemd) is False

    install_mocks["run_command"].assert_not_called()
    mock_systemd.enable_now.assert_not_called()


def test_service_not_running_after_install(
    app_settings, install_mocks, mock_systemd, mock_logger
):
    mock_systemd.is_active.side_effect = [False, False]

    assert (
        install_or_update(app_settings, mock_logger, systemd=mock_systemd)
        is False
    )
    mock_logger.error.assert_called_once_with(
        "The service failed to start. Please check logs with: "
        "journalctl -u phantom.service",
        exc_info=False,
    )


def test_run_first_time_setup_failure_hides_password(
    app_settings, mocker: MockerFixture
):
    mocker.patch(
        "phantom_manager.installer.run_command",
        side_effect=subprocess.CalledProcessError(
            2, ["phantom", "--setup-pass=hunter2"]
        ),
    )
    answers = FirstRunAnswers(port="8080", username="admin", password="hunter2")

    with pytest.raises(FirstRunSetupError) as excinfo:
        run_first_time_setup(answers, app_settings)

    assert "hunter2" not in str(excinfo.value)
    assert "rc 2" in str(excinfo.value)
    assert excinfo.value.__cause__ is None
