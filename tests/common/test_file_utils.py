import pytest

from common.file_utils import (
    path_present,
    remove_file_if_exists,
    remove_tree_if_exists,
    temporary_directory,
)


def test_path_present_for_dangling_symlink(tmp_path):
    link = tmp_path / "phantom-tunnel"
    link.symlink_to(tmp_path / "missing")

    assert not link.exists()
    assert path_present(link) is True
    assert path_present(tmp_path / "nothing-here") is False


def test_remove_file_if_exists_removes_file(tmp_path, app_settings, mock_logger):
    target = tmp_path / "phantom"
    target.write_text("binary")

    assert remove_file_if_exists(
        target, app_settings, mock_logger, description="executable"
    )
    assert not target.exists()
    mock_logger.info.assert_called_once_with(
        f"Removing executable: {target}", exc_info=False
    )


def test_remove_file_if_exists_missing_is_skipped(
    tmp_path, app_settings, mock_logger
):
    assert not remove_file_if_exists(
        tmp_path / "absent", app_settings, mock_logger
    )
    mock_logger.info.assert_not_called()


def test_remove_file_if_exists_removes_dangling_symlink(tmp_path, app_settings):
    link = tmp_path / "phantom-tunnel"
    link.symlink_to(tmp_path / "phantom")

    assert remove_file_if_exists(link, app_settings)
    assert not link.is_symlink()


def test_remove_file_if_exists_symlink_keeps_target(tmp_path, app_settings):
    target = tmp_path / "phantom"
    target.write_text("binary")
    link = tmp_path / "phantom-tunnel"
    link.symlink_to(target)

    remove_file_if_exists(link, app_settings)

    assert not link.is_symlink()
    assert target.read_text() == "binary"


def test_remove_file_if_exists_refuses_directory(tmp_path, app_settings):
    directory = tmp_path / "phantom.pid"
    directory.mkdir()

    with pytest.raises(IsADirectoryError):
        remove_file_if_exists(directory, app_settings)
    assert directory.is_dir()


def test_remove_tree_if_exists(tmp_path, app_settings, mock_logger):
    working_dir = tmp_path / "etc" / "phantom"
    (working_dir / "certs").mkdir(parents=True)
    (working_dir / "config.db").write_text("db")
    (working_dir / "certs" / "server.crt").write_text("cert")

    assert remove_tree_if_exists(working_dir, app_settings, mock_logger)
    assert not working_dir.exists()
    mock_logger.info.assert_called_once_with(
        f"Removing data directory and all its contents: {working_dir}",
        exc_info=False,
    )


def test_remove_tree_if_exists_missing(tmp_path, app_settings):
    assert not remove_tree_if_exists(tmp_path / "absent", app_settings)


def test_temporary_directory_removed_on_success(app_settings):
    temp_root = app_settings.paths.temp_root

    with temporary_directory(app_settings) as tmp_dir:
        assert tmp_dir.is_dir()
        assert tmp_dir.parent == temp_root
        assert tmp_dir.name.startswith("phantom-")
        (tmp_dir / "phantom").write_bytes(b"binary")

    assert not tmp_dir.exists()
    assert list(temp_root.iterdir()) == []


def test_temporary_directory_removed_on_error(app_settings):
    temp_root = app_settings.paths.temp_root

    with pytest.raises(RuntimeError):
        with temporary_directory(app_settings) as tmp_dir:
            (tmp_dir / "partial").write_bytes(b"half")
            raise RuntimeError("download interrupted")

    assert not tmp_dir.exists()
    assert list(temp_root.iterdir()) == []


def test_temporary_directory_without_settings_uses_system_default():
    with temporary_directory(None, prefix="phantom-test-") as tmp_dir:
        assert tmp_dir.is_dir()
    assert not tmp_dir.exists()
