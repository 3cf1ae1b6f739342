import ntpath

import pytest

from clew.initcfg import create_file_if_not_exists, generate_default_config


@pytest.mark.parametrize("check", ["output: text", "history_max:", "AWS settings", "aliases:"])
def test_generate_default_config_contains(check):
    assert check in generate_default_config("/home/user")


def test_posix_history_path():
    config = generate_default_config("/home/user", "linux")
    assert "# history_file: ~/.clew_history.json" in config
    assert "# log_group: /my/app/logs" in config


def test_windows_history_path():
    home = "C:\\Users\\me"
    config = generate_default_config(home, "win32")
    assert f"# history_file: {ntpath.join(home, '.clew_history.json')}" in config


def test_create_new_file(tmp_path):
    path = tmp_path / "sub" / "dir" / "config.yaml"
    assert create_file_if_not_exists(path, "output: text\n") is True
    assert path.read_text() == "output: text\n"


def test_existing_file_kept(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("original")
    assert create_file_if_not_exists(path, "new") is False
    assert path.read_text() == "original"


def test_force_overwrites(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("original")
    assert create_file_if_not_exists(path, "new", force=True) is True
    assert path.read_text() == "new"