from pathlib import Path

import yaml

from window_restore.config import Config


def test_creates_default_config_file(tmp_path):
    config = Config(tmp_path / "cfg")

    assert config.config_file.exists()
    assert yaml.safe_load(config.config_file.read_text()) == config.defaults
    assert config.get("restore.pacing_delay") == 0.1
    assert config.get("restore.command_timeout") == 10
    assert "Terminal" in config.get("matching.multi_window_apps")


def test_user_values_merge_with_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text(
        "restore:\n  pacing_delay: 0.25\nmatching:\n  title_strategies:\n    Preview: prefix\n"
    )

    config = Config(tmp_path)

    assert config.get("restore.pacing_delay") == 0.25
    assert config.get("restore.command_timeout") == 10
    assert config.get("matching.title_strategies") == {
        "Google Chrome": "prefix",
        "Code": "prefix",
        "Visual Studio Code": "prefix",
        "Preview": "prefix",
    }
    assert config.defaults["restore"]["pacing_delay"] == 0.1


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text("restore: [unclosed\n")

    config = Config(tmp_path)

    assert config.get("restore.pacing_delay") == 0.1


def test_get_missing_key_returns_default(tmp_path):
    config = Config(tmp_path)
    assert config.get("restore.nope", 7) == 7
    assert config.get("restore.pacing_delay.deeper") is None


def test_log_level_comes_from_the_config_file(tmp_path):
    (tmp_path / "config.yaml").write_text("logging:\n  level: debug\n")

    config = Config(tmp_path)

    assert config.log_level == "DEBUG"


def test_config_is_edited_on_disk_only(tmp_path):
    config = Config(tmp_path)

    assert not hasattr(config, "set")
    config.save_config()
    assert Config(tmp_path).config == config.defaults


def test_snapshot_path_is_expanded(tmp_path):
    assert Config(tmp_path).snapshot_path == Path.home() / ".window-positions.json"

    (tmp_path / "config.yaml").write_text(f"snapshot:\n  path: {tmp_path / 'layout.json'}\n")
    assert Config(tmp_path).snapshot_path == tmp_path / "layout.json"

    (tmp_path / "config.yaml").write_text("snapshot:\n  path: ~/layouts/work.json\n")
    assert Config(tmp_path).snapshot_path == Path.home() / "layouts" / "work.json"
