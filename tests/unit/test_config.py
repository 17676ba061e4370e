# tests/unit/test_config.py
from duo import config


def test_defaults_when_unset(tmp_duo_dir):
    assert config.get_timezone() == "America/Santiago"
    assert config.get_admin_pin() is None
    assert config.get_default_viewer() == "ambos"
    assert config.get_log_level() == "WARNING"


def test_blank_values_fall_back_to_defaults(tmp_duo_dir, monkeypatch):
    monkeypatch.setattr(config._config, "_data", {"timezone": "  ", "admin_pin": ""})
    assert config.get_timezone() == "America/Santiago"
    assert config.get_admin_pin() is None


def test_values_are_trimmed(tmp_duo_dir, monkeypatch):
    monkeypatch.setattr(config._config, "_data", {"admin_pin": 1234, "log_level": " debug "})
    assert config.get_admin_pin() == "1234"
    assert config.get_log_level() == "DEBUG"


def test_set_persists_yaml(tmp_duo_dir):
    config.set_admin_pin("9999")
    assert "admin_pin: '9999'" in (tmp_duo_dir / "config.yaml").read_text()


def test_corrupt_file_reads_as_empty(tmp_duo_dir):
    (tmp_duo_dir / "config.yaml").write_text("timezone: [unclosed")
    assert config.Config._read() == {}


def test_non_mapping_file_reads_as_empty(tmp_duo_dir):
    (tmp_duo_dir / "config.yaml").write_text("- just\n- a list\n")
    assert config.Config._read() == {}
