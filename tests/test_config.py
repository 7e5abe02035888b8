import config


def test_load_config_reads_sections(config_dir):
    loaded = config.load_config()
    assert loaded["scheduler"]["intervals"] == [1, 3, 7, 14, 30]
    assert loaded["database"]["path"] == (config_dir / "versecoach.db").as_posix()
    assert loaded["logging"]["level"] == "WARNING"
    assert loaded["logging"]["json"] is False


def test_env_overrides(config_dir, monkeypatch):
    monkeypatch.setenv("VERSECOACH_INTERVALS", "2, 5,10")
    monkeypatch.setenv("VERSECOACH_LOG_JSON", "true")
    monkeypatch.setenv("VERSECOACH_DB_TIMEOUT", "1.5")
    loaded = config.load_config()
    assert loaded["scheduler"]["intervals"] == [2, 5, 10]
    assert loaded["logging"]["json"] is True
    assert loaded["database"]["timeout"] == 1.5


def test_example_config_copied_when_missing(tmp_path, monkeypatch):
    config_dir = tmp_path / "fresh"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_dir / "config.toml")
    monkeypatch.delenv("VERSECOACH_INTERVALS", raising=False)
    monkeypatch.delenv("VERSECOACH_DB_PATH", raising=False)
    loaded = config.load_config()
    assert (config_dir / "config.toml").exists()
    assert loaded["scheduler"]["intervals"] == [1, 3, 7, 14, 30]
    assert loaded["database"]["path"] == str(config_dir / "versecoach.db")


def test_get_config_value(config_dir):
    assert config.get_config_value("scheduler", "intervals") == [1, 3, 7, 14, 30]
    assert config.get_config_value("missing", "key", "fallback") == "fallback"
