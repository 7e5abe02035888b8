from pathlib import Path

import pytest

import config
from db import database


def _write_test_config(config_path: Path, db_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[database]",
                f"path = \"{db_path.as_posix()}\"",
                "timeout = 5.0",
                "",
                "[scheduler]",
                "intervals = [1, 3, 7, 14, 30]",
                "",
                "[logging]",
                "level = \"WARNING\"",
                "json = false",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / ".versecoach"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path, config_dir / "versecoach.db")

    for name in (
        "VERSECOACH_DB_PATH",
        "VERSECOACH_DB_TIMEOUT",
        "VERSECOACH_INTERVALS",
        "VERSECOACH_LOG_LEVEL",
        "VERSECOACH_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "DB_PATH", None)
    return config_dir


@pytest.fixture
def db(config_dir):
    database.init_db()
    return config_dir / "versecoach.db"
