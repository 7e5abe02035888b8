import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".versecoach"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_INTERVALS = [1, 3, 7, 14, 30]


def _parse_intervals(value: Any) -> List[int]:
    if isinstance(value, str):
        value = [item for item in value.split(",") if item.strip()]
    intervals = [max(1, int(item)) for item in value or []]
    return intervals or list(DEFAULT_INTERVALS)


def load_config() -> Dict[str, Any]:
    """Load config from ~/.versecoach/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    database_cfg = config.get("database", {})
    config["database"] = {
        "path": os.getenv("VERSECOACH_DB_PATH", database_cfg.get("path", str(CONFIG_DIR / "versecoach.db"))),
        "timeout": float(os.getenv("VERSECOACH_DB_TIMEOUT", database_cfg.get("timeout", 5.0))),
    }
    scheduler_cfg = config.get("scheduler", {})
    config["scheduler"] = {
        "intervals": _parse_intervals(os.getenv("VERSECOACH_INTERVALS", scheduler_cfg.get("intervals", DEFAULT_INTERVALS))),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("VERSECOACH_LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
        "json": os.getenv(
            "VERSECOACH_LOG_JSON",
            str(logging_cfg.get("json", False))
        ).lower() == "true",
    }
    return config


def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('scheduler', 'intervals')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
