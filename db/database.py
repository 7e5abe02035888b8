import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from config import load_config
from .schema import SCHEMA_SQL, INDEXES_SQL, SCHEMA_VERSION

DB_PATH: Optional[Path] = None


def get_db_path(config: Optional[dict] = None) -> Path:
    """Resolve the database path: module override first, then config."""
    if DB_PATH is not None:
        return Path(DB_PATH)
    config = config or load_config()
    return Path(config["database"]["path"])


def init_db():
    """Initialize the database by creating tables and indexes if they don't exist."""
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_conn(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
        conn.executescript(INDEXES_SQL)
        ensure_schema_version(conn)
        conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")


def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)


@contextmanager
def get_conn(db_path: Optional[Path] = None, timeout: Optional[float] = None):
    """Context manager for SQLite connection, using row_factory for dict-like rows.

    Path and timeout fall back to config only when the caller does not pass them.
    """
    if db_path is None:
        db_path = get_db_path()
    if timeout is None:
        timeout = float(load_config()["database"]["timeout"])
    conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()
