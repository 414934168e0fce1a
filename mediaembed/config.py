"""SQLite-backed embed configuration."""

from __future__ import annotations

import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "mediaembed.db"

# Default config values
DEFAULT_LAZY_LOAD = False
DEFAULT_WEB_PORT = 8080


@dataclass(frozen=True)
class EmbedConfig:
    """Embed configuration, passed explicitly to renderers."""

    lazy_load: bool
    web_port: int

    @classmethod
    def defaults(cls) -> EmbedConfig:
        return cls(
            lazy_load=DEFAULT_LAZY_LOAD,
            web_port=DEFAULT_WEB_PORT,
        )


def _ensure_data_dir(db_path: Path) -> None:
    """Create the data directory if it doesn't exist."""
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _init_schema(conn: sqlite3.Connection) -> None:
    """Create tables if they don't exist."""
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
    """)


def _config_to_dict(config: EmbedConfig) -> dict[str, str]:
    return {
        "lazy_load": "true" if config.lazy_load else "false",
        "web_port": str(config.web_port),
    }


def _dict_to_config(d: dict[str, str]) -> EmbedConfig:
    return EmbedConfig(
        lazy_load=d.get("lazy_load", "false").lower() in ("true", "1", "yes"),
        web_port=int(d.get("web_port", DEFAULT_WEB_PORT)),
    )


def get_db_path() -> Path:
    """Return the database path, ensuring the directory exists."""
    _ensure_data_dir(DEFAULT_DB_PATH)
    return DEFAULT_DB_PATH


def load_config(db_path: Optional[Path] = None) -> EmbedConfig:
    """Load config from SQLite. Returns defaults if no config exists."""
    path = db_path or get_db_path()
    _ensure_data_dir(path)

    with closing(sqlite3.connect(path)) as conn:
        conn.row_factory = sqlite3.Row
        _init_schema(conn)
        rows = conn.execute("SELECT key, value FROM config").fetchall()

    if not rows:
        return EmbedConfig.defaults()

    d = {row["key"]: row["value"] for row in rows}
    return _dict_to_config(d)


def save_config(config: EmbedConfig, db_path: Optional[Path] = None) -> None:
    """Save config to SQLite."""
    path = db_path or get_db_path()
    _ensure_data_dir(path)

    with closing(sqlite3.connect(path)) as conn:
        _init_schema(conn)
        conn.executemany(
            "INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
            _config_to_dict(config).items(),
        )
        conn.commit()
