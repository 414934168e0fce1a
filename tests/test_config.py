"""Tests for config module."""

import sqlite3
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mediaembed.config import EmbedConfig, load_config, save_config


@pytest.fixture
def temp_db():
    """Use a temporary database for tests."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp) / "test.db"


def test_load_config_defaults(temp_db):
    """Empty DB returns default config."""
    config = load_config(temp_db)
    assert config.lazy_load is False
    assert config.web_port == 8080
    assert config == EmbedConfig.defaults()


def test_save_and_load_config(temp_db):
    """Config round-trip."""
    config = EmbedConfig(lazy_load=True, web_port=9000)
    save_config(config, temp_db)
    loaded = load_config(temp_db)
    assert loaded.lazy_load is True
    assert loaded.web_port == 9000


def test_save_overwrites(temp_db):
    save_config(EmbedConfig(lazy_load=True, web_port=9000), temp_db)
    save_config(EmbedConfig(lazy_load=False, web_port=9001), temp_db)
    assert load_config(temp_db) == EmbedConfig(lazy_load=False, web_port=9001)


def test_creates_missing_directory(temp_db):
    nested = temp_db.parent / "a" / "b" / "test.db"
    save_config(EmbedConfig.defaults(), nested)
    assert nested.exists()


def test_lazy_load_flag_spellings(temp_db):
    """Stored flag values are read case-insensitively."""
    save_config(EmbedConfig.defaults(), temp_db)
    conn = sqlite3.connect(temp_db)
    conn.execute("UPDATE config SET value = 'YES' WHERE key = 'lazy_load'")
    conn.commit()
    conn.close()
    assert load_config(temp_db).lazy_load is True


def test_config_is_immutable():
    config = EmbedConfig.defaults()
    with pytest.raises(AttributeError):
        config.lazy_load = True


def test_connection_closed_when_query_fails(temp_db):
    """A failing statement still closes the connection."""
    conn = MagicMock()
    conn.executescript.side_effect = sqlite3.OperationalError("disk I/O error")
    with patch("mediaembed.config.sqlite3.connect", return_value=conn):
        with pytest.raises(sqlite3.OperationalError):
            load_config(temp_db)
        with pytest.raises(sqlite3.OperationalError):
            save_config(EmbedConfig.defaults(), temp_db)
    assert conn.close.call_count == 2
