"""Key-value blob storage on top of SQLite."""
import json
import logging
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.environ.get(
    "GARDEN_TUTOR_DB", str(Path.home() / ".garden_tutor" / "garden.db")
)

PROGRESS_KEY = "garden_progress_v1"
CUSTOM_IMAGES_KEY = "garden_custom_images_v1"

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the store table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


class KeyValueStore:
    """String-keyed blob store. Every write is a single upsert and commit."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_db(db_path)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        conn.close()
        return row["value"] if row else default

    def set(self, key: str, value: str) -> None:
        conn = get_connection(self.db_path)
        conn.execute(
            "INSERT INTO kv_store (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
            (key, value, value),
        )
        conn.commit()
        conn.close()



@dataclass
class Ok:
    value: Any


@dataclass
class ParseError:
    key: str
    message: str


def read_json(store: KeyValueStore, key: str) -> Union[Ok, ParseError, None]:
    """Read and decode a JSON blob.

    Returns None when the key is absent, Ok(value) when it decodes, and
    ParseError when a value is stored but is not valid JSON.
    """
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return Ok(json.loads(raw))
    except json.JSONDecodeError as e:
        return ParseError(key=key, message=str(e))


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value))
