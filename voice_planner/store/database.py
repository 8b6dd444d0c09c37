"""sqlite connection, schema and shared helpers for the persistence layer."""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime

logger = logging.getLogger(__name__)

DATABASE_PATH = os.getenv("DATABASE_PATH", "./data/voice_planner.db")

SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        voice_preference TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        title TEXT NOT NULL,
        description TEXT,
        priority TEXT NOT NULL DEFAULT 'medium',
        status TEXT NOT NULL DEFAULT 'pending',
        due_date TEXT,
        estimated_duration INTEGER,
        actual_duration INTEGER,
        tags JSON NOT NULL DEFAULT '[]',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS conversations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        message TEXT NOT NULL,
        response TEXT NOT NULL,
        message_type TEXT NOT NULL,
        response_type TEXT NOT NULL DEFAULT 'text',
        intent TEXT,
        created_at TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS time_blocks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        task_id INTEGER REFERENCES tasks(id) ON DELETE SET NULL,
        title TEXT NOT NULL,
        start_time TEXT NOT NULL,
        end_time TEXT NOT NULL,
        is_ai_suggested INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS reminders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        task_id INTEGER REFERENCES tasks(id) ON DELETE SET NULL,
        time_block_id INTEGER REFERENCES time_blocks(id) ON DELETE SET NULL,
        message TEXT NOT NULL,
        reminder_time TEXT NOT NULL,
        is_sent INTEGER NOT NULL DEFAULT 0,
        reminder_type TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
"""

_db: sqlite3.Connection | None = None

# One connection is shared by every request thread; writers take turns.
_write_lock = threading.RLock()


class NotFoundError(LookupError):
    """Raised when a referenced row (user, task, reminder) does not exist."""


class ConflictError(ValueError):
    """Raised when a write references a row that disappeared after it was read."""


def connect(path: str = DATABASE_PATH) -> sqlite3.Connection:
    if path != ":memory:":
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
    db = sqlite3.connect(path, check_same_thread=False)
    db.row_factory = sqlite3.Row
    if path != ":memory:":
        db.execute("PRAGMA journal_mode=WAL")
    db.execute("PRAGMA foreign_keys=ON")
    db.executescript(SCHEMA)
    db.commit()
    logger.info("Database ready at %s", path)
    return db


def get_connection() -> sqlite3.Connection:
    global _db
    if _db is None:
        _db = connect(DATABASE_PATH)
    return _db


@contextmanager
def transaction(db: sqlite3.Connection):
    """
    Commit on success, roll back on error. Holds the write lock for the whole
    block so another thread's commit cannot flush a half-finished write.
    """
    with _write_lock:
        with db:
            yield db


def to_db_time(value: datetime | None) -> str | None:
    """Aware datetimes are stored as local naive time so string order is time order."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.isoformat()


def now_iso() -> str:
    return datetime.now().isoformat()
