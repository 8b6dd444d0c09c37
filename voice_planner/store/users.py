import sqlite3

from voice_planner.tools.models import User

from .database import now_iso, transaction


def _to_user(row: sqlite3.Row) -> User:
    return User(**dict(row))


def create_user(db: sqlite3.Connection, email: str, name: str, voice_preference: str | None = None) -> User:
    ts = now_iso()
    try:
        with transaction(db):
            cur = db.execute(
                "INSERT INTO users (email, name, voice_preference, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (email, name, voice_preference, ts, ts),
            )
    except sqlite3.IntegrityError as e:
        raise ValueError(f"User with email {email} already exists") from e
    return get_user(db, cur.lastrowid)


def get_user(db: sqlite3.Connection, user_id: int) -> User | None:
    row = db.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    if row is None:
        return None
    return _to_user(row)
