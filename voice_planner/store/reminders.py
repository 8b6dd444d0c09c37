import sqlite3
from datetime import datetime

from voice_planner.tools.models import Reminder, ReminderType

from .database import NotFoundError, now_iso, to_db_time, transaction


def _to_reminder(row: sqlite3.Row) -> Reminder:
    data = dict(row)
    data["is_sent"] = bool(data["is_sent"])
    return Reminder(**data)


def get_reminder(db: sqlite3.Connection, reminder_id: int) -> Reminder | None:
    row = db.execute("SELECT * FROM reminders WHERE id = ?", (reminder_id,)).fetchone()
    return _to_reminder(row) if row else None


def create_reminder(
    db: sqlite3.Connection,
    user_id: int,
    message: str,
    reminder_time: datetime,
    reminder_type: ReminderType,
    *,
    task_id: int | None = None,
    time_block_id: int | None = None,
) -> Reminder:
    try:
        with transaction(db):
            cur = db.execute(
                "INSERT INTO reminders (user_id, task_id, time_block_id, message, reminder_time, is_sent, "
                "reminder_type, created_at) VALUES (?, ?, ?, ?, ?, 0, ?, ?)",
                (
                    user_id,
                    task_id,
                    time_block_id,
                    message,
                    to_db_time(reminder_time),
                    ReminderType(reminder_type).value,
                    now_iso(),
                ),
            )
    except sqlite3.IntegrityError as e:
        raise ValueError("Reminder references an unknown task or time block") from e
    return get_reminder(db, cur.lastrowid)


def get_pending_reminders(
    db: sqlite3.Connection,
    user_id: int | None = None,
    now: datetime | None = None,
) -> list[Reminder]:
    """Unsent reminders that are already due."""
    sql = "SELECT * FROM reminders WHERE is_sent = 0 AND reminder_time <= ?"
    params: list = [to_db_time(now or datetime.now())]
    if user_id is not None:
        sql += " AND user_id = ?"
        params.append(user_id)
    sql += " ORDER BY reminder_time, id"
    return [_to_reminder(r) for r in db.execute(sql, params).fetchall()]


def mark_reminder_sent(db: sqlite3.Connection, reminder_id: int) -> Reminder:
    with transaction(db):
        cur = db.execute("UPDATE reminders SET is_sent = 1 WHERE id = ?", (reminder_id,))
    if cur.rowcount == 0:
        raise NotFoundError(f"Reminder with id {reminder_id} not found")
    return get_reminder(db, reminder_id)
