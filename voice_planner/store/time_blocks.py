import sqlite3
from datetime import date, datetime, time, timedelta
from typing import Iterable

from voice_planner.tools.models import GeneratedBlock, TimeBlock

from .database import ConflictError, now_iso, to_db_time, transaction

INSERT_SQL = (
    "INSERT INTO time_blocks (user_id, task_id, title, start_time, end_time, is_ai_suggested, created_at, updated_at) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)


def _to_block(row: sqlite3.Row) -> TimeBlock:
    data = dict(row)
    data["is_ai_suggested"] = bool(data["is_ai_suggested"])
    return TimeBlock(**data)


def _fetch(db: sqlite3.Connection, ids: list[int]) -> list[TimeBlock]:
    blocks = []
    for block_id in ids:
        row = db.execute("SELECT * FROM time_blocks WHERE id = ?", (block_id,)).fetchone()
        blocks.append(_to_block(row))
    return blocks


def create_time_block(
    db: sqlite3.Connection,
    user_id: int,
    title: str,
    start_time: datetime,
    end_time: datetime,
    *,
    task_id: int | None = None,
    is_ai_suggested: bool = False,
) -> TimeBlock:
    ts = now_iso()
    try:
        with transaction(db):
            cur = db.execute(
                INSERT_SQL,
                (user_id, task_id, title, to_db_time(start_time), to_db_time(end_time), int(is_ai_suggested), ts, ts),
            )
    except sqlite3.IntegrityError as e:
        raise ValueError("Time block references an unknown task") from e
    return _fetch(db, [cur.lastrowid])[0]


def create_generated_blocks(db: sqlite3.Connection, user_id: int, blocks: Iterable[GeneratedBlock]) -> list[TimeBlock]:
    """
    Persist a generated schedule in one transaction, keeping generation order.
    Raises ConflictError (and stores nothing) if a planned task was deleted
    after the schedule was computed.
    """
    ts = now_iso()
    ids = []
    try:
        with transaction(db):
            for block in blocks:
                cur = db.execute(
                    INSERT_SQL,
                    (
                        user_id,
                        block.task_id,
                        block.title,
                        to_db_time(block.start_time),
                        to_db_time(block.end_time),
                        int(block.is_ai_suggested),
                        ts,
                        ts,
                    ),
                )
                ids.append(cur.lastrowid)
    except sqlite3.IntegrityError as e:
        raise ConflictError("Generated schedule references a task that no longer exists") from e
    return _fetch(db, ids)


def get_user_time_blocks(db: sqlite3.Connection, user_id: int, day: date | None = None) -> list[TimeBlock]:
    sql = "SELECT * FROM time_blocks WHERE user_id = ?"
    params: list = [user_id]
    if day is not None:
        start_of_day = datetime.combine(day, time.min)
        sql += " AND start_time >= ? AND start_time < ?"
        params += [to_db_time(start_of_day), to_db_time(start_of_day + timedelta(days=1))]
    sql += " ORDER BY start_time, id"
    return [_to_block(r) for r in db.execute(sql, params).fetchall()]
