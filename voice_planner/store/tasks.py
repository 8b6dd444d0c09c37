import json
import sqlite3
from datetime import datetime

from voice_planner.tools.models import Priority, Task, TaskStatus, WorkItem

from .database import NotFoundError, now_iso, to_db_time, transaction

UPDATABLE_FIELDS = (
    "title",
    "description",
    "priority",
    "status",
    "due_date",
    "estimated_duration",
    "actual_duration",
    "tags",
)

REQUIRED_FIELDS = ("title", "priority", "status")


def _to_task(row: sqlite3.Row) -> Task:
    data = dict(row)
    data["tags"] = json.loads(data.get("tags") or "[]")
    return Task(**data)


def _to_column(field: str, value):
    if value is None:
        return None
    if field == "tags":
        return json.dumps(list(value))
    if field in ("priority", "status"):
        return getattr(value, "value", value)
    if field == "due_date" and isinstance(value, datetime):
        return to_db_time(value)
    return value


def get_task(db: sqlite3.Connection, task_id: int) -> Task | None:
    row = db.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
    return _to_task(row) if row else None


def create_task(
    db: sqlite3.Connection,
    user_id: int,
    title: str,
    *,
    description: str | None = None,
    priority: Priority | None = None,
    due_date: datetime | None = None,
    estimated_duration: int | None = None,
    tags: list[str] | None = None,
) -> Task:
    ts = now_iso()
    with transaction(db):
        cur = db.execute(
            "INSERT INTO tasks (user_id, title, description, priority, status, due_date, "
            "estimated_duration, tags, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                user_id,
                title,
                description,
                _to_column("priority", priority or Priority.MEDIUM),
                TaskStatus.PENDING.value,
                _to_column("due_date", due_date),
                estimated_duration,
                _to_column("tags", tags or []),
                ts,
                ts,
            ),
        )
    return get_task(db, cur.lastrowid)


def update_task(db: sqlite3.Connection, task_id: int, **fields) -> Task:
    """
    Partial update: only the keyword arguments passed are written.
    Passing None for a nullable field clears it.
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown task fields: {sorted(unknown)}")
    cleared = [f for f in REQUIRED_FIELDS if f in fields and fields[f] is None]
    if cleared:
        raise ValueError(f"Task fields cannot be null: {cleared}")

    assignments = ["updated_at = ?"]
    params: list = [now_iso()]
    for field in UPDATABLE_FIELDS:
        if field in fields:
            value = fields[field]
            if field == "tags" and value is None:
                value = []
            assignments.append(f"{field} = ?")
            params.append(_to_column(field, value))
    params.append(task_id)

    with transaction(db):
        cur = db.execute(f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?", params)
    if cur.rowcount == 0:
        raise NotFoundError(f"Task with id {task_id} not found")
    return get_task(db, task_id)


def get_user_tasks(
    db: sqlite3.Connection,
    user_id: int,
    status: TaskStatus | None = None,
    priority: Priority | None = None,
) -> list[Task]:
    sql = "SELECT * FROM tasks WHERE user_id = ?"
    params: list = [user_id]
    if status:
        sql += " AND status = ?"
        params.append(_to_column("status", status))
    if priority:
        sql += " AND priority = ?"
        params.append(_to_column("priority", priority))
    sql += " ORDER BY id"
    return [_to_task(r) for r in db.execute(sql, params).fetchall()]


def delete_task(db: sqlite3.Connection, task_id: int) -> Task:
    task = get_task(db, task_id)
    if task is None:
        raise NotFoundError(f"Task with id {task_id} not found")
    with transaction(db):
        db.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
    return task


def list_eligible_items(db: sqlite3.Connection, user_id: int) -> list[WorkItem]:
    """Snapshot of the user's pending tasks, in storage order, for the scheduler."""
    tasks = get_user_tasks(db, user_id, status=TaskStatus.PENDING)
    return [t.to_work_item() for t in tasks]
