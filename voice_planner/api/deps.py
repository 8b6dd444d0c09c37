"""Shared dependencies and error messages for the HTTP routers."""

import os
import sqlite3

from fastapi import HTTPException

from voice_planner.store.database import get_connection

HTTP_MESSAGES = {
    "user_not_found": "User not found",
    "task_not_found": "Task not found",
    "reminder_not_found": "Reminder not found",
    "email_taken": "A user with this email already exists",
    "invalid_working_hours": "Working hours must be HH:MM (24-hour)",
    "invalid_date": "Could not understand the date",
    "invalid_audio": "audio_data must be base64 encoded",
    "invalid_reference": "Referenced task or time block does not exist",
    "invalid_task_update": "title, priority and status cannot be cleared",
    "schedule_conflict": "Tasks changed while the schedule was being saved; try again",
}


def get_db() -> sqlite3.Connection:
    return get_connection()


def http_error(status_code: int, key: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=HTTP_MESSAGES.get(key, key))


def int_env(name: str, default: int, minimum: int | None = None, maximum: int | None = None) -> int:
    """Integer from the environment; unset or non-numeric falls back to default, then clamped."""
    raw = os.getenv(name)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    if minimum is not None:
        value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return value
