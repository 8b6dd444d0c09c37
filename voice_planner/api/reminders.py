"""FastAPI routes for reminders."""

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from voice_planner.store import reminders as reminder_store
from voice_planner.store.database import NotFoundError
from voice_planner.store.users import get_user
from voice_planner.tools.models import Reminder, ReminderType

from .deps import get_db, http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["reminders"])


class CreateReminderRequest(BaseModel):
    user_id: int
    task_id: Optional[int] = None
    time_block_id: Optional[int] = None
    message: str
    reminder_time: datetime
    reminder_type: ReminderType


@router.post("", response_model=Reminder)
def create_reminder(req: CreateReminderRequest, db: sqlite3.Connection = Depends(get_db)):
    if get_user(db, req.user_id) is None:
        raise http_error(404, "user_not_found")
    try:
        reminder = reminder_store.create_reminder(
            db,
            req.user_id,
            req.message,
            req.reminder_time,
            req.reminder_type,
            task_id=req.task_id,
            time_block_id=req.time_block_id,
        )
    except ValueError:
        raise http_error(400, "invalid_reference")
    logger.info("Created %s reminder %s for user %s", reminder.reminder_type.value, reminder.id, req.user_id)
    return reminder


@router.get("/pending", response_model=list[Reminder])
def get_pending_reminders(user_id: Optional[int] = None, db: sqlite3.Connection = Depends(get_db)):
    return reminder_store.get_pending_reminders(db, user_id)


@router.post("/{reminder_id}/sent", response_model=Reminder)
def mark_reminder_sent(reminder_id: int, db: sqlite3.Connection = Depends(get_db)):
    try:
        return reminder_store.mark_reminder_sent(db, reminder_id)
    except NotFoundError:
        raise http_error(404, "reminder_not_found")
