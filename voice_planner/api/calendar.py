"""FastAPI routes for time blocks and day schedule generation."""

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, model_validator

from voice_planner.actions import handlers
from voice_planner.store import time_blocks as block_store
from voice_planner.store.database import ConflictError, NotFoundError
from voice_planner.store.users import get_user
from voice_planner.tools.models import TimeBlock
from voice_planner.tools.scheduler import parse_day

from .deps import get_db, http_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calendar"])


class CreateTimeBlockRequest(BaseModel):
    user_id: int
    task_id: Optional[int] = None
    title: str
    start_time: datetime
    end_time: datetime
    is_ai_suggested: Optional[bool] = None

    @model_validator(mode="after")
    def _check_order(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class GenerateTimeBlocksRequest(BaseModel):
    user_id: int
    date: str  # "2024-01-15", "tomorrow", ...
    working_hours_start: str = "09:00"
    working_hours_end: str = "17:00"


@router.post("/time-blocks", response_model=TimeBlock)
def create_time_block(req: CreateTimeBlockRequest, db: sqlite3.Connection = Depends(get_db)):
    if get_user(db, req.user_id) is None:
        raise http_error(404, "user_not_found")
    try:
        return block_store.create_time_block(
            db,
            req.user_id,
            req.title,
            req.start_time,
            req.end_time,
            task_id=req.task_id,
            is_ai_suggested=bool(req.is_ai_suggested),
        )
    except ValueError:
        raise http_error(400, "invalid_reference")


@router.post("/time-blocks/generate", response_model=list[TimeBlock])
def generate_time_blocks(req: GenerateTimeBlocksRequest, db: sqlite3.Connection = Depends(get_db)):
    try:
        day = parse_day(req.date)
    except ValueError:
        logger.warning("Unparseable schedule date %r", req.date)
        raise http_error(400, "invalid_date")

    try:
        return handlers.generate_time_blocks(
            db,
            req.user_id,
            day,
            req.working_hours_start,
            req.working_hours_end,
        )
    except NotFoundError:
        raise http_error(404, "user_not_found")
    except ConflictError as e:
        logger.warning("Schedule for user %s not saved: %s", req.user_id, e)
        raise http_error(409, "schedule_conflict")
    except ValueError as e:
        logger.warning("Rejected working hours %s-%s: %s", req.working_hours_start, req.working_hours_end, e)
        raise http_error(400, "invalid_working_hours")


@router.get("/users/{user_id}/time-blocks", response_model=list[TimeBlock])
def get_user_time_blocks(
    user_id: int,
    date: Optional[str] = None,
    db: sqlite3.Connection = Depends(get_db),
):
    day = None
    if date:
        try:
            day = parse_day(date)
        except ValueError:
            raise http_error(400, "invalid_date")
    return block_store.get_user_time_blocks(db, user_id, day)
