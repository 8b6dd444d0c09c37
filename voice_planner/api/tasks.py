"""FastAPI routes for task management."""

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from voice_planner.store import tasks as task_store
from voice_planner.store.database import NotFoundError
from voice_planner.store.users import get_user
from voice_planner.tools.models import Priority, Task, TaskStatus

from .deps import get_db, http_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


# --- Request Models ---

class CreateTaskRequest(BaseModel):
    user_id: int
    title: str
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    estimated_duration: Optional[int] = None  # minutes
    tags: Optional[list[str]] = None


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    tags: Optional[list[str]] = None


@router.post("/tasks", response_model=Task)
def create_task(req: CreateTaskRequest, db: sqlite3.Connection = Depends(get_db)):
    if get_user(db, req.user_id) is None:
        raise http_error(404, "user_not_found")
    task = task_store.create_task(
        db,
        req.user_id,
        req.title,
        description=req.description,
        priority=req.priority,
        due_date=req.due_date,
        estimated_duration=req.estimated_duration,
        tags=req.tags,
    )
    logger.info("Created task %s for user %s", task.id, req.user_id)
    return task


@router.patch("/tasks/{task_id}", response_model=Task)
def update_task(task_id: int, req: UpdateTaskRequest, db: sqlite3.Connection = Depends(get_db)):
    # only fields present in the request body are written
    fields = req.model_dump(exclude_unset=True)
    try:
        return task_store.update_task(db, task_id, **fields)
    except NotFoundError:
        raise http_error(404, "task_not_found")
    except ValueError:
        raise http_error(400, "invalid_task_update")


@router.delete("/tasks/{task_id}", response_model=Task)
def delete_task(task_id: int, db: sqlite3.Connection = Depends(get_db)):
    try:
        task = task_store.delete_task(db, task_id)
    except NotFoundError:
        raise http_error(404, "task_not_found")
    logger.info("Deleted task %s", task_id)
    return task


@router.get("/users/{user_id}/tasks", response_model=list[Task])
def get_user_tasks(
    user_id: int,
    status: Optional[TaskStatus] = None,
    priority: Optional[Priority] = None,
    db: sqlite3.Connection = Depends(get_db),
):
    return task_store.get_user_tasks(db, user_id, status=status, priority=priority)
