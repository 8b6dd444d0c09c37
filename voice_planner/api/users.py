"""FastAPI routes for users."""

import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from voice_planner.store import users as user_store
from voice_planner.tools.models import User

from .deps import get_db, http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


class CreateUserRequest(BaseModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: str
    voice_preference: Optional[str] = None


@router.post("", response_model=User)
def create_user(req: CreateUserRequest, db: sqlite3.Connection = Depends(get_db)):
    try:
        user = user_store.create_user(db, req.email, req.name, req.voice_preference)
    except ValueError:
        raise http_error(409, "email_taken")
    logger.info("Created user %s", user.id)
    return user


@router.get("/{user_id}", response_model=User)
def get_user(user_id: int, db: sqlite3.Connection = Depends(get_db)):
    user = user_store.get_user(db, user_id)
    if user is None:
        raise http_error(404, "user_not_found")
    return user
