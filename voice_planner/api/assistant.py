"""FastAPI routes for the conversational assistant (text and voice)."""

import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from voice_planner.actions import handlers
from voice_planner.store.conversations import get_conversation_history
from voice_planner.store.database import NotFoundError
from voice_planner.tools.models import Channel, Conversation

from .deps import get_db, http_error, int_env

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistant"])

HISTORY_MAX_LIMIT = 500
HISTORY_DEFAULT_LIMIT = int_env("HISTORY_DEFAULT_LIMIT", 50, minimum=1, maximum=HISTORY_MAX_LIMIT)


# --- Request Models ---

class ConversationRequest(BaseModel):
    user_id: int
    message: str
    message_type: Channel  # "text" or "voice"
    response_type: Optional[Channel] = None


class VoiceRequest(BaseModel):
    user_id: int
    audio_data: str  # base64 encoded audio
    voice_preference: Optional[str] = None
    transcript: Optional[str] = None  # client-side STT result, if any


# --- POST /conversation ---

@router.post("/conversation", response_model=Conversation)
def process_conversation(req: ConversationRequest, db: sqlite3.Connection = Depends(get_db)):
    try:
        return handlers.process_conversation(
            db,
            req.user_id,
            req.message,
            req.message_type,
            req.response_type,
        )
    except NotFoundError:
        raise http_error(404, "user_not_found")


# --- POST /voice ---

@router.post("/voice", response_model=Conversation)
def process_voice(req: VoiceRequest, db: sqlite3.Connection = Depends(get_db)):
    try:
        return handlers.process_voice_input(
            db,
            req.user_id,
            req.audio_data,
            voice_preference=req.voice_preference,
            transcript=req.transcript,
        )
    except NotFoundError:
        raise http_error(404, "user_not_found")
    except ValueError as e:
        logger.warning("Rejected voice payload for user %s: %s", req.user_id, e)
        raise http_error(400, "invalid_audio")


@router.get("/users/{user_id}/conversations", response_model=list[Conversation])
def conversation_history(
    user_id: int,
    limit: int = Query(HISTORY_DEFAULT_LIMIT, ge=1, le=HISTORY_MAX_LIMIT),
    db: sqlite3.Connection = Depends(get_db),
):
    return get_conversation_history(db, user_id, limit=limit)
