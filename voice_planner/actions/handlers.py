"""Request handlers: precondition checks and persistence around the pure core."""

import logging
import sqlite3
from datetime import date
from typing import Optional

from voice_planner.chat.interpreter import interpret_message, interpret_voice
from voice_planner.store.conversations import save_turn
from voice_planner.store.database import NotFoundError
from voice_planner.store.tasks import list_eligible_items
from voice_planner.store.time_blocks import create_generated_blocks
from voice_planner.store.users import get_user
from voice_planner.tools.models import Channel, Conversation, TimeBlock, User
from voice_planner.tools.scheduler import build_window, generate_time_blocks as plan_blocks

logger = logging.getLogger(__name__)


def require_user(db: sqlite3.Connection, user_id: int) -> User:
    user = get_user(db, user_id)
    if user is None:
        logger.warning("User %s not found", user_id)
        raise NotFoundError("User not found")
    return user


def process_conversation(
    db: sqlite3.Connection,
    user_id: int,
    message: str,
    message_type: Channel = Channel.TEXT,
    response_type: Optional[Channel] = None,
) -> Conversation:
    require_user(db, user_id)
    turn = interpret_message(message, message_type, response_type)
    saved = save_turn(db, user_id, turn)
    logger.info(
        "Conversation %s recorded for user %s: intent=%s",
        saved.id,
        user_id,
        saved.intent,
    )
    return saved


def process_voice_input(
    db: sqlite3.Connection,
    user_id: int,
    audio_data: str,
    *,
    voice_preference: Optional[str] = None,
    transcript: Optional[str] = None,
) -> Conversation:
    require_user(db, user_id)
    turn = interpret_voice(audio_data, voice_preference=voice_preference, transcript=transcript)
    saved = save_turn(db, user_id, turn)
    logger.info(
        "Voice conversation %s recorded for user %s: transcript=%s, intent=%s",
        saved.id,
        user_id,
        "yes" if transcript and transcript.strip() else "no",
        saved.intent,
    )
    return saved


def generate_time_blocks(
    db: sqlite3.Connection,
    user_id: int,
    day: date,
    working_hours_start: str,
    working_hours_end: str,
) -> list[TimeBlock]:
    """
    Pack the user's pending tasks into the working hours of `day` and persist
    the result. Raises NotFoundError for an unknown user and ValueError for
    malformed working hours; both are checked before anything is scheduled.
    Raises ConflictError, with nothing saved, if a pending task is deleted
    while the schedule is being written.
    """
    require_user(db, user_id)
    window = build_window(day, working_hours_start, working_hours_end)
    items = list_eligible_items(db, user_id)
    blocks = plan_blocks(items, window)
    saved = create_generated_blocks(db, user_id, blocks)
    logger.info(
        "Generated %d time block(s) for user %s on %s from %d pending task(s)",
        len(saved),
        user_id,
        day.isoformat(),
        len(items),
    )
    return saved
