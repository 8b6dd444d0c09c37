import sqlite3

from voice_planner.tools.models import Conversation, ConversationTurn

from .database import now_iso, transaction


def _to_conversation(row: sqlite3.Row) -> Conversation:
    return Conversation(**dict(row))


def save_turn(db: sqlite3.Connection, user_id: int, turn: ConversationTurn) -> Conversation:
    with transaction(db):
        cur = db.execute(
            "INSERT INTO conversations (user_id, message, response, message_type, response_type, intent, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                user_id,
                turn.message,
                turn.response,
                turn.message_type.value,
                turn.response_type.value,
                turn.intent.value if turn.intent else None,
                now_iso(),
            ),
        )
    row = db.execute("SELECT * FROM conversations WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _to_conversation(row)


def get_conversation_history(db: sqlite3.Connection, user_id: int, limit: int = 50) -> list[Conversation]:
    """Newest first."""
    rows = db.execute(
        "SELECT * FROM conversations WHERE user_id = ? ORDER BY created_at DESC, id DESC LIMIT ?",
        (user_id, limit),
    ).fetchall()
    return [_to_conversation(r) for r in rows]
