"""MCP Server for Voice Planner -- exposes the assistant and day planner as MCP tools."""

import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from mcp.server.fastmcp import FastMCP

from voice_planner.actions.handlers import generate_time_blocks
from voice_planner.chat.interpreter import interpret_message as _interpret
from voice_planner.store.database import ConflictError, NotFoundError, get_connection
from voice_planner.store.tasks import get_user_tasks
from voice_planner.tools.models import Channel, Intent, TaskStatus
from voice_planner.tools.scheduler import parse_day

# Logging to stderr only (stdout reserved for JSON-RPC over stdio transport)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("mcp_server")

mcp = FastMCP(
    "voice-planner",
    instructions="Voice Planner: classify requests, list tasks and pack pending tasks into a day's working hours",
)


def _db():
    return get_connection()


# ────────────────────────── Tools ──────────────────────────


@mcp.tool()
def interpret_message(message: str, message_type: str = "text", response_type: str | None = None) -> str:
    """Classify a user message and produce the assistant's canned reply.

    Nothing is stored; use this to preview how a message will be understood.

    Args:
        message: Raw user message
        message_type: Channel the message arrived on - "text" or "voice" (default: text)
        response_type: Desired reply channel - "text" or "voice" (default: text)
    """
    try:
        turn = _interpret(
            message,
            Channel(message_type),
            Channel(response_type) if response_type else None,
        )
    except ValueError as e:
        return json.dumps({"error": str(e)})
    return json.dumps({
        "message": turn.message,
        "reply": turn.response,
        "detected_intent": turn.intent.value,
        "reply_channel": turn.response_type.value,
    }, ensure_ascii=False)


@mcp.tool()
def plan_day(
    user_id: int,
    date: str,
    working_hours_start: str = "09:00",
    working_hours_end: str = "17:00",
) -> str:
    """Pack the user's pending tasks into one day's working hours and save the blocks.

    Tasks are placed by priority (urgent first) with a 15 minute gap; planning
    stops at the first task that no longer fits.

    Args:
        user_id: Owner of the tasks
        date: Target date, YYYY-MM-DD or phrases like "tomorrow"
        working_hours_start: Start of the working day, HH:MM 24-hour (default 09:00)
        working_hours_end: End of the working day, HH:MM 24-hour (default 17:00)
    """
    try:
        day = parse_day(date)
        blocks = generate_time_blocks(_db(), user_id, day, working_hours_start, working_hours_end)
    except (NotFoundError, ConflictError) as e:
        return json.dumps({"error": str(e)})
    except ValueError as e:
        return json.dumps({"error": f"Invalid input: {e}"})
    return json.dumps([b.model_dump(mode="json") for b in blocks], ensure_ascii=False, indent=2)


@mcp.tool()
def list_tasks(user_id: int, status: str | None = None) -> str:
    """List a user's tasks.

    Args:
        user_id: Owner of the tasks
        status: Optional filter - pending, in_progress, completed or cancelled
    """
    try:
        status_filter = TaskStatus(status) if status else None
    except ValueError as e:
        return json.dumps({"error": str(e)})
    tasks = get_user_tasks(_db(), user_id, status=status_filter)
    return json.dumps([t.model_dump(mode="json") for t in tasks], ensure_ascii=False, indent=2)


# ────────────────────────── Resources ──────────────────────────


@mcp.resource("planner://intents")
def get_intents() -> str:
    """Intent labels the assistant can detect."""
    return json.dumps({"intents": [i.value for i in Intent]}, indent=2)


# ────────────────────────── Entry point ──────────────────────────


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
