"""Turn a user utterance into a conversation turn (reply + detected intent)."""

import logging
from typing import Optional

from voice_planner.tools.models import Channel, ConversationTurn
from voice_planner.tools.nlp import detect_intent, generate_response
from voice_planner.tools.speech import (
    VOICE_ACK,
    decode_audio,
    reply_channel_for,
    transcribe_placeholder,
)

logger = logging.getLogger(__name__)


def interpret_message(
    message: str,
    message_type: Channel = Channel.TEXT,
    response_type: Optional[Channel] = None,
) -> ConversationTurn:
    """
    Run the reply generator and the intent classifier independently over the
    same message. The two may disagree; neither overrides the other.
    """
    reply = generate_response(message)
    intent = detect_intent(message)
    turn = ConversationTurn(
        message=message,
        response=reply,
        message_type=Channel(message_type),
        response_type=Channel(response_type or Channel.TEXT),
        intent=intent,
    )
    logger.debug("Interpreted %r as %s", message[:200], intent.value)
    return turn


def interpret_voice(
    audio_data: str,
    *,
    voice_preference: Optional[str] = None,
    transcript: Optional[str] = None,
) -> ConversationTurn:
    """
    Voice variant. Raises ValueError when audio_data is not base64.
    With a client-side transcript the text goes through interpret_message;
    without one a placeholder turn is produced and no intent is detected.
    """
    decode_audio(audio_data)
    response_type = Channel(reply_channel_for(voice_preference))

    if transcript and transcript.strip():
        return interpret_message(transcript.strip(), Channel.VOICE, response_type)

    return ConversationTurn(
        message=transcribe_placeholder(audio_data),
        response=VOICE_ACK,
        message_type=Channel.VOICE,
        response_type=response_type,
        intent=None,
    )
