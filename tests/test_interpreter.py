import base64

import pytest

from voice_planner.chat.interpreter import interpret_message, interpret_voice
from voice_planner.tools.models import Channel, Intent
from voice_planner.tools.nlp import REPLIES
from voice_planner.tools.speech import VOICE_ACK

AUDIO = base64.b64encode(b"fake audio bytes").decode("ascii")


def test_interpret_message_defaults_reply_channel_to_text():
    turn = interpret_message("Please update my task status", Channel.VOICE)
    assert turn.message == "Please update my task status"
    assert turn.response == REPLIES["task"]
    assert turn.intent == Intent.UPDATE_TASK
    assert turn.message_type == Channel.VOICE
    assert turn.response_type == Channel.TEXT


def test_interpret_message_keeps_requested_reply_channel():
    turn = interpret_message("Hi there!", Channel.TEXT, Channel.VOICE)
    assert turn.response_type == Channel.VOICE
    assert turn.intent == Intent.GENERAL_QUERY
    assert "assistant" in turn.response


def test_interpret_message_accepts_plain_strings():
    turn = interpret_message("Set a reminder for my meeting", "voice", "voice")
    assert turn.message_type == Channel.VOICE
    assert turn.response_type == Channel.VOICE
    assert turn.intent == Intent.SET_REMINDER


def test_voice_without_transcript_is_acknowledged():
    turn = interpret_voice(AUDIO)
    assert turn.message == f"Processed voice input: {AUDIO[:50]}..."
    assert turn.response == VOICE_ACK
    assert turn.intent is None
    assert turn.message_type == Channel.VOICE
    assert turn.response_type == Channel.TEXT


def test_voice_preference_selects_voice_reply():
    turn = interpret_voice(AUDIO, voice_preference="en-US-JennyNeural")
    assert turn.response_type == Channel.VOICE


def test_voice_with_transcript_is_interpreted():
    turn = interpret_voice(AUDIO, transcript="  add a task to call mom ")
    assert turn.message == "add a task to call mom"
    assert turn.intent == Intent.ADD_TASK
    assert turn.message_type == Channel.VOICE


@pytest.mark.parametrize("payload", ["", "not base64!!", "abc"])
def test_voice_rejects_invalid_audio(payload):
    with pytest.raises(ValueError):
        interpret_voice(payload)
