import base64
import binascii

VOICE_ACK = "I've received your voice message and processed it successfully."
PREVIEW_CHARS = 50

def decode_audio(audio_base64: str) -> bytes:
  # base64 音频 -> 二进制；格式不对直接报错
  raw = (audio_base64 or "").strip()
  if not raw:
    raise ValueError("audio_data is empty")
  try:
    return base64.b64decode(raw, validate=True)
  except (binascii.Error, ValueError) as e:
    raise ValueError(f"audio_data is not valid base64: {e}") from e

def transcribe_placeholder(audio_base64: str) -> str:
  """
    没有接入真实 STT，只生成一条可追溯的占位文本。
  """
  return f"Processed voice input: {audio_base64[:PREVIEW_CHARS]}..."

def reply_channel_for(voice_preference: str | None) -> str:
  return "voice" if voice_preference else "text"
