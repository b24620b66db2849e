"""Message codec — schema-checked encode/decode of realtime wire frames."""
import base64
import json
import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from livescribe.constants import (
    DEFAULT_SAMPLE_RATE,
    ERR_AUTH_FAILED,
    ERR_QUOTA_EXCEEDED,
    MSG_FRAME_IGNORED,
)
from livescribe.errors import ProtocolError
from livescribe.events import Committed, Error, Partial, SessionStarted, TranscriptEvent

logger = logging.getLogger(__name__)


# ── Client → Server ───────────────────────────────────────────────────────────


class InputAudioChunk(BaseModel):
    message_type: Literal["input_audio_chunk"] = "input_audio_chunk"
    audio_base_64: str
    commit: bool
    sample_rate: int = Field(gt=0)


# ── Server → Client ───────────────────────────────────────────────────────────


class TranscriptResult(BaseModel):
    transcript: str


class TranscriptFrame(BaseModel):
    message_type: str
    result: TranscriptResult


class ErrorFrame(BaseModel):
    message_type: str
    error: str


# ── encode ────────────────────────────────────────────────────────────────────


def encode_audio_chunk(data: bytes, sample_rate: int) -> str:
    """Encode a non-committing PCM16 chunk as one JSON text frame."""
    match data:
        case b"":
            raise ValueError("Empty audio chunk; use encode_commit() to end an utterance")
        case _:
            pass
    return InputAudioChunk(
        audio_base_64=base64.b64encode(data).decode("ascii"),
        commit=False,
        sample_rate=sample_rate,
    ).model_dump_json()


def encode_commit(sample_rate: int = DEFAULT_SAMPLE_RATE) -> str:
    """Encode the commit sentinel: empty payload, commit=true."""
    return InputAudioChunk(
        audio_base_64="",
        commit=True,
        sample_rate=sample_rate,
    ).model_dump_json()


# ── decode ────────────────────────────────────────────────────────────────────


def decode_audio_chunk(raw: str | bytes) -> InputAudioChunk:
    """Parse a client audio frame (server side / test harness use)."""
    try:
        return InputAudioChunk.model_validate_json(raw)
    except ValidationError as exc:
        raise ProtocolError(f"Invalid input_audio_chunk frame: {exc}") from exc


def decode_frame(raw: str) -> Optional[TranscriptEvent]:
    """Parse one incoming text frame.

    Returns the mapped TranscriptEvent, or None for message types this client
    does not act on. Raises ProtocolError when the frame is malformed.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ProtocolError(f"Frame is not JSON: {exc}") from exc

    match payload:
        case {"message_type": str() as message_type}:
            pass
        case _:
            raise ProtocolError("Frame has no message_type")

    try:
        match message_type:
            case "session_started":
                return SessionStarted()
            case "partial_transcript":
                frame = TranscriptFrame.model_validate(payload)
                return Partial(frame.result.transcript)
            case "committed_transcript" | "committed_transcript_with_timestamps":
                frame = TranscriptFrame.model_validate(payload)
                return Committed(frame.result.transcript)
            case "error":
                return Error(ErrorFrame.model_validate(payload).error)
            case "auth_error":
                return Error(ERR_AUTH_FAILED, fatal=True)
            case "quota_exceeded_error":
                return Error(ERR_QUOTA_EXCEEDED, fatal=True)
            case other:
                logger.debug(MSG_FRAME_IGNORED, other)
                return None
    except ValidationError as exc:
        raise ProtocolError(f"Invalid {message_type} frame: {exc}") from exc
