"""AudioBridge — forwards capture buffers to a RealtimeSession at capture pace."""
import asyncio
import logging

from livescribe.audio.source import AudioSource
from livescribe.backoff import Sleeper
from livescribe.constants import PCM16_SAMPLE_WIDTH
from livescribe.session import RealtimeSession

logger = logging.getLogger(__name__)


def chunk_duration(data: bytes, sample_rate: int) -> float:
    """Seconds of audio in a PCM16 mono buffer."""
    return len(data) / (PCM16_SAMPLE_WIDTH * sample_rate)


class AudioBridge:
    """Detached by default; buffers pushed while detached are dropped."""

    def __init__(self, session: RealtimeSession, sleep: Sleeper = asyncio.sleep) -> None:
        self._session = session
        self._sleep = sleep
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        self._attached = True

    def detach(self) -> None:
        self._attached = False

    def push(self, data: bytes, sample_rate: int) -> None:
        """Capture callback. Safe to call from any thread."""
        match (self._attached, data):
            case (False, _) | (_, b""):
                return
            case _:
                self._session.send_audio_chunk_threadsafe(data, sample_rate)

    async def stream(self, source: AudioSource, realtime: bool = True) -> int:
        """Feed every buffer of source to the session; returns how many were forwarded.

        With realtime=True each buffer is followed by a sleep of its own
        duration so the send rate never exceeds the capture rate.
        """
        forwarded = 0
        rate = source.sample_rate
        async for data in source.chunks():
            match self._attached:
                case False:
                    break
                case True:
                    pass
            await self._session.send_audio_chunk(data, rate)
            forwarded += 1
            if realtime:
                await self._sleep(chunk_duration(data, rate))
        logger.debug("Forwarded %d audio chunk(s)", forwarded)
        return forwarded
