"""WavFileSource — replays a mono 16-bit WAV file as capture buffers."""
import wave
from collections.abc import AsyncIterator
from pathlib import Path

from livescribe.audio.source import AudioSource
from livescribe.constants import DEFAULT_CHUNK_MS, PCM16_SAMPLE_WIDTH


class WavFileSource(AudioSource):

    def __init__(self, path: str | Path, chunk_ms: int = DEFAULT_CHUNK_MS) -> None:
        self._path = Path(path)
        self._chunk_ms = chunk_ms
        with wave.open(str(self._path), "rb") as wav:
            channels, width, rate = wav.getnchannels(), wav.getsampwidth(), wav.getframerate()
        match (channels, width):
            case (1, w) if w == PCM16_SAMPLE_WIDTH:
                pass
            case _:
                raise ValueError(
                    f"{self._path.name}: expected mono 16-bit PCM, got {channels} channel(s) × {width * 8} bit"
                )
        self._sample_rate = rate

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frames_per_chunk(self) -> int:
        return max(1, self._sample_rate * self._chunk_ms // 1000)

    async def chunks(self) -> AsyncIterator[bytes]:
        with wave.open(str(self._path), "rb") as wav:
            while True:
                data = wav.readframes(self.frames_per_chunk)
                match data:
                    case b"":
                        return
                    case _:
                        yield data
