"""TDD: audio bridge and WAV source tests written FIRST"""
import wave
from unittest.mock import AsyncMock, MagicMock

import pytest

from livescribe.audio.bridge import AudioBridge, chunk_duration
from livescribe.audio.source import AudioSource
from livescribe.audio.wav import WavFileSource


class ListSource(AudioSource):
    def __init__(self, chunks: list[bytes], rate: int = 16000) -> None:
        self._chunks = chunks
        self._rate = rate

    @property
    def sample_rate(self) -> int:
        return self._rate

    async def chunks(self):
        for chunk in self._chunks:
            yield chunk


def make_session() -> MagicMock:
    session = MagicMock()
    session.send_audio_chunk = AsyncMock()
    return session


def write_wav(path, *, channels: int = 1, width: int = 2, rate: int = 16000, frames: int = 3200) -> None:
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(width)
        wav.setframerate(rate)
        wav.writeframes(b"\x00" * frames * channels * width)


# ── push callback ─────────────────────────────────────────────────────────────


def test_chunk_duration_for_pcm16_mono():
    assert chunk_duration(b"\x00" * 3200, 16000) == pytest.approx(0.1)


def test_push_while_detached_is_dropped():
    session = make_session()
    bridge = AudioBridge(session)

    bridge.push(b"\x01\x02", 16000)

    session.send_audio_chunk_threadsafe.assert_not_called()


def test_push_while_attached_forwards_threadsafe():
    session = make_session()
    bridge = AudioBridge(session)
    bridge.attach()

    bridge.push(b"\x01\x02", 16000)

    session.send_audio_chunk_threadsafe.assert_called_once_with(b"\x01\x02", 16000)


def test_push_empty_buffer_is_dropped():
    session = make_session()
    bridge = AudioBridge(session)
    bridge.attach()

    bridge.push(b"", 16000)

    session.send_audio_chunk_threadsafe.assert_not_called()


# ── stream pacing ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_stream_paces_by_chunk_duration():
    session = make_session()
    sleeps: list[float] = []

    async def sleep(seconds: float) -> None:
        sleeps.append(seconds)

    bridge = AudioBridge(session, sleep=sleep)
    bridge.attach()

    sent = await bridge.stream(ListSource([b"\x00" * 3200, b"\x00" * 1600]))

    assert sent == 2
    assert sleeps == [pytest.approx(0.1), pytest.approx(0.05)]
    session.send_audio_chunk.assert_any_await(b"\x00" * 3200, 16000)


@pytest.mark.asyncio
async def test_stream_without_realtime_does_not_sleep():
    session = make_session()
    sleep = AsyncMock()
    bridge = AudioBridge(session, sleep=sleep)
    bridge.attach()

    await bridge.stream(ListSource([b"\x00\x00"] * 3), realtime=False)

    sleep.assert_not_awaited()
    assert session.send_audio_chunk.await_count == 3


@pytest.mark.asyncio
async def test_stream_stops_when_detached():
    session = make_session()

    async def detach_after_first(seconds: float) -> None:
        bridge.detach()

    bridge = AudioBridge(session, sleep=detach_after_first)
    bridge.attach()

    sent = await bridge.stream(ListSource([b"\x00\x00"] * 5))

    assert sent == 1


# ── WAV source ────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_wav_source_yields_fixed_size_chunks(tmp_path):
    path = tmp_path / "speech.wav"
    write_wav(path, frames=4000)

    source = WavFileSource(path, chunk_ms=100)
    chunks = [chunk async for chunk in source.chunks()]

    assert source.sample_rate == 16000
    assert [len(c) for c in chunks] == [3200, 3200, 1600]


def test_wav_source_rejects_stereo(tmp_path):
    path = tmp_path / "stereo.wav"
    write_wav(path, channels=2)

    with pytest.raises(ValueError, match="mono 16-bit"):
        WavFileSource(path)


def test_wav_source_rejects_8_bit(tmp_path):
    path = tmp_path / "8bit.wav"
    write_wav(path, width=1)

    with pytest.raises(ValueError, match="mono 16-bit"):
        WavFileSource(path)
