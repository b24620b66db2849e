import asyncio
import json

import pytest

from livescribe.auth.client import TokenProvider
from livescribe.config import Config
from livescribe.transport.client import Transport


class FakeTokenProvider(TokenProvider):
    """Hands out tok-1, tok-2, … or raises the queued errors first."""

    def __init__(self, errors: list[Exception] | None = None) -> None:
        self.calls: list[str] = []
        self._errors = list(errors or [])

    async def get_token(self, api_key: str) -> str:
        self.calls.append(api_key)
        match self._errors:
            case [error, *rest]:
                self._errors = rest
                if error is not None:
                    raise error
            case _:
                pass
        return f"tok-{len(self.calls)}"


class FakeTransport(Transport):
    """In-memory duplex connection driven by feed()."""

    def __init__(self, receive_error: Exception | None = None) -> None:
        self.opened: list[tuple[str, dict[str, str]]] = []
        self.sent: list[str] = []
        self.closed: list[tuple[object, str]] = []
        self.open_errors: list[Exception] = []
        self.send_error: Exception | None = None
        self.receive_error = receive_error
        self.inbox: asyncio.Queue = asyncio.Queue()

    def feed(self, *items: object) -> None:
        for item in items:
            self.inbox.put_nowait(item)

    async def open(self, url: str, headers: dict[str, str]) -> str:
        self.opened.append((url, headers))
        match self.open_errors:
            case [error, *rest]:
                self.open_errors = rest
                raise error
            case _:
                return f"conn-{len(self.opened)}"

    async def send(self, connection: object, message: str) -> None:
        match self.send_error:
            case None:
                self.sent.append(message)
            case error:
                raise error

    async def receive(self, connection: object) -> str:
        match self.receive_error:
            case None:
                pass
            case error:
                raise error
        item = await self.inbox.get()
        match item:
            case Exception() as error:
                raise error
            case text:
                return text

    async def close(self, connection: object, reason: str) -> None:
        self.closed.append((connection, reason))


def frame(message_type: str, **fields: object) -> str:
    return json.dumps({"message_type": message_type, **fields})


def transcript_frame(message_type: str, text: str) -> str:
    return frame(message_type, result={"transcript": text})


async def no_sleep(_: float) -> None:
    return None


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


def make_config(**overrides: object) -> Config:
    values = dict(
        elevenlabs_api_key="xi-test-key",
        model_id="scribe_v2_realtime",
        language_code="en",
        sample_rate=16000,
        max_reconnect_attempts=3,
        finalize_grace_seconds=0.0,
        token_timeout=10.0,
        api_base_url="https://api.test",
        realtime_url="wss://api.test/v1/speech-to-text/realtime",
        log_level="INFO",
    )
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def token_provider() -> FakeTokenProvider:
    return FakeTokenProvider()
