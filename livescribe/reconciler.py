"""TranscriptReconciler — folds TranscriptEvents into partial/committed text state."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional, Protocol

from livescribe.backoff import Sleeper
from livescribe.constants import (
    DEFAULT_FINALIZE_GRACE,
    MSG_CLEARED,
    MSG_EVENT_FAILED,
    MSG_FINAL_TEXT,
    MSG_FINALIZING,
)
from livescribe.events import Committed, Error, Partial, SessionStarted, TranscriptEvent

logger = logging.getLogger(__name__)

OnError = Callable[[str], None]


class Committer(Protocol):
    async def commit_audio(self) -> None: ...


class TranscriptMessage(NamedTuple):
    text: str
    is_partial: bool


@dataclass
class TranscriptState:
    latest_partial: str = ""
    committed_segments: list[str] = field(default_factory=list)


class TranscriptReconciler:
    """Single ordered consumer of a session's event queue.

    A Partial replaces the live hypothesis outright; a Committed appends a
    segment and clears the hypothesis. Errors go to the injected on_error
    callback and never touch transcript text.
    """

    def __init__(
        self,
        events: "asyncio.Queue[TranscriptEvent]",
        session: Committer,
        *,
        grace_seconds: float = DEFAULT_FINALIZE_GRACE,
        on_error: Optional[OnError] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._events = events
        self._session = session
        self._grace_seconds = grace_seconds
        self._on_error = on_error
        self._sleep = sleep
        self._state = TranscriptState()
        self._active = False
        self._last_error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    # ── snapshot getters ──────────────────────────────────────────────────────

    @property
    def latest_partial(self) -> str:
        return self._state.latest_partial

    @property
    def committed_segments(self) -> list[str]:
        return list(self._state.committed_segments)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def messages(self) -> list[TranscriptMessage]:
        """Committed segments in arrival order, then the live partial if any."""
        committed = [TranscriptMessage(t, False) for t in self._state.committed_segments]
        match self._state.latest_partial:
            case "":
                return committed
            case partial:
                return committed + [TranscriptMessage(partial, True)]

    def text(self) -> str:
        return " ".join(m.text for m in self.messages())

    # ── event handling ────────────────────────────────────────────────────────

    def apply(self, event: TranscriptEvent) -> None:
        match event:
            case Partial(text=text):
                self._state.latest_partial = text
            case Committed(text=text):
                self._state.committed_segments.append(text)
                self._state.latest_partial = ""
            case SessionStarted():
                self._active = True
            case Error(message=message, fatal=fatal):
                self._last_error = message
                if fatal:
                    self._active = False
                match self._on_error:
                    case None:
                        pass
                    case callback:
                        callback(message)

    def start(self) -> None:
        match self._task:
            case None:
                self._task = asyncio.create_task(self._consume())
            case _:
                pass

    async def stop(self) -> None:
        match self._task:
            case None:
                pass
            case task:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                self._task = None

    async def _consume(self) -> None:
        while True:
            event = await self._events.get()
            try:
                self.apply(event)
            except Exception as exc:
                logger.error(MSG_EVENT_FAILED, event, exc)

    def _drain(self) -> None:
        while not self._events.empty():
            self.apply(self._events.get_nowait())

    # ── finalize / clear ──────────────────────────────────────────────────────

    async def finalize(self) -> str:
        """Commit trailing audio, wait for late Committed events, return the joined text."""
        logger.info(MSG_FINALIZING)
        await self._session.commit_audio()
        await self._sleep(self._grace_seconds)
        self._drain()
        final_text = " ".join(self._state.committed_segments)
        self._state = TranscriptState()
        self._active = False
        logger.info(MSG_FINAL_TEXT, final_text)
        return final_text

    def clear(self) -> None:
        self._state = TranscriptState()
        self._last_error = None
        self._active = False
        logger.info(MSG_CLEARED)
