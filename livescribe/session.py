"""RealtimeSession — connection lifecycle, receive loop and reconnection for one stream."""
import asyncio
import logging
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from livescribe.auth.client import TokenProvider
from livescribe.backoff import BackoffPolicy, Sleeper
from livescribe.codec import decode_frame, encode_audio_chunk, encode_commit
from livescribe.constants import (
    AUTHORIZATION_HEADER,
    CLOSE_REASON_DISCONNECT,
    CLOSE_REASON_RECEIVE_FAILED,
    CLOSE_REASON_SERVER_ERROR,
    COMMIT_STRATEGY,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RECONNECT_ATTEMPTS,
    DEFAULT_MODEL_ID,
    DEFAULT_REALTIME_URL,
    DEFAULT_SAMPLE_RATE,
    ERR_AUTH_FAILED,
    ERR_RECONNECT_EXHAUSTED,
    MSG_CONNECTED,
    MSG_CONNECTING,
    MSG_DISCONNECTING,
    MSG_FRAME_DROPPED,
    MSG_NOT_ACTIVE,
    MSG_RECEIVE_FAILED,
    MSG_RECONNECT_FAILED,
    MSG_RECONNECTED,
    MSG_RECONNECTING,
    MSG_SEND_FAILED,
    MSG_SERVER_ERROR,
    MSG_SESSION_STARTED,
)
from livescribe.errors import (
    AuthError,
    ConnectError,
    ProtocolError,
    ScribeError,
    TransportError,
)
from livescribe.events import Error, SessionStarted, TranscriptEvent
from livescribe.transport.client import Connection, Transport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


def build_realtime_url(base_url: str, model_id: str, language_code: str) -> str:
    query = urlencode({
        "model_id": model_id,
        "language_code": language_code,
        "commit_strategy": COMMIT_STRATEGY,
    })
    return f"{base_url}?{query}"


class RealtimeSession:
    """Owns one realtime connection and publishes TranscriptEvents to a queue.

    All state changes happen on the event loop that called connect(). The
    receive loop runs as a background task for as long as the session is
    Active or Reconnecting; a dropped connection is reopened automatically
    with exponential backoff until max_reconnect_attempts is exhausted, after
    which a single fatal Error event is published and the session closes.
    Audio sent while not Active is dropped, never buffered.
    """

    def __init__(
        self,
        api_key: str,
        events: "asyncio.Queue[TranscriptEvent]",
        token_provider: TokenProvider,
        transport: Transport,
        *,
        realtime_url: str = DEFAULT_REALTIME_URL,
        max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS,
        backoff: BackoffPolicy = BackoffPolicy(),
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._api_key = api_key
        self._events = events
        self._token_provider = token_provider
        self._transport = transport
        self._realtime_url = realtime_url
        self._max_reconnect_attempts = max_reconnect_attempts
        self._backoff = backoff
        self._sleep = sleep

        self._state = SessionState.IDLE
        self._token: Optional[str] = None
        self._connection: Optional[Connection] = None
        self._receive_task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._params: tuple[str, str] = (DEFAULT_MODEL_ID, DEFAULT_LANGUAGE)
        self._sample_rate = DEFAULT_SAMPLE_RATE
        self._reconnect_attempts = 0

    # ── introspection ─────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def max_reconnect_attempts(self) -> int:
        return self._max_reconnect_attempts

    # ── lifecycle ─────────────────────────────────────────────────────────────

    async def connect(
        self,
        model_id: str = DEFAULT_MODEL_ID,
        language_code: str = DEFAULT_LANGUAGE,
    ) -> None:
        match self._state:
            case SessionState.IDLE | SessionState.CLOSED:
                pass
            case state:
                raise ConnectError(f"Cannot connect while {state.value}")

        logger.info(MSG_CONNECTING, model_id, language_code)
        self._state = SessionState.CONNECTING
        self._reconnect_attempts = 0
        try:
            await self._open(model_id, language_code)
        except ScribeError as exc:
            self._state = SessionState.IDLE
            logger.error("Connect failed: %s", exc)
            raise ConnectError(f"Failed to connect: {exc}") from exc
        except asyncio.CancelledError:
            self._state = SessionState.IDLE
            raise

        match self._state:
            case SessionState.CLOSED:
                await self._release(CLOSE_REASON_DISCONNECT)
                raise ConnectError("Session was closed while connecting")
            case _:
                pass

        self._params = (model_id, language_code)
        self._loop = asyncio.get_running_loop()
        self._state = SessionState.ACTIVE
        self._receive_task = asyncio.create_task(self._receive_loop())

    async def disconnect(self) -> None:
        match self._state:
            case SessionState.CLOSED:
                return
            case _:
                pass

        logger.info(MSG_DISCONNECTING)
        self._state = SessionState.CLOSED
        task, self._receive_task = self._receive_task, None
        match task:
            case None:
                pass
            case t if t is asyncio.current_task():
                pass
            case t:
                t.cancel()
                try:
                    await t
                except asyncio.CancelledError:
                    pass
        await self._release(CLOSE_REASON_DISCONNECT)
        self._token = None

    # ── sending ───────────────────────────────────────────────────────────────

    async def send_audio_chunk(self, data: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        match self._state:
            case SessionState.ACTIVE:
                pass
            case state:
                logger.warning(MSG_NOT_ACTIVE, state.value, "audio chunk")
                return
        try:
            message = encode_audio_chunk(data, sample_rate)
        except ValueError as exc:
            logger.warning(MSG_SEND_FAILED, "audio chunk", exc)
            return
        self._sample_rate = sample_rate
        await self._send(message, "audio chunk")

    def send_audio_chunk_threadsafe(self, data: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        """Schedule send_audio_chunk on the session's loop from any thread."""
        match self._loop:
            case loop if loop is not None and not loop.is_closed():
                asyncio.run_coroutine_threadsafe(self.send_audio_chunk(data, sample_rate), loop)
            case _:
                logger.warning(MSG_NOT_ACTIVE, self._state.value, "audio chunk")

    async def commit_audio(self) -> None:
        match self._state:
            case SessionState.ACTIVE:
                pass
            case state:
                logger.warning(MSG_NOT_ACTIVE, state.value, "commit")
                return
        await self._send(encode_commit(self._sample_rate), "commit")

    async def _send(self, message: str, what: str) -> None:
        match self._connection:
            case None:
                logger.warning(MSG_NOT_ACTIVE, self._state.value, what)
                return
            case connection:
                pass
        try:
            await self._transport.send(connection, message)
        except TransportError as exc:
            logger.error(MSG_SEND_FAILED, what, exc)

    # ── receive loop ──────────────────────────────────────────────────────────

    async def _receive_loop(self) -> None:
        try:
            while self._state is SessionState.ACTIVE:
                try:
                    raw = await self._transport.receive(self._connection)
                except ProtocolError as exc:
                    logger.warning(MSG_FRAME_DROPPED, exc)
                    continue
                except TransportError as exc:
                    logger.error(MSG_RECEIVE_FAILED, exc)
                    match await self._recover():
                        case True:
                            continue
                        case False:
                            return
                self._reconnect_attempts = 0
                await self._handle_frame(raw)
        finally:
            await self._release(CLOSE_REASON_DISCONNECT)

    async def _handle_frame(self, raw: str) -> None:
        try:
            event = decode_frame(raw)
        except ProtocolError as exc:
            logger.warning(MSG_FRAME_DROPPED, exc)
            return

        match event:
            case None:
                return
            case SessionStarted():
                logger.info(MSG_SESSION_STARTED)
            case Error(message=message, fatal=fatal):
                logger.error(MSG_SERVER_ERROR, "fatal" if fatal else "non-fatal", message)
            case _:
                pass

        match self._state:
            case SessionState.CLOSED:
                return
            case _:
                await self._events.put(event)

        match event:
            case Error(fatal=True):
                self._state = SessionState.CLOSED
                await self._release(CLOSE_REASON_SERVER_ERROR)
            case _:
                pass

    async def _recover(self) -> bool:
        """Reopen the connection with backoff. Returns False once the session is closed."""
        self._state = SessionState.RECONNECTING
        await self._release(CLOSE_REASON_RECEIVE_FAILED)
        limit = self._max_reconnect_attempts
        while self._reconnect_attempts < limit:
            self._reconnect_attempts += 1
            attempt = self._reconnect_attempts
            self._state = SessionState.RECONNECTING
            delay = self._backoff.delay_for_attempt(attempt)
            logger.info(MSG_RECONNECTING, delay, attempt, limit)
            await self._sleep(delay)
            try:
                await self._open(*self._params)
            except AuthError as exc:
                logger.error(MSG_RECONNECT_FAILED, attempt, limit, exc)
                await self._terminate(ERR_AUTH_FAILED)
                return False
            except ScribeError as exc:
                logger.error(MSG_RECONNECT_FAILED, attempt, limit, exc)
                continue
            self._state = SessionState.ACTIVE
            logger.info(MSG_RECONNECTED, attempt)
            return True

        await self._terminate(ERR_RECONNECT_EXHAUSTED % limit)
        return False

    async def _terminate(self, message: str) -> None:
        logger.error(message)
        self._state = SessionState.CLOSED
        await self._events.put(Error(message, fatal=True))

    # ── transport glue ────────────────────────────────────────────────────────

    async def _open(self, model_id: str, language_code: str) -> None:
        token = await self._token_provider.get_token(self._api_key)
        url = build_realtime_url(self._realtime_url, model_id, language_code)
        connection = await self._transport.open(url, {AUTHORIZATION_HEADER: token})
        self._token = token
        self._connection = connection
        logger.info(MSG_CONNECTED)

    async def _release(self, reason: str) -> None:
        connection, self._connection = self._connection, None
        match connection:
            case None:
                pass
            case conn:
                await self._transport.close(conn, reason)
