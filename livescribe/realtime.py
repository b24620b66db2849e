"""RealtimeTranscriber — wires token, transport, session, reconciler and audio bridge."""
import asyncio
import logging
from typing import Optional

from livescribe.audio.bridge import AudioBridge
from livescribe.audio.source import AudioSource
from livescribe.auth.client import TokenProvider
from livescribe.auth.elevenlabs import ElevenLabsTokenProvider
from livescribe.backoff import Sleeper
from livescribe.config import Config
from livescribe.constants import (
    ERR_API_KEY_MISSING,
    ERR_CONNECTION_FAILED,
    MSG_STREAM_START,
    MSG_STREAM_STOP,
)
from livescribe.errors import ConnectError
from livescribe.events import TranscriptEvent
from livescribe.reconciler import OnError, TranscriptReconciler
from livescribe.session import RealtimeSession, SessionState
from livescribe.transport.client import Transport
from livescribe.transport.websocket import WebSocketTransport

logger = logging.getLogger(__name__)


class RealtimeTranscriber:
    """Application-facing entry point for one dictation.

    setup() → start_streaming() → push_audio()/stream_source() → finalize().
    The UI observes is_active, last_error and the reconciler's getters.
    """

    def __init__(
        self,
        config: Config,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[Transport] = None,
        on_error: Optional[OnError] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._config = config
        self._token_provider = token_provider or ElevenLabsTokenProvider(
            base_url=config.api_base_url,
            timeout=config.token_timeout,
        )
        self._transport = transport or WebSocketTransport()
        self._on_error = on_error
        self._sleep = sleep
        self._session: Optional[RealtimeSession] = None
        self._reconciler: Optional[TranscriptReconciler] = None
        self._bridge: Optional[AudioBridge] = None
        self._last_error: Optional[str] = None

    # ── state for the UI ──────────────────────────────────────────────────────

    @property
    def session(self) -> Optional[RealtimeSession]:
        return self._session

    @property
    def reconciler(self) -> Optional[TranscriptReconciler]:
        return self._reconciler

    @property
    def is_active(self) -> bool:
        match (self._session, self._reconciler):
            case (RealtimeSession() as session, TranscriptReconciler() as reconciler):
                return reconciler.is_active and session.state is not SessionState.CLOSED
            case _:
                return False

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    # ── lifecycle ─────────────────────────────────────────────────────────────

    async def setup(self) -> bool:
        match self._session:
            case None:
                pass
            case _:
                await self.finalize()

        match self._config.elevenlabs_api_key.strip():
            case "":
                logger.error(ERR_API_KEY_MISSING)
                self._report(ERR_API_KEY_MISSING)
                return False
            case _:
                pass

        events: asyncio.Queue[TranscriptEvent] = asyncio.Queue()
        self._session = RealtimeSession(
            self._config.elevenlabs_api_key,
            events,
            self._token_provider,
            self._transport,
            realtime_url=self._config.realtime_url,
            max_reconnect_attempts=self._config.max_reconnect_attempts,
            sleep=self._sleep,
        )
        self._reconciler = TranscriptReconciler(
            events,
            self._session,
            grace_seconds=self._config.finalize_grace_seconds,
            on_error=self._report,
            sleep=self._sleep,
        )
        self._bridge = AudioBridge(self._session, sleep=self._sleep)
        self._reconciler.start()

        try:
            await self._session.connect(self._config.model_id, self._config.language_code)
        except ConnectError as exc:
            logger.error("Failed to connect to realtime service: %s", exc)
            self._report(ERR_CONNECTION_FAILED)
            await self._reconciler.stop()
            return False
        return True

    def start_streaming(self) -> None:
        match self._bridge:
            case None:
                logger.warning("Realtime service not initialized")
            case bridge:
                logger.info(MSG_STREAM_START)
                bridge.attach()

    def stop_streaming(self) -> None:
        match self._bridge:
            case None:
                pass
            case bridge:
                logger.info(MSG_STREAM_STOP)
                bridge.detach()

    def push_audio(self, data: bytes, sample_rate: int) -> None:
        match self._bridge:
            case None:
                pass
            case bridge:
                bridge.push(data, sample_rate)

    async def stream_source(self, source: AudioSource, realtime: bool = True) -> int:
        match self._bridge:
            case None:
                return 0
            case bridge:
                return await bridge.stream(source, realtime=realtime)

    async def finalize(self) -> str:
        """Flush, collect the final text, and tear the session down."""
        match (self._session, self._reconciler):
            case (RealtimeSession() as session, TranscriptReconciler() as reconciler):
                pass
            case _:
                return ""
        self.stop_streaming()
        text = await reconciler.finalize()
        await session.disconnect()
        await reconciler.stop()
        return text

    def clear(self) -> None:
        self._last_error = None
        match self._reconciler:
            case None:
                pass
            case reconciler:
                reconciler.clear()

    def _report(self, message: str) -> None:
        self._last_error = message
        match self._on_error:
            case None:
                pass
            case callback:
                callback(message)
