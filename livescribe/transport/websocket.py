"""WebSocketTransport — Transport backed by the websockets asyncio client."""
import logging

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import (
    ConnectionClosed,
    InvalidStatus,
    InvalidURI,
    WebSocketException,
)

from livescribe.constants import OPEN_TIMEOUT, PING_INTERVAL
from livescribe.errors import AuthError, ConnectError, ProtocolError, TransportError
from livescribe.transport.client import Transport

logger = logging.getLogger(__name__)


class WebSocketTransport(Transport):

    def __init__(
        self,
        open_timeout: float = OPEN_TIMEOUT,
        ping_interval: float | None = PING_INTERVAL,
    ) -> None:
        self._open_timeout = open_timeout
        self._ping_interval = ping_interval

    async def open(self, url: str, headers: dict[str, str]) -> ClientConnection:
        try:
            return await connect(
                url,
                additional_headers=headers,
                open_timeout=self._open_timeout,
                ping_interval=self._ping_interval,
            )
        except InvalidStatus as exc:
            match exc.response.status_code:
                case 401 | 403 as status:
                    raise AuthError(f"Handshake rejected with status {status}") from exc
                case status:
                    raise ConnectError(f"Handshake failed with status {status}") from exc
        except InvalidURI as exc:
            raise ConnectError(f"Invalid WebSocket URL: {url}") from exc
        except (WebSocketException, OSError, TimeoutError) as exc:
            raise ConnectError(f"WebSocket connection failed: {exc}") from exc

    async def send(self, connection: ClientConnection, message: str) -> None:
        try:
            await connection.send(message)
        except ConnectionClosed as exc:
            raise TransportError(f"Connection closed while sending: {exc}") from exc

    async def receive(self, connection: ClientConnection) -> str:
        try:
            message = await connection.recv()
        except ConnectionClosed as exc:
            raise TransportError(f"Connection closed: {exc}") from exc

        match message:
            case str() as text:
                return text
            case bytes() as data:
                try:
                    return data.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise ProtocolError("Binary frame is not UTF-8 text") from exc

    async def close(self, connection: ClientConnection, reason: str) -> None:
        try:
            await connection.close(reason=reason)
        except (WebSocketException, OSError) as exc:
            logger.debug("WebSocket close failed: %s", exc)
