"""Transport — abstract base for persistent duplex message connections."""
from abc import ABC, abstractmethod
from typing import Any

# Opaque handle returned by open(); only the transport that made it may use it.
Connection = Any


class Transport(ABC):
    @abstractmethod
    async def open(self, url: str, headers: dict[str, str]) -> Connection:
        """Open a connection. Raises ConnectError, or AuthError when the handshake is refused."""
        ...

    @abstractmethod
    async def send(self, connection: Connection, message: str) -> None:
        """Send one text message. Raises TransportError."""
        ...

    @abstractmethod
    async def receive(self, connection: Connection) -> str:
        """Suspend until the next message. Raises TransportError when the connection drops."""
        ...

    @abstractmethod
    async def close(self, connection: Connection, reason: str) -> None:
        """Release the connection. Never raises."""
        ...
