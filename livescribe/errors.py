"""Exception taxonomy for the realtime transcription client."""


class ScribeError(Exception):
    """Base class for livescribe errors."""


class AuthError(ScribeError):
    """Credential rejected: non-2xx token response or refused handshake. Never retried."""


class FormatError(ScribeError):
    """Token response body is not the expected shape."""


class NetworkError(ScribeError):
    """The token request could not reach the service."""


class ConnectError(ScribeError):
    """Connection setup failed; the cause is chained."""


class TransportError(ScribeError):
    """Mid-session socket failure. Triggers reconnection."""


class ProtocolError(ScribeError):
    """Malformed incoming frame. Logged and dropped."""
