"""All magic values live here — no inline literals anywhere else."""

# ElevenLabs endpoints
DEFAULT_API_BASE_URL = "https://api.elevenlabs.io"
DEFAULT_REALTIME_URL = "wss://api.elevenlabs.io/v1/speech-to-text/realtime"
TOKEN_PATH = "/v1/single-use-token/realtime_scribe"
API_KEY_HEADER = "xi-api-key"
AUTHORIZATION_HEADER = "Authorization"
TOKEN_FIELD = "token"

# Session defaults
DEFAULT_MODEL_ID = "scribe_v2_realtime"
DEFAULT_LANGUAGE = "en"
DEFAULT_SAMPLE_RATE = 16000
DEFAULT_MAX_RECONNECT_ATTEMPTS = 3
DEFAULT_FINALIZE_GRACE: float = 0.5
DEFAULT_TOKEN_TIMEOUT: float = 10.0
COMMIT_STRATEGY = "vad"

# Reconnect backoff: base * factor ** (attempt - 1) → 1 s, 2 s, 4 s
BACKOFF_BASE_SECONDS: float = 1.0
BACKOFF_FACTOR: float = 2.0
BACKOFF_MAX_SECONDS: float = 30.0

# Close reasons
CLOSE_REASON_DISCONNECT = "client disconnect"
CLOSE_REASON_RECEIVE_FAILED = "receive failed"
CLOSE_REASON_SERVER_ERROR = "fatal server error"

# Audio bridge
PCM16_SAMPLE_WIDTH = 2
DEFAULT_CHUNK_MS = 100

# WebSocket transport
OPEN_TIMEOUT: float = 10.0
PING_INTERVAL: float = 20.0

# Console front end
LIVE_REFRESH_PER_SECOND = 10
DISPLAY_POLL_INTERVAL: float = 0.1

# Error texts surfaced to the UI
ERR_AUTH_FAILED = "authentication failed"
ERR_QUOTA_EXCEEDED = "quota exceeded"
ERR_RECONNECT_EXHAUSTED = "Failed to maintain WebSocket connection after %d attempts"
ERR_API_KEY_MISSING = "ElevenLabs API key not configured"
ERR_CONNECTION_FAILED = "Connection failed"

# Log messages
MSG_STARTING = "Starting livescribe…"
MSG_CONNECTING = "Connecting to realtime API (model=%s, language=%s)"
MSG_TOKEN_REQUEST = "Requesting realtime token"
MSG_TOKEN_OK = "Obtained realtime token"
MSG_TOKEN_STATUS_FAIL = "Token request failed with status %d: %s"
MSG_CONNECTED = "WebSocket connection established"
MSG_SESSION_STARTED = "Realtime session started"
MSG_NOT_ACTIVE = "Session not active (%s), dropping %s"
MSG_SEND_FAILED = "Error sending %s: %s"
MSG_RECEIVE_FAILED = "Error receiving message: %s"
MSG_RECONNECTING = "Reconnecting in %.1fs (attempt %d/%d)"
MSG_RECONNECT_FAILED = "Reconnect attempt %d/%d failed: %s"
MSG_RECONNECTED = "Reconnected after %d attempt(s)"
MSG_FRAME_DROPPED = "Dropped malformed frame: %s"
MSG_FRAME_IGNORED = "Ignored message type: %s"
MSG_SERVER_ERROR = "Server error (%s): %s"
MSG_DISCONNECTING = "Disconnecting from realtime API"
MSG_FINALIZING = "Finalizing realtime transcription"
MSG_FINAL_TEXT = "Final text: %s"
MSG_CLEARED = "Cleared realtime transcripts"
MSG_EVENT_FAILED = "Failed to apply %s: %s"
MSG_STREAM_START = "Starting realtime audio streaming"
MSG_STREAM_STOP = "Stopping realtime audio streaming"

# Console status line
STATUS_LISTENING = "Listening..."
STATUS_TRANSCRIBING = "Transcribing"
