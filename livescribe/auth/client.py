"""TokenProvider — abstract base for realtime session token exchange."""
from abc import ABC, abstractmethod


class TokenProvider(ABC):
    @abstractmethod
    async def get_token(self, api_key: str) -> str:
        """Exchange a long-lived API key for a single-use session token.

        Raises AuthError, FormatError or NetworkError. Never retries.
        """
        ...
