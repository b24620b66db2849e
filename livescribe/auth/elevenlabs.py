"""ElevenLabsTokenProvider — single-use realtime token via the ElevenLabs REST API."""
import logging
from typing import Optional

import httpx

from livescribe.auth.client import TokenProvider
from livescribe.constants import (
    API_KEY_HEADER,
    DEFAULT_API_BASE_URL,
    DEFAULT_TOKEN_TIMEOUT,
    MSG_TOKEN_OK,
    MSG_TOKEN_REQUEST,
    MSG_TOKEN_STATUS_FAIL,
    TOKEN_FIELD,
    TOKEN_PATH,
)
from livescribe.errors import AuthError, FormatError, NetworkError

logger = logging.getLogger(__name__)


class ElevenLabsTokenProvider(TokenProvider):

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TOKEN_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def get_token(self, api_key: str) -> str:
        logger.info(MSG_TOKEN_REQUEST)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    TOKEN_PATH,
                    headers={API_KEY_HEADER: api_key, "Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise NetworkError(f"Token request failed: {exc}") from exc

        match response.is_success:
            case False:
                logger.error(MSG_TOKEN_STATUS_FAIL, response.status_code, response.text[:200])
                raise AuthError(f"Token request failed with status {response.status_code}")
            case True:
                pass

        try:
            body = response.json()
        except ValueError as exc:
            raise FormatError("Token response is not JSON") from exc

        match body:
            case {"token": str() as token} if token:
                logger.info(MSG_TOKEN_OK)
                return token
            case _:
                raise FormatError(f"Token response has no '{TOKEN_FIELD}' field")
