"""TDD: ElevenLabsTokenProvider tests written FIRST"""
import httpx
import pytest

from livescribe.auth.client import TokenProvider
from livescribe.auth.elevenlabs import ElevenLabsTokenProvider
from livescribe.errors import AuthError, FormatError, NetworkError


def make_provider(handler) -> ElevenLabsTokenProvider:
    return ElevenLabsTokenProvider(
        base_url="https://api.test",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def test_elevenlabs_provider_implements_abc():
    assert issubclass(ElevenLabsTokenProvider, TokenProvider)


@pytest.mark.asyncio
async def test_get_token_posts_api_key_and_returns_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"token": "single-use"})

    token = await make_provider(handler).get_token("xi-secret")

    assert token == "single-use"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/v1/single-use-token/realtime_scribe"
    assert seen[0].headers["xi-api-key"] == "xi-secret"


@pytest.mark.asyncio
async def test_get_token_non_2xx_raises_auth_error():
    provider = make_provider(lambda request: httpx.Response(401, text="invalid key"))
    with pytest.raises(AuthError, match="401"):
        await provider.get_token("bad")


@pytest.mark.asyncio
async def test_get_token_missing_field_raises_format_error():
    provider = make_provider(lambda request: httpx.Response(200, json={"nope": 1}))
    with pytest.raises(FormatError):
        await provider.get_token("key")


@pytest.mark.asyncio
async def test_get_token_non_json_body_raises_format_error():
    provider = make_provider(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(FormatError):
        await provider.get_token("key")


@pytest.mark.asyncio
async def test_get_token_transport_failure_raises_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError, match="refused"):
        await make_provider(handler).get_token("key")
