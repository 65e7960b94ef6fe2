"""Tests for app/auth/google.py - Google OAuth client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.auth.exceptions import FederatedSignInError
from app.auth.google import TOKEN_URL, USERINFO_URL, GoogleOAuthClient
from app.core.exceptions import ProviderError


def make_client(handler, client_id="client-id", client_secret="client-secret"):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    google = GoogleOAuthClient(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri="http://localhost:8000/auth/google/callback",
        http_client=http_client,
    )
    return google, http_client


def test_authorization_url():
    google = GoogleOAuthClient("client-id", "secret", "http://cb.example/callback")

    url = urlparse(google.authorization_url("state-123"))
    params = parse_qs(url.query)

    assert url.netloc == "accounts.google.com"
    assert params["client_id"] == ["client-id"]
    assert params["redirect_uri"] == ["http://cb.example/callback"]
    assert params["response_type"] == ["code"]
    assert params["scope"] == ["openid email profile"]
    assert params["state"] == ["state-123"]


@pytest.mark.parametrize(
    ("client_id", "client_secret"), [(None, "secret"), ("id", None), ("", "")]
)
def test_not_configured(client_id, client_secret):
    google = GoogleOAuthClient(client_id, client_secret, "http://cb.example")

    assert google.is_configured is False
    with pytest.raises(FederatedSignInError):
        google.authorization_url("state")


class TestExchangeCode:
    """Unit tests for exchange_code."""

    @pytest.mark.asyncio
    async def test_returns_access_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "at-1"})

        google, http_client = make_client(handler)
        async with http_client:
            token = await google.exchange_code("auth-code")

        assert token == "at-1"
        assert seen["url"] == TOKEN_URL
        assert seen["body"]["code"] == ["auth-code"]
        assert seen["body"]["grant_type"] == ["authorization_code"]

    @pytest.mark.asyncio
    async def test_rejected_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        google, http_client = make_client(handler)
        async with http_client:
            with pytest.raises(FederatedSignInError) as exc_info:
                await google.exchange_code("used-code")

        assert exc_info.value.status_code == 401
        assert exc_info.value.error_type == "federated_sign_in_failed"

    @pytest.mark.asyncio
    async def test_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        google, http_client = make_client(handler)
        async with http_client:
            with pytest.raises(ProviderError):
                await google.exchange_code("auth-code")

    @pytest.mark.asyncio
    async def test_missing_access_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"token_type": "Bearer"})

        google, http_client = make_client(handler)
        async with http_client:
            with pytest.raises(ProviderError):
                await google.exchange_code("auth-code")

    @pytest.mark.asyncio
    async def test_network_error_not_retried(self):
        """Authorization codes are single use, so a failed exchange is final."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        google, http_client = make_client(handler)
        async with http_client:
            with pytest.raises(ProviderError):
                await google.exchange_code("auth-code")

        assert calls == 1


class TestFetchProfile:
    """Unit tests for fetch_profile."""

    @pytest.mark.asyncio
    async def test_maps_userinfo(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == USERINFO_URL
            assert request.headers["Authorization"] == "Bearer at-1"
            return httpx.Response(
                200,
                json={
                    "sub": "1234567890",
                    "email": "gina@example.com",
                    "email_verified": True,
                    "name": "Gina",
                    "picture": "https://example.com/gina.png",
                },
            )

        google, http_client = make_client(handler)
        async with http_client:
            profile = await google.fetch_profile("at-1")

        assert profile.provider_id == "1234567890"
        assert profile.email == "gina@example.com"
        assert profile.name == "Gina"
        assert profile.picture == "https://example.com/gina.png"
        assert profile.email_verified is True

    @pytest.mark.asyncio
    async def test_unverified_email_flag(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"sub": "1", "email": "x@example.com"})

        google, http_client = make_client(handler)
        async with http_client:
            profile = await google.fetch_profile("at-1")

        assert profile.email_verified is False
        assert profile.name == ""

    @pytest.mark.asyncio
    async def test_retries_transient_network_error(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"sub": "1", "email": "x@example.com"})

        google, http_client = make_client(handler)
        async with http_client:
            profile = await google.fetch_profile("at-1")

        assert calls == 2
        assert profile.provider_id == "1"

    @pytest.mark.asyncio
    async def test_missing_subject(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"email": "x@example.com"})

        google, http_client = make_client(handler)
        async with http_client:
            with pytest.raises(ProviderError):
                await google.fetch_profile("at-1")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>oops</html>")

        google, http_client = make_client(handler)
        async with http_client:
            with pytest.raises(ProviderError):
                await google.fetch_profile("at-1")
