"""Google OAuth 2.0 client for the federated sign-in handshake.

Implements the authorization-code flow with httpx: build the consent URL,
exchange the returned code for an access token, and read the userinfo
document into a ``FederatedProfile``.
"""

import logging
from functools import lru_cache
from typing import Any
from urllib.parse import urlencode

import httpx

from app.auth.exceptions import FederatedSignInError
from app.auth.service import FederatedProfile
from app.core.exceptions import ProviderError
from app.core.http import get_google_client
from app.core.retry import with_retry

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "email", "profile")


class GoogleOAuthClient:
    """Thin wrapper over Google's OAuth endpoints."""

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _client(self) -> httpx.AsyncClient:
        return self._http_client or get_google_client()

    def authorization_url(self, state: str) -> str:
        """Build the consent screen URL for the given anti-forgery state."""
        if not self.is_configured:
            raise FederatedSignInError("Google sign-in is not configured")
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
            "prompt": "select_account",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def _request(
        self, method: str, url: str, *, attempts: int, **kwargs: Any
    ) -> dict[str, Any]:
        client = self._client()

        async def do_request() -> httpx.Response:
            return await client.request(method, url, **kwargs)

        try:
            response = await with_retry(
                do_request,
                attempts=attempts,
                exceptions=(httpx.RequestError,),
                operation=f"Google {method} {url}",
            )
        except httpx.RequestError as e:
            raise ProviderError("Identity provider unavailable") from e

        if response.status_code != 200:
            logger.info(
                "Google OAuth error response: status=%s",
                response.status_code,
                extra={"provider": "google", "status_code": response.status_code},
            )
            if response.status_code in {400, 401, 403}:
                raise FederatedSignInError("Identity provider rejected the request")
            raise ProviderError()

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError() from e
        if not isinstance(data, dict):
            raise ProviderError()
        return data

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token.

        Authorization codes are single use, so this call is never retried.
        """
        if not self.is_configured:
            raise FederatedSignInError("Google sign-in is not configured")
        data = await self._request(
            "POST",
            TOKEN_URL,
            attempts=1,
            data={
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self._redirect_uri,
            },
        )
        access_token = data.get("access_token")
        if not access_token:
            raise ProviderError("Identity provider returned no access token")
        return access_token

    async def fetch_profile(self, access_token: str) -> FederatedProfile:
        """Read the signed-in user's profile."""
        data = await self._request(
            "GET",
            USERINFO_URL,
            attempts=2,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        subject = data.get("sub")
        if not subject:
            raise ProviderError("Identity provider returned no subject")
        return FederatedProfile(
            provider_id=str(subject),
            email=data.get("email"),
            name=data.get("name") or "",
            picture=data.get("picture"),
            email_verified=bool(data.get("email_verified", False)),
        )


@lru_cache
def get_google_oauth_client() -> GoogleOAuthClient:
    """Get cached Google OAuth client built from application settings."""
    from app.core.settings import get_settings

    settings = get_settings()
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_callback_url,
    )
