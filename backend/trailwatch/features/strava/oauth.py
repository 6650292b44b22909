"""
Strava OAuth endpoints.

Thin wrapper over /oauth/authorize and /oauth/token. Token requests
go through RetryingHttpClient, so a 429 is backed off like any other
Strava call. Every failure, including network errors and exhausted
retries, surfaces as AuthError.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from pydantic import ValidationError

from trailwatch.shared.errors import AuthError, TransientNetworkError
from trailwatch.shared.http import RetryingHttpClient
from .schemas import TokenResponse

logger = logging.getLogger(__name__)


class StravaOAuth:
    """
    Client for the Strava OAuth endpoints.

    Usage:
        oauth = StravaOAuth(client_id, client_secret, RetryingHttpClient(http_client))
        auth_url = oauth.get_authorization_url(
            redirect_uri="https://example.com/api/strava/callback"
        )
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        http: RetryingHttpClient,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.http = http

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: str = "read,activity:read"
    ) -> str:
        """
        Build the consent screen URL.

        The consent screen is shown on every authorization
        (approval_prompt=force).
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": "force",
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> TokenResponse:
        """
        Exchange authorization code for tokens.

        The response includes the authorized athlete.

        Raises:
            AuthError: If token exchange fails
        """
        logger.debug("Fetching new strava token using OAuth flow")
        return await self._token_request(
            {"code": code, "grant_type": "authorization_code"},
            action="exchange",
        )

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """
        Refresh an expired access token.

        Raises:
            AuthError: If token refresh fails
        """
        logger.debug("Fetching new strava token using refresh token")
        return await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            action="refresh",
        )

    async def _token_request(self, grant: dict, action: str) -> TokenResponse:
        if not self.client_id or not self.client_secret:
            raise AuthError("STRAVA_CLIENT_ID and STRAVA_CLIENT_SECRET must be set")

        form = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **grant,
        }
        try:
            response = await self.http.send(
                lambda: self.http.client.post(self.TOKEN_URL, data=form)
            )
        except TransientNetworkError as e:
            raise AuthError(f"Token {action} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Strava token {action} failed: {response.text}")
            raise AuthError(f"Token {action} failed: {response.status_code}")

        try:
            return TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AuthError(f"Token {action} returned malformed JSON") from e
