"""
OAuth refresh-token grant over HTTP.
"""

from __future__ import annotations

import logging
from dataclasses import replace

import httpx

from onboardkit.domain.exceptions import AuthError
from onboardkit.domain.interfaces import ClockInterface, TokenRefresherInterface
from onboardkit.domain.models import Credential

logger = logging.getLogger(__name__)


class OAuthTokenRefresher(TokenRefresherInterface):
    """Exchanges a refresh token at the provider's token endpoint."""

    def __init__(
        self,
        token_url: str,
        clock: ClockInterface,
        client_id: str | None = None,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        """
        Args:
            token_url: OAuth token endpoint
            clock: Used to compute the new expiry and update timestamp
            client_id: OAuth client id, sent when set
            client: Optional preconfigured httpx client (tests use MockTransport)
            timeout: Request timeout in seconds
        """
        self._token_url = token_url
        self._clock = clock
        self._client_id = client_id
        self._client = client or httpx.Client(timeout=timeout)

    def refresh(self, credential: Credential) -> Credential:
        if not credential.refresh_token:
            raise AuthError(f"No refresh token available for {credential.provider}")

        form = {"grant_type": "refresh_token", "refresh_token": credential.refresh_token}
        if self._client_id:
            form["client_id"] = self._client_id

        try:
            response = self._client.post(self._token_url, data=form)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise AuthError(
                f"Failed to refresh token for {credential.provider}: "
                f"HTTP {e.response.status_code}",
                hint='Run "onboardkit auth login" to re-authenticate.',
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AuthError(
                f"Failed to refresh token for {credential.provider}: {e}",
                hint='Run "onboardkit auth login" to re-authenticate.',
            ) from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise AuthError(
                f"Token endpoint returned no access token for {credential.provider}"
            )

        now = self._clock.now()
        expires_in = payload.get("expires_in")
        logger.info("Refreshed access token for %s", credential.provider)
        return replace(
            credential,
            access_token=access_token,
            refresh_token=payload.get("refresh_token") or credential.refresh_token,
            expires_at=now.timestamp() + float(expires_in) if expires_in else None,
            updated_at=now.isoformat(),
        )
