# =============================================================================
# core/auth.py  —  Twitch Client-Credentials Token Manager
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   IGDB authenticates with a Twitch app access token.  TokenManager gets
#   one through the OAuth2 client-credentials grant, keeps it in memory and
#   hands it out until it is within five minutes of expiring.
#
# REFRESH:
#   When the cached credential is missing or about to expire, the first
#   caller starts a refresh task.  Callers arriving while it is in flight
#   await the same task instead of starting their own, so one refresh
#   issues exactly one token request.  Cancelling one caller leaves the
#   refresh running for the rest.  The task is cleared once it finishes;
#   a failed refresh leaves no credential behind and the next call tries
#   again.
# =============================================================================

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from core.errors import AuthenticationError
from core.models import Credential

logger = logging.getLogger(__name__)

TOKEN_URL = "https://id.twitch.tv/oauth2/token"


class TokenManager:
    """Issue and cache bearer tokens for one client id/secret pair."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        *,
        token_url: str = TOKEN_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._http = http
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._clock = clock
        self._credential: Optional[Credential] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    async def ensure_token(self) -> str:
        """Return a usable bearer token, refreshing it if necessary.

        Raises:
            AuthenticationError: if Twitch refuses the grant or returns an
                incomplete token payload.
        """
        credential = self._credential
        if credential is not None and credential.is_usable(self._clock()):
            return credential.token

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._refresh())
            self._pending.add_done_callback(self._clear_pending)

        # Cancelling this caller leaves the shared refresh running.
        credential = await asyncio.shield(self._pending)
        return credential.token

    def invalidate(self) -> None:
        """Forget the cached credential so the next call fetches a new one."""
        if self._credential is not None:
            logger.info("Discarding cached Twitch token")
        self._credential = None

    def _clear_pending(self, task: asyncio.Task) -> None:
        if self._pending is task:
            self._pending = None
        if not task.cancelled() and task.exception() is not None:
            # Every waiter may have been cancelled; mark the error as seen.
            logger.debug("Twitch token refresh failed: %s", task.exception())

    async def _refresh(self) -> Credential:
        logger.debug("Requesting Twitch app access token")
        params = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "grant_type": "client_credentials",
        }
        response = await self._http.post(self._token_url, params=params)

        if not response.is_success:
            logger.warning("Twitch token request failed with status %s", response.status_code)
            raise AuthenticationError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            raise AuthenticationError(
                response.status_code, "incomplete token payload: body is not JSON"
            ) from None

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        expires_in = payload.get("expires_in") if isinstance(payload, dict) else None
        if not access_token or not isinstance(expires_in, (int, float)) or isinstance(expires_in, bool):
            raise AuthenticationError(
                response.status_code,
                "incomplete token payload: access_token and expires_in are required",
            )

        credential = Credential(
            token=access_token,
            expires_at=self._clock() + float(expires_in),
        )
        self._credential = credential
        logger.info("Obtained Twitch app access token (expires in %ss)", expires_in)
        return credential
