# =============================================================================
# core/igdb.py  —  IGDB API Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns two read operations into IGDB query-language requests:
#     - search_games(query, limit)  → list[Game]
#     - get_game_details(game_id)   → Game | None
#
# THE REQUEST FLOW (both operations):
#   1. Build the query body with core.query.Query
#   2. Ask the TokenManager for a bearer token (refreshing if needed)
#   3. POST the body to https://api.igdb.com/v4/games
#   4. Decode the JSON array into Game records (core.models)
#
#   There is no retry.  A non-success status raises ApiError; a body that
#   isn't a list of games raises DeserializationError.  A 401 also drops
#   the cached token so the *next* call starts with a fresh one.
# =============================================================================

import logging
import time
from typing import Callable, Optional

import httpx

from core.auth import TOKEN_URL, TokenManager
from core.config import IGDBSettings
from core.errors import ApiError, DeserializationError, ValidationError
from core.models import Game, decode_games
from core.query import Query

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.igdb.com/v4"

DEFAULT_LIMIT = 10
MAX_LIMIT = 50

SEARCH_FIELDS = (
    "name",
    "summary",
    "rating",
    "aggregated_rating",
    "genres.name",
    "platforms.name",
    "first_release_date",
    "cover.url",
    "involved_companies.company.name",
)

DETAIL_FIELDS = (
    "name",
    "summary",
    "storyline",
    "rating",
    "aggregated_rating",
    "genres.name",
    "themes.name",
    "platforms.name",
    "first_release_date",
    "cover.url",
    "involved_companies.company.name",
    "similar_games.name",
    "similar_games.id",
    "game_modes.name",
)


def clamp_limit(limit: Optional[int]) -> int:
    """Normalise a page size: missing or below 1 means DEFAULT_LIMIT, capped at MAX_LIMIT."""
    if limit is None or limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


class IGDBClient:
    """Authenticated client for the IGDB v4 games endpoint."""

    def __init__(
        self,
        settings: IGDBSettings,
        *,
        http: Optional[httpx.AsyncClient] = None,
        api_base_url: str = API_BASE_URL,
        token_url: str = TOKEN_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._owns_http = http is None
        self._http = http if http is not None else httpx.AsyncClient(timeout=settings.http_timeout)
        self._api_base_url = api_base_url.rstrip("/")
        self.tokens = TokenManager(
            self._http,
            settings.client_id,
            settings.client_secret,
            token_url=token_url,
            clock=clock,
        )

    @classmethod
    def from_env(cls, **kwargs) -> "IGDBClient":
        """Build a client from IGDB_* environment variables.

        Raises ConfigurationError before anything else is created if the
        credentials are missing.
        """
        return cls(IGDBSettings.from_env(), **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "IGDBClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------
    async def search_games(self, query: str, limit: int = DEFAULT_LIMIT) -> list[Game]:
        """Search games by name, returning at most `limit` (capped at 50)."""
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValidationError("limit must be an integer")
        body = (
            Query()
            .search(query)
            .fields(*SEARCH_FIELDS)
            .limit(clamp_limit(limit))
            .render()
        )
        return await self._request("games", body)

    async def get_game_details(self, game_id: int) -> Optional[Game]:
        """Fetch one game by IGDB id, or None if it doesn't exist."""
        if isinstance(game_id, bool) or not isinstance(game_id, int):
            raise ValidationError("game_id must be an integer")
        body = Query().where_equals("id", game_id).fields(*DETAIL_FIELDS).render()
        games = await self._request("games", body)
        if len(games) > 1:
            logger.debug("id filter %s matched %d games; using the first", game_id, len(games))
        return games[0] if games else None

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    async def _request(self, endpoint: str, body: str) -> list[Game]:
        token = await self.tokens.ensure_token()

        logger.debug("POST %s/%s", self._api_base_url, endpoint)
        response = await self._http.post(
            f"{self._api_base_url}/{endpoint}",
            headers={
                "Client-ID": self._settings.client_id,
                "Authorization": f"Bearer {token}",
                "Content-Type": "text/plain",
            },
            content=body.encode("utf-8"),
        )

        if not response.is_success:
            logger.warning("IGDB %s request failed with status %s", endpoint, response.status_code)
            if response.status_code == 401:
                self.tokens.invalidate()
            raise ApiError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            raise DeserializationError("response: body is not valid JSON") from None

        games = decode_games(payload)
        logger.debug("IGDB %s returned %d record(s)", endpoint, len(games))
        return games
