"""Pytest configuration shared across the suite."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from core.config import IGDBSettings
from core.igdb import IGDBClient

START_TIME = 1_700_000_000.0


class FakeClock:
    """Controllable stand-in for time.time()."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeIGDB:
    """Serves the Twitch token endpoint and the IGDB games endpoint.

    Responses are queued per endpoint; when a queue is empty the token
    endpoint issues a fresh one-hour token and the games endpoint returns [].
    Every request is recorded for assertions.
    """

    def __init__(self) -> None:
        self.token_requests: list[httpx.Request] = []
        self.api_requests: list[httpx.Request] = []
        self._token_queue: list[httpx.Response] = []
        self._games_queue: list[httpx.Response] = []

    def queue_token(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self._token_queue.append(_response(status_code, payload, text))

    def queue_games(self, payload: Any = None, status_code: int = 200, text: str | None = None) -> None:
        self._games_queue.append(_response(status_code, payload, text))

    @property
    def bodies(self) -> list[str]:
        return [request.content.decode("utf-8") for request in self.api_requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "id.twitch.tv":
            self.token_requests.append(request)
            if self._token_queue:
                return self._token_queue.pop(0)
            return httpx.Response(
                200,
                json={
                    "access_token": f"token-{len(self.token_requests)}",
                    "expires_in": 3600,
                    "token_type": "bearer",
                },
            )
        if request.url.host == "api.igdb.com":
            self.api_requests.append(request)
            if self._games_queue:
                return self._games_queue.pop(0)
            return httpx.Response(200, json=[])
        return httpx.Response(404, text=f"unexpected host {request.url.host}")


def _response(status_code: int, payload: Any, text: str | None) -> httpx.Response:
    if text is not None:
        return httpx.Response(status_code, text=text)
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


@pytest.fixture
def settings() -> IGDBSettings:
    return IGDBSettings(client_id="test-client-id", client_secret="test-client-secret")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_igdb() -> FakeIGDB:
    return FakeIGDB()


@pytest.fixture
def http(fake_igdb: FakeIGDB) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_igdb.handler))


@pytest.fixture
def igdb_client(settings: IGDBSettings, http: httpx.AsyncClient, clock: FakeClock) -> IGDBClient:
    return IGDBClient(settings, http=http, clock=clock)
