from __future__ import annotations

import asyncio

import httpx
import pytest

from core.auth import TokenManager
from core.errors import AuthenticationError


@pytest.fixture
def tokens(http: httpx.AsyncClient, clock) -> TokenManager:
    return TokenManager(http, "test-client-id", "test-client-secret", clock=clock)


@pytest.mark.asyncio
async def test_first_call_requests_client_credentials_token(tokens, fake_igdb, clock) -> None:
    token = await tokens.ensure_token()

    assert token == "token-1"
    assert len(fake_igdb.token_requests) == 1
    request = fake_igdb.token_requests[0]
    assert request.method == "POST"
    assert request.url.path == "/oauth2/token"
    assert request.url.params["client_id"] == "test-client-id"
    assert request.url.params["client_secret"] == "test-client-secret"
    assert request.url.params["grant_type"] == "client_credentials"
    assert tokens.credential.expires_at == clock.now + 3600


@pytest.mark.asyncio
async def test_cached_token_is_reused_while_valid(tokens, fake_igdb, clock) -> None:
    await tokens.ensure_token()
    clock.advance(3600 - 301)

    token = await tokens.ensure_token()

    assert token == "token-1"
    assert len(fake_igdb.token_requests) == 1


@pytest.mark.asyncio
async def test_token_is_refreshed_within_safety_margin(tokens, fake_igdb, clock) -> None:
    await tokens.ensure_token()
    clock.advance(3600 - 300)

    token = await tokens.ensure_token()

    assert token == "token-2"
    assert len(fake_igdb.token_requests) == 2


@pytest.mark.asyncio
async def test_rejected_grant_raises_authentication_error(tokens, fake_igdb) -> None:
    fake_igdb.queue_token(401, text="invalid_client")

    with pytest.raises(AuthenticationError) as exc_info:
        await tokens.ensure_token()

    message = str(exc_info.value)
    assert "401" in message
    assert "invalid_client" in message
    assert exc_info.value.status_code == 401
    assert tokens.credential is None


@pytest.mark.asyncio
async def test_failed_refresh_is_retried_by_next_call(tokens, fake_igdb) -> None:
    fake_igdb.queue_token(500, text="upstream down")

    with pytest.raises(AuthenticationError):
        await tokens.ensure_token()

    assert await tokens.ensure_token() == "token-2"
    assert len(fake_igdb.token_requests) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"expires_in": 3600, "token_type": "bearer"},
        {"access_token": "abc", "token_type": "bearer"},
        {"access_token": "abc", "expires_in": "soon"},
        ["not", "an", "object"],
    ],
)
async def test_incomplete_token_payload_is_rejected(tokens, fake_igdb, payload) -> None:
    fake_igdb.queue_token(200, payload)

    with pytest.raises(AuthenticationError) as exc_info:
        await tokens.ensure_token()

    assert "incomplete token payload" in str(exc_info.value)
    assert tokens.credential is None


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh(tokens, fake_igdb) -> None:
    results = await asyncio.gather(*(tokens.ensure_token() for _ in range(5)))

    assert results == ["token-1"] * 5
    assert len(fake_igdb.token_requests) == 1


@pytest.mark.asyncio
async def test_concurrent_callers_all_see_refresh_failure(tokens, fake_igdb) -> None:
    fake_igdb.queue_token(401, text="invalid_client")

    results = await asyncio.gather(
        *(tokens.ensure_token() for _ in range(3)),
        return_exceptions=True,
    )

    assert all(isinstance(result, AuthenticationError) for result in results)
    assert len(fake_igdb.token_requests) == 1


@pytest.mark.asyncio
async def test_invalidate_forces_a_new_token(tokens, fake_igdb) -> None:
    await tokens.ensure_token()
    tokens.invalidate()

    assert await tokens.ensure_token() == "token-2"
    assert len(fake_igdb.token_requests) == 2


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_refresh(clock) -> None:
    released = asyncio.Event()
    token_requests: list[httpx.Request] = []

    async def slow_token_endpoint(request: httpx.Request) -> httpx.Response:
        token_requests.append(request)
        await released.wait()
        return httpx.Response(200, json={"access_token": "t", "expires_in": 3600})

    tokens = TokenManager(
        httpx.AsyncClient(transport=httpx.MockTransport(slow_token_endpoint)),
        "test-client-id",
        "test-client-secret",
        clock=clock,
    )

    first = asyncio.create_task(tokens.ensure_token())
    second = asyncio.create_task(tokens.ensure_token())
    while not token_requests:
        await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first

    released.set()

    assert await second == "t"
    assert await tokens.ensure_token() == "t"
    assert len(token_requests) == 1
