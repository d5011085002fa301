"""
Tests for the mastodon_client module.
"""

import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import requests

from api.mastodon_client import MastodonClient, RequestThrottle
from utils.errors import RateLimitExceeded, TransportError

# Pytest marker for async tests
pytestmark = pytest.mark.asyncio


def mock_response(payload=None, status_code=200, headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.headers = headers or {"Content-Type": "application/json"}
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Error", response=response
        )
    return response


@pytest.fixture
def client():
    return MastodonClient("example.social", "token-123", requests_per_second=100)


@patch("requests.request")
async def test_lookup_account_returns_id(mock_request, client):
    mock_request.return_value = mock_response({"id": "109", "acct": "alice"})

    account_id = await client.lookup_account("@alice")

    assert account_id == "109"
    args, kwargs = mock_request.call_args
    assert args == ("GET", "https://example.social/api/v1/accounts/lookup")
    assert kwargs["params"] == {"acct": "alice"}
    assert kwargs["headers"]["Authorization"] == "Bearer token-123"


@patch("requests.request")
async def test_lookup_account_without_id_fails(mock_request, client):
    mock_request.return_value = mock_response({"error": "Record not found"})

    with pytest.raises(TransportError):
        await client.lookup_account("nobody")


@patch("requests.request")
async def test_list_statuses_passes_cursor_and_limit(mock_request, client):
    mock_request.return_value = mock_response([{"id": "5"}, {"id": "4"}])

    statuses = await client.list_statuses("109", max_id="6", limit=40)

    assert [s["id"] for s in statuses] == ["5", "4"]
    args, kwargs = mock_request.call_args
    assert args[1] == "https://example.social/api/v1/accounts/109/statuses"
    assert kwargs["params"] == {"limit": 40, "max_id": "6"}


@patch("requests.request")
async def test_list_statuses_omits_missing_cursor(mock_request, client):
    mock_request.return_value = mock_response([])

    assert await client.list_statuses("109") == []
    assert mock_request.call_args.kwargs["params"] == {"limit": 40}


@patch("requests.request")
async def test_429_raises_rate_limit(mock_request, client):
    mock_request.return_value = mock_response(
        {"error": "Too many requests"}, status_code=429, headers={"X-RateLimit-Reset": "2025-01-01T00:05:00Z"}
    )

    with pytest.raises(RateLimitExceeded) as excinfo:
        await client.list_statuses("109", max_id="6")

    assert isinstance(excinfo.value.__cause__, requests.exceptions.HTTPError)


@patch("requests.request")
async def test_server_error_raises_transport_error(mock_request, client):
    mock_request.return_value = mock_response({"error": "oops"}, status_code=503)

    with pytest.raises(TransportError) as excinfo:
        await client.list_statuses("109")

    assert not isinstance(excinfo.value, RateLimitExceeded)
    assert isinstance(excinfo.value.__cause__, requests.exceptions.HTTPError)


@patch("requests.request")
async def test_connection_error_raises_transport_error(mock_request, client):
    mock_request.side_effect = requests.exceptions.ConnectionError("unreachable")

    with pytest.raises(TransportError):
        await client.list_statuses("109")


async def test_instance_url_normalization():
    assert MastodonClient("https://example.social/", "t").base_url == "https://example.social"
    assert MastodonClient("example.social", "t").base_url == "https://example.social"


async def test_client_requires_credentials():
    with pytest.raises(ValueError):
        MastodonClient("", "token")


async def test_first_request_is_not_delayed():
    throttle = RequestThrottle(1)
    started = time.monotonic()
    await throttle.acquire()
    assert time.monotonic() - started < 0.5


@patch("requests.request")
async def test_sequential_requests_are_spaced(mock_request):
    mock_request.return_value = mock_response([])
    slow_client = MastodonClient("example.social", "token-123", requests_per_second=10)

    started = time.monotonic()
    for _ in range(5):
        await slow_client.list_statuses("109")
    elapsed = time.monotonic() - started

    # 5 requests at 10/s leave 4 gaps of 0.1s
    assert elapsed >= 0.35
    assert mock_request.call_count == 5


@patch("api.mastodon_client.asyncio.sleep", new_callable=AsyncMock)
async def test_throttle_sleeps_for_remaining_interval(mock_sleep):
    throttle = RequestThrottle(2)
    await throttle.acquire()
    await throttle.acquire()

    mock_sleep.assert_awaited_once()
    waited = mock_sleep.await_args.args[0]
    assert 0 < waited <= 0.5
