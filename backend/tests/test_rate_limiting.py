"""Tests that rate limiting is wired on the evaluation endpoints."""
import pytest

from backend.limits import BATCH_LIMIT, limiter


def test_rate_limiter_wired_to_app_state():
    """slowapi needs the limiter on app.state for the 429 handler."""
    from backend.main import app
    assert app.state.limiter is limiter


@pytest.mark.asyncio
async def test_single_request_under_limit(client):
    resp = await client.post("/evaluate/safety", json={"content": "Hello"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_batch_limit_returns_429(client):
    allowed = int(BATCH_LIMIT.split("/")[0])
    body = {"items": [{"content": "Hello"}], "evaluation_type": "safety"}

    for _ in range(allowed):
        assert (await client.post("/evaluate/batch", json=body)).status_code == 200

    resp = await client.post("/evaluate/batch", json=body)
    assert resp.status_code == 429


@pytest.mark.asyncio
async def test_health_is_not_limited(client):
    for _ in range(5):
        assert (await client.get("/health")).status_code == 200
