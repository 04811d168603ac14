# tests/test_auth.py
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_missing_api_key_is_401(keyed_client: AsyncClient):
    r = await keyed_client.get("/search", params={"q": "Momo"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Missing API Key"


@pytest.mark.asyncio
async def test_wrong_api_key_is_403(keyed_client: AsyncClient):
    r = await keyed_client.get("/search", params={"q": "Momo"}, headers={"X-API-Key": "nope"})
    assert r.status_code == 403
    assert r.json()["detail"] == "Forbidden"


@pytest.mark.asyncio
async def test_unset_api_key_rejects_everything(keyed_client: AsyncClient, monkeypatch):
    """With API_KEY unset no header value is accepted, not even an empty match."""
    monkeypatch.setattr("api.auth.API_KEY", None)
    r = await keyed_client.get("/search", params={"q": "Momo"}, headers={"X-API-Key": "secret"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_correct_api_key_is_accepted(keyed_client: AsyncClient):
    r = await keyed_client.get("/search", params={"q": "Momo"}, headers={"X-API-Key": "secret"})
    assert r.status_code == 200
    assert r.json()["total"] == 2


@pytest.mark.asyncio
async def test_isbn_convert_uses_same_key_check(keyed_client: AsyncClient):
    r = await keyed_client.get("/isbn/convert", params={"isbn": "3161484100"})
    assert r.status_code == 401
    r = await keyed_client.get(
        "/isbn/convert", params={"isbn": "3161484100"}, headers={"X-API-Key": "secret"}
    )
    assert r.status_code == 200
    assert r.json()["isbn13"] == "9783161484100"


@pytest.mark.asyncio
async def test_health_needs_no_key(keyed_client: AsyncClient):
    r = await keyed_client.get("/health")
    assert r.status_code == 200
