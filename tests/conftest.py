# tests/conftest.py
import sys
import os

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT_DIR)

import pytest
from httpx import ASGITransport, AsyncClient
from fastapi import Request, HTTPException

from api.main import app, get_api_key, get_search_client
from api.rate_limit import limiter
from booksearch.client import SearchClient


SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Books>
  <Book title="Harry Potter und der Stein der Weisen"
        author="Rowling, J.K."
        isbn="9783551551672"
        price="12,99"
        versandkosten_eur="2,95"
        dealer="Buchhandlung Beispiel"
        platform="ZVAB"
        url="https://www.zvab.com/servlet/BookDetailsPL?qid=abc123"
        condition="gut" />
  <Book title="Harry Potter und der Stein der Weisen"
        author="Rowling, J.K."
        isbn="9783551551672"
        priceeur="9.50"
        versandkosten_eur="0.00"
        dealer="Amazon Marketplace"
        platform="Amazon"
        url="https://www.amazon.de/dp/B00123"
        condition="" />
  <Book title="Harry Potter und der Stein der Weisen"
        author="Rowling, J.K."
        price="5.00"
        dealer="No Link Books"
        platform="Booklooker" />
</Books>
"""


@pytest.fixture
def sample_xml():
    """
    Realistic Eurobuch response with three offers.

    - ZVAB: 12,99 + 2,95 shipping (comma decimals), condition "gut"
    - Amazon: priceeur 9.50, free shipping, empty condition
    - Booklooker: no url, must be dropped by the extractor
    """
    return SAMPLE_XML


@pytest.fixture
async def search_client(monkeypatch, sample_xml):
    """
    SearchClient with test credentials and no network access.

    fetch() returns ``sample_xml`` and records the params it was called
    with in ``c.sent``; the client IP lookup returns a fixed address.
    """
    c = SearchClient(platform="test", password="test", max_results=10)
    c.sent = []

    async def fake_fetch(params):
        c.sent.append(params)
        return sample_xml

    async def fake_get_client_ip():
        return "203.0.113.7"

    monkeypatch.setattr(c, "fetch", fake_fetch)
    monkeypatch.setattr(c, "get_client_ip", fake_get_client_ip)
    yield c
    await c.close()


@pytest.fixture
async def client(monkeypatch, search_client):
    """
    Async test client for the API with auth and search client overridden.

    The fake API key dependency accepts only "testapikey" via X-API-Key.
    Rate limiting is switched off so test order does not matter.
    """
    monkeypatch.setattr(limiter, "enabled", False)

    async def fake_get_api_key(request: Request):
        key = request.headers.get("x-api-key")
        if key != "testapikey":
            raise HTTPException(status_code=401, detail="Unauthorized")
        return key

    async def fake_get_search_client():
        yield search_client

    app.dependency_overrides[get_api_key] = fake_get_api_key
    app.dependency_overrides[get_search_client] = fake_get_search_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def keyed_client(monkeypatch, search_client):
    """
    Async test client that goes through the real API key check.

    Only the search client is overridden; ``api.auth.API_KEY`` is set to
    "secret" and tests may monkeypatch it further.
    """
    monkeypatch.setattr(limiter, "enabled", False)
    monkeypatch.setattr("api.auth.API_KEY", "secret")

    async def fake_get_search_client():
        yield search_client

    app.dependency_overrides[get_search_client] = fake_get_search_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
