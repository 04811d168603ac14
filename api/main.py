# api/main.py
from fastapi import FastAPI, Depends, Query, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
import os
from dotenv import load_dotenv
from httpx import TransportError
from .auth import get_api_key
from .rate_limit import register_rate_limit, limiter, SEARCH_RATE_LIMIT
from booksearch.client import SearchClient
from booksearch.errors import (
    ConfigurationError,
    QueryTooShortError,
    SearchError,
)
from booksearch.isbn import clean_isbn, convert_isbn10_to_13, is_isbn10
from booksearch.utils import overview_url, price_range_label
import logging

load_dotenv()
API_PORT = int(os.getenv("API_PORT", "8000"))

app = FastAPI(title="Eurobuch Search API", version="1.0")

register_rate_limit(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

logger = logging.getLogger("api")
logger.setLevel(logging.INFO)


async def get_search_client():
    """Provide a SearchClient for the duration of one request."""
    client = SearchClient()
    try:
        yield client
    finally:
        await client.close()


def book_to_resp(book, host):
    """
    Transform a BookRecord into an API response dictionary.

    Args:
        book (BookRecord): Ranked offer
        host (str): Eurobuch host used for the overview link

    Returns:
        dict: Record fields plus:
            - total_cost: price + shipping
            - overview_url: Eurobuch price overview, None without ISBN
            - condition: None instead of an empty string
    """
    data = book.model_dump()
    data["condition"] = book.condition or None
    data["total_cost"] = book.total_cost
    data["overview_url"] = overview_url(book.isbn, host)
    return data


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/search", dependencies=[Depends(get_api_key)])
@limiter.limit(SEARCH_RATE_LIMIT)
async def search(
    request: Request,
    q: str = Query(..., description="Title, author or ISBN"),
    client: SearchClient = Depends(get_search_client),
):
    """
    Search Eurobuch and return offers ranked by total cost.

    Args:
        request (Request): FastAPI request object (required for rate limiting)
        q (str): Free-text query; ISBN-10 values are converted to ISBN-13
        client (SearchClient): Injected metasearch client

    Returns:
        dict: Response containing:
            - query (str): Term sent to Eurobuch
            - isbn_conversion (dict or None): {"from", "to"} when an ISBN-10
              was rewritten
            - total (int): Number of offers
            - price_range (str or None): "€min - €max" summary
            - results (list[dict]): Offers, cheapest first
            - website_url (str or None): Eurobuch page for an all-digit
              query that found nothing, None otherwise

    Raises:
        HTTPException: 422 for queries below the minimum length
        HTTPException: 500 when Eurobuch credentials are not configured
        HTTPException: 502 when Eurobuch fails or cannot be reached

    Security:
        Requires valid API key via X-API-Key header
    """
    try:
        result = await client.search(q)
    except QueryTooShortError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigurationError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))
    except SearchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except TransportError as e:
        logger.warning(f"Eurobuch unreachable: {e}")
        raise HTTPException(status_code=502, detail="Search service unreachable")

    conversion = None
    if result.converted_isbn:
        conversion = {"from": result.original_query, "to": result.converted_isbn}

    website_url = None
    if not result.books and clean_isbn(q).isdigit():
        website_url = overview_url(q, client.host)

    return {
        "query": result.query,
        "isbn_conversion": conversion,
        "total": len(result.books),
        "price_range": price_range_label(result.books),
        "results": [book_to_resp(b, client.host) for b in result.books],
        "website_url": website_url,
    }


@app.get("/isbn/convert", dependencies=[Depends(get_api_key)])
async def convert_isbn(isbn: str = Query(...)):
    """
    Report whether a term is an ISBN-10 and its ISBN-13 equivalent.

    Non-ISBN-10 input is echoed back unchanged in ``isbn13``.
    """
    valid = is_isbn10(isbn)
    return {
        "input": isbn,
        "is_isbn10": valid,
        "isbn13": convert_isbn10_to_13(isbn) if valid else isbn,
    }


# Run uvicorn externally or here
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=API_PORT, reload=True)
