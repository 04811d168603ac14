# booksearch/client.py
import asyncio
import logging
import sys

from httpx import AsyncClient, HTTPError

from .config import (
    EUROBUCH_PLATFORM,
    EUROBUCH_PASSWORD,
    SEARCH_HOST,
    RESULT_LIMIT,
    REQUEST_TIMEOUT,
    FETCH_RETRIES,
    IP_LOOKUP_URL,
    FALLBACK_CLIENT_IP,
    MIN_QUERY_LENGTH,
)
from .errors import ConfigurationError, QueryTooShortError, UpstreamError
from .isbn import normalize_query
from .models import SearchResult
from .parser import extract_books
from .utils import network_retry, rank_by_total_cost, format_details, price_range_label

logger = logging.getLogger("booksearch")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
logger.addHandler(handler)

SEARCH_PATH = "/extreq/meta/extquery.php"


class SearchClient:
    def __init__(
        self,
        platform=EUROBUCH_PLATFORM,
        password=EUROBUCH_PASSWORD,
        max_results=RESULT_LIMIT,
        host=SEARCH_HOST,
        transport=None,
    ):
        self.platform = platform
        self.password = password
        self.max_results = max_results
        self.host = host
        self.client = AsyncClient(timeout=REQUEST_TIMEOUT, transport=transport)

    @property
    def search_url(self):
        return f"https://{self.host}{SEARCH_PATH}"

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def get_client_ip(self):
        """
        Look up the public IP address to report to the metasearch API.

        Returns:
            str: The IP as reported by the lookup service, or "0.0.0.0" if
                the lookup fails for any network or HTTP reason
        """
        try:
            resp = await self.client.get(IP_LOOKUP_URL)
            resp.raise_for_status()
            return resp.text.strip()
        except HTTPError as e:
            logger.warning(f"Client IP lookup failed: {e}")
            return FALLBACK_CLIENT_IP

    def build_params(self, term, client_ip):
        """
        Query parameters for one metasearch request.

        The same term is sent as isbn, author and title; Eurobuch matches
        whichever field fits.
        """
        return {
            "platform": self.platform,
            "password": self.password,
            "isbn": term,
            "author": term,
            "title": term,
            "mediatype": "0",
            "clientip": client_ip,
            "format": "xml",
            "maxresults": str(self.max_results),
        }

    @network_retry(attempts=FETCH_RETRIES)
    async def fetch(self, params):
        """
        Request the metasearch endpoint and return the raw XML body.

        Args:
            params (dict): Query parameters from build_params()

        Returns:
            str: Response body text

        Raises:
            UpstreamError: If the endpoint answers with a non-success status
            httpx.TransportError: If the request still fails after retries

        Note:
            Connection errors and timeouts are retried by network_retry();
            HTTP error statuses are surfaced immediately.
        """
        resp = await self.client.get(self.search_url, params=params)
        if not resp.is_success:
            logger.warning(f"Search request failed with HTTP {resp.status_code}")
            raise UpstreamError(resp.status_code)
        return resp.text

    def validate(self, query):
        if not query or len(query) < MIN_QUERY_LENGTH:
            raise QueryTooShortError(
                f"Enter at least {MIN_QUERY_LENGTH} characters to start searching"
            )
        if not self.platform or not self.password:
            raise ConfigurationError(
                "Please configure your Eurobuch credentials "
                "(EUROBUCH_PLATFORM and EUROBUCH_PASSWORD)"
            )

    async def search(self, query):
        """
        Run one search: validate, normalise, fetch, extract and rank.

        Args:
            query (str): Title, author or ISBN as typed by the user

        Returns:
            SearchResult: The term that was sent, the ISBN-13 it was
                converted to (if any) and the offers, cheapest first

        Raises:
            QueryTooShortError: If the query is shorter than MIN_QUERY_LENGTH
            ConfigurationError: If platform id or password are not set
            UpstreamError: If Eurobuch answers with a non-success status

        Process:
            1. ISBN-10 queries are rewritten to ISBN-13
            2. The client IP is looked up (falls back to 0.0.0.0)
            3. The XML response is parsed by extract_books()
            4. Offers are ranked by price + shipping
        """
        self.validate(query)

        conversion = normalize_query(query)
        client_ip = await self.get_client_ip()
        xml = await self.fetch(self.build_params(conversion.query, client_ip))

        books = rank_by_total_cost(extract_books(xml))
        logger.info(f"Search '{conversion.query}' returned {len(books)} offers")

        return SearchResult(
            query=conversion.query,
            original_query=conversion.original,
            converted_isbn=conversion.converted,
            books=books,
        )


# convenience script
async def main(argv=None):
    query = " ".join(sys.argv[1:] if argv is None else argv)
    async with SearchClient() as c:
        result = await c.search(query)

    if result.converted_isbn:
        print(f"ISBN-10 converted: {result.original_query} -> {result.converted_isbn}")

    label = price_range_label(result.books)
    print(f"Found {len(result.books)} results" + (f" ({label})" if label else ""))
    for book in result.books:
        print()
        print(format_details(book, c.host))


if __name__ == "__main__":
    asyncio.run(main())
