# booksearch/utils.py
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from .config import SEARCH_HOST
from .isbn import clean_isbn


def rank_by_total_cost(books):
    """
    Order book offers by ascending total cost (price + shipping).

    The sort is stable, so offers with the same total keep the order in
    which they were extracted.

    Args:
        books (Iterable[BookRecord]): Offers as extracted

    Returns:
        list[BookRecord]: New list, cheapest first
    """
    return sorted(books, key=lambda b: b.price + b.shipping)


def overview_url(isbn, host=SEARCH_HOST):
    """Eurobuch price overview page for an ISBN, or None without one."""
    isbn = clean_isbn(isbn or "")
    if not isbn:
        return None
    return f"https://{host}/buch/isbn/{isbn}.html"


def format_euro(amount):
    return f"€{amount:.2f}"


def price_range_label(books):
    """
    Summarise the price span of a ranked result list.

    Args:
        books (list[BookRecord]): Offers, already ranked cheapest first

    Returns:
        str or None: "€min - €max" for two or more offers, the single total
            for one offer, None for an empty list
    """
    if not books:
        return None
    if len(books) == 1:
        return format_euro(books[0].total_cost)
    return f"{format_euro(books[0].total_cost)} - {format_euro(books[-1].total_cost)}"


def format_details(book, host=SEARCH_HOST):
    """
    Render a plain-text summary of one offer, suitable for the clipboard.

    Missing author falls back to "Unknown"; missing ISBN and condition fall
    back to "N/A". The Eurobuch overview link is appended only when the
    offer carries an ISBN.
    """
    lines = [
        book.title,
        f"Author: {book.author or 'Unknown'}",
        f"ISBN: {book.isbn or 'N/A'}",
        f"Condition: {book.condition or 'N/A'}",
        f"Price: {format_euro(book.price)}",
        f"Shipping: {format_euro(book.shipping)}",
        f"Total: {format_euro(book.total_cost)}",
        f"Dealer: {book.dealer}",
        f"Platform: {book.platform}",
        "",
        f"Direct offer: {book.link}",
    ]
    if book.isbn:
        lines.append(f"Eurobuch overview: {overview_url(book.isbn, host)}")
    return "\n".join(lines)


def network_retry(**tenacity_kwargs):
    """
    Create a tenacity retry decorator for transient network failures.

    Args:
        **tenacity_kwargs: Optional keyword arguments
            - attempts (int): Maximum number of attempts. Defaults to 3.

    Returns:
        tenacity.Retrying: Configured retry decorator

    Retry Behavior:
        - Stops after the configured number of attempts
        - Exponential backoff: min=1s, max=10s, multiplier=1
        - Retries only on httpx.TransportError (connect/read failures,
          timeouts). HTTP status errors are never retried.
        - The last exception is re-raised once attempts are exhausted

    Example:
        @network_retry(attempts=5)
        async def fetch_data(url):
            return await client.get(url)
    """
    return retry(
        stop=stop_after_attempt(tenacity_kwargs.get("attempts", 3)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
