# booksearch/isbn.py
import logging
import re
from typing import NamedTuple, Optional

logger = logging.getLogger("booksearch.isbn")

ISBN10_RE = re.compile(r"^\d{9}[\dXx]$")
ISBN_LIKE_RE = re.compile(r"^\d{10}[\dXx]?$|^\d{13}$")
SEPARATORS_RE = re.compile(r"[-\s]")

ISBN13_PREFIX = "978"


class IsbnConversion(NamedTuple):
    original: str
    converted: Optional[str]
    query: str


def clean_isbn(text):
    """Strip hyphens and whitespace from an ISBN-ish string."""
    return SEPARATORS_RE.sub("", text)


def is_isbn10(text):
    return bool(ISBN10_RE.match(clean_isbn(text)))


def looks_like_isbn(text):
    """
    Decide whether a piece of free text should be treated as an ISBN.

    Used to pre-fill a search from a text selection: surrounding
    whitespace is trimmed and separators removed, then ten digits optionally
    followed by one more digit or X, or exactly 13 digits, are accepted.
    A nine-digit ISBN-10 ending in X is not picked up.
    """
    return bool(ISBN_LIKE_RE.match(clean_isbn(text.strip())))


def convert_isbn10_to_13(isbn10):
    """
    Convert an ISBN-10 to its 978-prefixed ISBN-13 form.

    The original check digit is dropped, "978" is prepended to the first
    nine characters and a new check digit is computed with alternating
    weights of 1 and 3.

    Args:
        isbn10 (str): ISBN-10, hyphens and spaces allowed

    Returns:
        str: 13-character ISBN, or ``isbn10`` unchanged when the cleaned
            input is not 10 characters long or its first nine are not digits

    Example:
        >>> convert_isbn10_to_13("3-16-148410-0")
        '9783161484100'
    """
    clean = clean_isbn(isbn10)
    if len(clean) != 10:
        return isbn10

    base = ISBN13_PREFIX + clean[:9]
    if not base.isdigit():
        return isbn10

    total = 0
    for i, ch in enumerate(base):
        digit = int(ch)
        total += digit if i % 2 == 0 else digit * 3
    checksum = (10 - total % 10) % 10
    return f"{base}{checksum}"


def normalize_query(query):
    """
    Rewrite an ISBN-10 search term to ISBN-13 before it is sent upstream.

    Args:
        query (str): Search term as typed by the user

    Returns:
        IsbnConversion: ``query`` is the term to send. For an ISBN-10,
            ``original`` holds the cleaned ISBN-10 and ``converted`` the
            ISBN-13; otherwise ``converted`` is None and ``query`` is the
            input unchanged.
    """
    clean = clean_isbn(query)
    if not ISBN10_RE.match(clean):
        return IsbnConversion(original=query, converted=None, query=query)

    isbn13 = convert_isbn10_to_13(clean)
    logger.info(f"ISBN-10 converted: {clean} -> {isbn13}")
    return IsbnConversion(original=clean, converted=isbn13, query=isbn13)
