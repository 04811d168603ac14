# booksearch/parser.py
import logging
import math
import re

from .models import BookRecord

logger = logging.getLogger("booksearch.parser")

BOOK_RE = re.compile(r"<Book\s+([^>]*?)\s*/>")
ENTITY_RE = re.compile(r"&(amp|quot|apos|lt|gt);")
NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

XML_ENTITIES = {
    "amp": "&",
    "quot": '"',
    "apos": "'",
    "lt": "<",
    "gt": ">",
}


def decode_xml_entities(text):
    """
    Replace the five predefined XML entities with their literal characters.

    The string is walked once from left to right, so characters produced by
    a replacement are never looked at again: ``&amp;lt;`` becomes ``&lt;``,
    not ``<``. Any other ``&...;`` sequence is left as it is.

    Args:
        text (str): Raw attribute value

    Returns:
        str: Decoded value
    """
    return ENTITY_RE.sub(lambda m: XML_ENTITIES[m.group(1)], text)


def get_attribute(attrs, name):
    """
    Look up ``name="value"`` inside the attribute text of one element.

    Matching is case-insensitive and the first occurrence wins. A missing
    attribute yields an empty string, never None.

    Args:
        attrs (str): Everything between the tag name and the closing ``/>``
        name (str): Attribute name, e.g. "title" or "versandkosten_eur"

    Returns:
        str: Entity-decoded value or "" when the attribute is absent
    """
    m = re.search(rf'{re.escape(name)}="([^"]*)"', attrs, re.IGNORECASE)
    if not m:
        return ""
    return decode_xml_entities(m.group(1))


def parse_price(text):
    """
    Coerce a price string to float, accepting a comma decimal separator.

    Only the first comma is turned into a period. Parsing is lenient and
    takes the leading number ("12.99 EUR" -> 12.99); anything that does not
    start with a number, and the empty string, gives 0.0.
    """
    m = NUMBER_RE.match(text.replace(",", ".", 1))
    if not m:
        return 0.0
    try:
        value = float(m.group(1))
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def parse_book(attrs):
    """
    Build a BookRecord from the attribute text of a single ``Book`` element.

    Args:
        attrs (str): Attribute text captured from ``<Book ... />``

    Returns:
        BookRecord or None: None when the title or the url is empty

    Field Mapping:
        - price: ``price``, falling back to ``priceeur`` when empty
        - shipping: ``versandkosten_eur``
        - link: ``url``
        - everything else: attribute of the same name
    """
    title = get_attribute(attrs, "title")
    link = get_attribute(attrs, "url")
    if not title or not link:
        return None

    price_str = get_attribute(attrs, "price") or get_attribute(attrs, "priceeur")
    shipping_str = get_attribute(attrs, "versandkosten_eur")

    return BookRecord(
        title=title,
        author=get_attribute(attrs, "author"),
        isbn=get_attribute(attrs, "isbn"),
        price=parse_price(price_str),
        shipping=parse_price(shipping_str),
        dealer=get_attribute(attrs, "dealer"),
        platform=get_attribute(attrs, "platform"),
        link=link,
        condition=get_attribute(attrs, "condition"),
    )


def extract_books(xml):
    """
    Extract every valid book offer from a metasearch XML response.

    Scans the text for self-closing ``<Book .../>`` elements in document
    order. Elements that are not self-closing are not recognised, and
    candidates without a title or url are dropped silently. Empty or
    malformed input gives an empty list.

    Args:
        xml (str): Raw response body

    Returns:
        list[BookRecord]: Offers in the order they appear in the text
    """
    books = []
    skipped = 0
    for m in BOOK_RE.finditer(xml or ""):
        book = parse_book(m.group(1))
        if book is None:
            skipped += 1
            continue
        books.append(book)

    logger.debug(f"Extracted {len(books)} books, skipped {skipped} incomplete")
    return books
