"""
String manipulation utilities for the listing indexer.

This module provides the field normalizers applied to text pulled out of
listing cards. They are pure functions of their inputs so they can be
used (and tested) independently of any parsed document.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import re
from typing import Optional
from urllib.parse import urljoin, urlparse


# Thousands separators used by the supported sites ("1.250.000", "1,250,000").
_PRICE_GROUPING_PATTERN = re.compile(r"[.,]")

_WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_price_grouping(price_text: str) -> str:
    """
    Remove period and comma group separators from a price string.

    Listing sites format prices with "." or "," as thousands separators and
    never show decimals, so the separators are dropped rather than parsed.
    This keeps the true magnitude without guessing a decimal convention.

    The operation is idempotent: applying it to an already stripped string
    returns that string unchanged.

    Args:
        price_text: The price text as shown on the page, already trimmed.

    Returns:
        str: The price with every "." and "," removed.

    Example:
        >>> strip_price_grouping("1.250.000")
        '1250000'
        >>> strip_price_grouping("USD 95,000")
        'USD 95000'
    """
    return _PRICE_GROUPING_PATTERN.sub("", price_text)


def collapse_whitespace(text: str) -> str:
    """
    Trim text and collapse every internal whitespace run into one space.

    Example:
        >>> collapse_whitespace("  3 amb.\\n\\n  120 m²  ")
        '3 amb. 120 m²'
    """
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def resolve_listing_url(href: Optional[str], base_url: str) -> str:
    """
    Turn a listing link into an absolute URL.

    Links that already carry a scheme are returned unchanged. Anything
    else (path-relative, root-relative or protocol-relative) is resolved
    against the URL of the page it was found on.

    Args:
        href: The raw href attribute value. None or blank means no link.
        base_url: The URL of the search results page.

    Returns:
        str: The absolute URL, or an empty string if there is no link
            or the link is malformed.

    Example:
        >>> resolve_listing_url("/p/123", "https://site.test/search")
        'https://site.test/p/123'
        >>> resolve_listing_url("https://other.test/p/1", "https://site.test/")
        'https://other.test/p/1'
    """
    if not href:
        return ""

    href = href.strip()
    if not href:
        return ""

    # Malformed hosts such as "http://[broken" make urllib raise
    try:
        if urlparse(href).scheme:
            return href
        return urljoin(base_url, href)
    except ValueError:
        return ""
