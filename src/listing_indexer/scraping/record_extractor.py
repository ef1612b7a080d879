"""
Record extraction from matched listing cards.

This module turns every card element found by the layout detector into a
ListingRecord, using only the selectors of the committed layout. Each card
is processed independently and extraction never raises: a field whose
element is missing gets a fixed, human readable placeholder so the text
sent to indexing is always complete prose.

Field normalization:
    - title, address: trimmed text
    - price: trimmed text with "." and "," group separators removed
    - currency: trimmed text, or "" when the layout has no currency selector
    - attributes: trimmed text with whitespace runs collapsed to one space
    - url: href resolved to an absolute URL against the page URL

Author: Leonardo Pacciani-Mori
License: MIT
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from bs4 import Tag

from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.string_utils import (
    collapse_whitespace,
    resolve_listing_url,
    strip_price_grouping,
)
from listing_indexer.scraping.selectors import LayoutDefinition

# Initialize module logger
logger = get_logger(__name__)

# =============================================================================
# FIELD PLACEHOLDERS
# =============================================================================

TITLE_PLACEHOLDER = "Title not found"
PRICE_PLACEHOLDER = "Price not specified"
ADDRESS_PLACEHOLDER = "Location not specified"
ATTRIBUTES_PLACEHOLDER = "No additional features"

PLACEHOLDERS = (
    TITLE_PLACEHOLDER,
    PRICE_PLACEHOLDER,
    ADDRESS_PLACEHOLDER,
    ATTRIBUTES_PLACEHOLDER,
)


@dataclass(frozen=True)
class ListingRecord:
    """
    One listing extracted from a search results page.

    Attributes:
        title: Listing title, or TITLE_PLACEHOLDER.
        address: Location text, or ADDRESS_PLACEHOLDER.
        price: Price digits without group separators, or PRICE_PLACEHOLDER.
        currency: Currency symbol or code, possibly empty.
        attributes: Features text on one line, or ATTRIBUTES_PLACEHOLDER.
        url: Absolute listing URL, or empty if the card has no link.
    """
    title: str
    address: str
    price: str
    currency: str
    attributes: str
    url: str

    @property
    def description(self) -> str:
        """
        Labelled multi-line text handed to the indexing service.

        The indexing service consumes free text, so the record is flattened
        in a fixed field order: property, location, price, features, link.
        """
        price_line = " ".join(part for part in (self.currency, self.price) if part)
        text = (
            f"Property: {self.title}\n"
            f"Location: {self.address}\n"
            f"Price: {price_line}\n"
            f"Features: {self.attributes}\n"
            f"Link: {self.url}"
        )
        return text.strip()

    def uses_placeholders(self) -> bool:
        return any(
            value in PLACEHOLDERS
            for value in (self.title, self.address, self.price, self.attributes)
        )


def _select_element(card: Tag, selector: str) -> Optional[Tag]:
    if not selector:
        return None
    return card.select_one(selector)


def _select_text(card: Tag, selector: str) -> Optional[str]:
    """Trimmed text of the first element matching selector, None if absent or blank."""
    element = _select_element(card, selector)
    if element is None:
        return None
    text = element.get_text().strip()
    return text or None


def extract_record(card: Tag, layout: LayoutDefinition, base_url: str) -> ListingRecord:
    """
    Build a ListingRecord from a single card element.

    Args:
        card: The card element matched by the layout's card selector.
        layout: The committed layout. Only its selectors are used.
        base_url: URL that relative listing links are resolved against.

    Returns:
        ListingRecord: The extracted record. Missing fields hold their
            placeholder, or an empty string for currency and url.
    """
    title = _select_text(card, layout.title_selector) or TITLE_PLACEHOLDER

    price_text = _select_text(card, layout.price_selector)
    price = strip_price_grouping(price_text) if price_text else ""
    if not price:
        price = PRICE_PLACEHOLDER

    currency = _select_text(card, layout.currency_selector) or ""

    address = _select_text(card, layout.address_selector) or ADDRESS_PLACEHOLDER

    attributes_text = _select_text(card, layout.attributes_selector)
    attributes = collapse_whitespace(attributes_text) if attributes_text else ""
    if not attributes:
        attributes = ATTRIBUTES_PLACEHOLDER

    link_element = _select_element(card, layout.link_selector)
    href = link_element.get("href") if link_element is not None else None
    url = resolve_listing_url(href, base_url)

    return ListingRecord(
        title=title,
        address=address,
        price=price,
        currency=currency,
        attributes=attributes,
        url=url,
    )


def extract_records(
    cards: Iterable[Tag],
    layout: LayoutDefinition,
    base_url: str
) -> List[ListingRecord]:
    """
    Extract one record per card, preserving document order.

    Args:
        cards: Card elements returned by detect_layout().
        layout: The layout returned by detect_layout() for those cards.
        base_url: URL that relative listing links are resolved against.

    Returns:
        list: The batch of ListingRecord objects, one per card.

    Example:
        >>> layout, cards = detect_layout(parse_document(html))
        >>> records = extract_records(cards, layout, "https://site.test/search")
        >>> print(records[0].description)
    """
    records = [extract_record(card, layout, base_url) for card in cards]

    incomplete = sum(1 for record in records if record.uses_placeholders())
    if incomplete:
        logger.debug(f"{incomplete} of {len(records)} records use placeholder fields")

    return records
