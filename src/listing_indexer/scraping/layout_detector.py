"""
Layout detection for listing search result pages.

This module parses a fetched document with BeautifulSoup and decides which
entry of the selector catalog describes it. Detection is greedy and never
backtracks: the catalog is tried in order and the first layout whose card
selector matches at least one element is committed, together with the
matched cards. Later, more generic layouts are not consulted even if they
would also match.

Once a layout is committed, field selectors that fail on individual cards
are handled by the record extractor; detection is never re-run.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import List, Sequence, Tuple

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from listing_indexer.config.settings import HTML_PARSER
from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.exceptions import LayoutNotRecognized, ParseFailed
from listing_indexer.scraping.selectors import LayoutDefinition, SELECTOR_CATALOG

# Initialize module logger
logger = get_logger(__name__)


def parse_document(html_source: str) -> BeautifulSoup:
    """
    Parse an HTML document into a traversable tree.

    Args:
        html_source: The HTML source code of the search results page.

    Returns:
        BeautifulSoup: The parsed document.

    Raises:
        ParseFailed: If the document is not text or is rejected by the
            parser. Blank pages and plain text still parse; they simply
            match no layout.
    """
    if not isinstance(html_source, str):
        raise ParseFailed("The page could not be parsed: the document is not text.")

    try:
        soup = BeautifulSoup(html_source, HTML_PARSER)
    except ParserRejectedMarkup as e:
        raise ParseFailed(f"The page could not be parsed: {str(e)}") from e

    return soup


def detect_layout(
    soup: BeautifulSoup,
    catalog: Sequence[LayoutDefinition] = SELECTOR_CATALOG
) -> Tuple[LayoutDefinition, List[Tag]]:
    """
    Select the first catalog layout that matches at least one listing card.

    Args:
        soup: The parsed search results page.
        catalog: Ordered layouts to try. Defaults to SELECTOR_CATALOG.

    Returns:
        Tuple containing:
            - LayoutDefinition: The committed layout.
            - list: The card elements it matched, in document order.

    Raises:
        LayoutNotRecognized: If no layout in the catalog matches any element.

    Example:
        >>> soup = parse_document(html)
        >>> layout, cards = detect_layout(soup)
        >>> print(layout.name, len(cards))
        Mercado Libre 48
    """
    for layout in catalog:
        cards = soup.select(layout.card_selector)

        if cards:
            logger.info(f"Compatible layout found: {layout.name} ({len(cards)} cards)")
            return layout, cards

        logger.debug(f"Layout '{layout.name}' matched no cards")

    raise LayoutNotRecognized(
        "Could not identify any listings on the page. "
        "The site structure may not be supported."
    )
