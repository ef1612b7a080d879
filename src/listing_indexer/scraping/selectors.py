"""
Selector catalog for supported listing page layouts.

Each LayoutDefinition groups the CSS selectors that locate one listing card
and its fields for a family of real estate sites. The catalog is ordered by
priority: the precise site-specific layouts come first and the generic
fallback comes last. Detection commits to the first layout that matches at
least one card, so a generic layout can never win over a precise one that
also matches.

An empty selector means the field cannot be extracted for that layout.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class LayoutDefinition:
    """
    Selection rules for one family of listing pages.

    Attributes:
        name: Human readable layout name, used in logs.
        card_selector: Matches the root element of every listing card.
        title_selector: Title element inside a card.
        price_selector: Price element inside a card.
        currency_selector: Currency element inside a card. Empty for layouts
            that show the currency inside the price text.
        address_selector: Location element inside a card.
        attributes_selector: Features element (rooms, surface...) inside a card.
        link_selector: Anchor element whose href points at the listing.
    """
    name: str
    card_selector: str
    title_selector: str
    price_selector: str
    currency_selector: str
    address_selector: str
    attributes_selector: str
    link_selector: str


MERCADO_LIBRE_LAYOUT = LayoutDefinition(
    name="Mercado Libre",
    card_selector=".ui-search-result__wrapper",
    title_selector=".ui-search-item__title",
    price_selector=".andes-money-amount__fraction",
    currency_selector=".andes-money-amount__currency-symbol",
    address_selector=".ui-search-item__location-location",
    attributes_selector=".ui-search-card-attributes",
    link_selector=".ui-search-link",
)

# Zonaprop and Argenprop mark their cards with data-qa attributes and print
# the currency as part of the price.
ZONAPROP_LAYOUT = LayoutDefinition(
    name="Zonaprop/Argenprop",
    card_selector="div[data-qa='posting-card']",
    title_selector="h2",
    price_selector="div[data-qa='POSTING_CARD_PRICE']",
    currency_selector="",
    address_selector="div[data-qa='POSTING_CARD_LOCATION']",
    attributes_selector="div[data-qa='POSTING_CARD_FEATURES']",
    link_selector="a[data-qa='posting-card-link']",
)

GENERIC_LAYOUT = LayoutDefinition(
    name="Generic",
    card_selector="article.listing, div.property-card, div.listing-item",
    title_selector="h2, h3, .property-title",
    price_selector="[class*='price'], .price",
    currency_selector="[class*='currency']",
    address_selector="[class*='address'], .location",
    attributes_selector="[class*='features'], [class*='attributes']",
    link_selector="a",
)

# Priority order matters: first match wins.
SELECTOR_CATALOG: Tuple[LayoutDefinition, ...] = (
    MERCADO_LIBRE_LAYOUT,
    ZONAPROP_LAYOUT,
    GENERIC_LAYOUT,
)
