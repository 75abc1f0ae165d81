"""
Markup extractors for the store's rendered pages

The store's HTML is an unversioned, third-party format. Each field is read
through an ordered list of selectors; the first one that yields a value
wins. Selector lists live at the top of this module so they can be swapped
without touching the search strategies.
"""

import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from aplus_voice.models import PartResult, VehicleListing


# Product cards: first selector that matches anything wins
PRODUCT_CARD_SELECTORS = [
    "li.product",
    ".wc-block-grid__product",
    "article.product",
    ".product",
]
PRODUCT_NAME_SELECTORS = [
    ".woocommerce-loop-product__title",
    ".wc-block-grid__product-title",
    ".product-title",
    "h2",
    "h3",
    ".woocommerce-loop-category__title",
]
# Sale prices render as <del>old</del><ins>new</ins>
PRODUCT_PRICE_SELECTORS = [
    ".price ins .woocommerce-Price-amount",
    ".price .woocommerce-Price-amount",
    ".woocommerce-Price-amount",
    ".price",
    ".amount",
]
PRODUCT_LINK_SELECTORS = [
    "a.woocommerce-LoopProduct-link",
    "a.wc-block-grid__product-link",
    "a[href]",
]
PRODUCT_IMAGE_SELECTORS = ["img"]
PRODUCT_SKU_SELECTORS = [".sku"]
PRODUCT_SKU_ATTR_SELECTORS = ["[data-product_sku]"]

# Plain WordPress search results, used when no product cards render
GENERIC_RESULT_SELECTORS = ["article", ".search-result", ".entry"]
GENERIC_TITLE_SELECTORS = [".entry-title", "h2", "h3"]

# Homepage "latest arrivals"
VEHICLE_FRAGMENT_SELECTORS = "h3, h4, h5, .vehicle-title, [class*='vehicle']"
STOCK_MARKER = "STK#"
MAX_FRAGMENT_LENGTH = 200

PRICE_RE = re.compile(r"\$\s?\d[\d,]*(?:\.\d{2})?")
PART_NUMBER_RE = re.compile(r"Part\s*(?:#|No\.?|Number)\s*:?\s*([A-Z0-9][A-Z0-9-]{3,})", re.IGNORECASE)
STOCK_COUNT_RE = re.compile(r"(\d+)\s+(?:in stock|available)", re.IGNORECASE)
PART_TYPE_RE = re.compile(r"Part Type\s*:\s*([^\n|]+)", re.IGNORECASE)
YEAR_PREFIX_RE = re.compile(r"^\d{4}\s")
STOCK_NUMBER_RE = re.compile(r"STK#\s*([A-Za-z0-9-]+)", re.IGNORECASE)
VIN_RE = re.compile(r"VIN\s*[:#]?\s*([A-HJ-NPR-Z0-9]{17})", re.IGNORECASE)
WHITESPACE_RE = re.compile(r"\s+")
SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.;:!?])")


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace"""
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def strip_html(fragment: Optional[str]) -> str:
    """Plain text of an HTML snippet (Store API descriptions carry markup)"""
    if not fragment:
        return ""
    text = clean_text(make_soup(fragment).get_text(" "))
    return SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)


def safe_get_text(element: Optional[Tag]) -> str:
    """Text of an element, or "" when there is no element"""
    if element is None:
        return ""
    return clean_text(element.get_text(" "))


def first_text(element: Tag, selectors: Iterable[str]) -> Optional[str]:
    """Text of the first selector that matches a non-empty element"""
    for selector in selectors:
        text = safe_get_text(element.select_one(selector))
        if text:
            return text
    return None


def first_attr(element: Tag, selectors: Iterable[str], attribute: str) -> Optional[str]:
    """Attribute of the first selector whose element carries it"""
    for selector in selectors:
        found = element.select_one(selector)
        if found is not None and found.get(attribute):
            return found.get(attribute)
    return None


def select_first_matching(soup: BeautifulSoup, selectors: Iterable[str]) -> List[Tag]:
    """Elements for the first selector in the list that matches anything"""
    for selector in selectors:
        found = soup.select(selector)
        if found:
            return found
    return []


def find_price(text: Optional[str]) -> Optional[str]:
    """First dollar amount in the text, normalized to "$N.NN" spacing"""
    if not text:
        return None
    match = PRICE_RE.search(text)
    if not match:
        return None
    return match.group(0).replace(" ", "")


def find_part_number(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = PART_NUMBER_RE.search(text)
    return match.group(1).upper() if match else None


def find_stock_count(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    match = STOCK_COUNT_RE.search(text)
    return int(match.group(1)) if match else None


def find_part_type(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = PART_TYPE_RE.search(text)
    if not match:
        return None
    return clean_text(match.group(1)) or None


def _card_in_stock(card: Tag) -> bool:
    # WooCommerce marks the card itself with "outofstock"
    classes = card.get("class") or []
    if "outofstock" in classes:
        return False
    return "out of stock" not in safe_get_text(card).lower()


def _absolute(base_url: str, href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    return urljoin(base_url + "/", href)


def parse_product_card(card: Tag, base_url: str) -> Optional[PartResult]:
    """
    One WooCommerce product card as a PartResult

    Returns None when the card has no name: it is not a product.
    """
    name = first_text(card, PRODUCT_NAME_SELECTORS)
    if not name:
        return None

    text = card.get_text("\n", strip=True)
    sku = first_text(card, PRODUCT_SKU_SELECTORS) or first_attr(card, PRODUCT_SKU_ATTR_SELECTORS, "data-product_sku")

    return PartResult(
        name=name,
        price=find_price(first_text(card, PRODUCT_PRICE_SELECTORS)),
        sku=sku,
        in_stock=_card_in_stock(card),
        url=_absolute(base_url, first_attr(card, PRODUCT_LINK_SELECTORS, "href")),
        image=first_attr(card, PRODUCT_IMAGE_SELECTORS, "src"),
        part_number=find_part_number(text),
        stock_count=find_stock_count(text),
        part_type=find_part_type(text),
    )


def parse_product_cards(html: str, base_url: str) -> List[PartResult]:
    """All product cards on a search or category page, in page order"""
    soup = make_soup(html)
    results = []
    for card in select_first_matching(soup, PRODUCT_CARD_SELECTORS):
        part = parse_product_card(card, base_url)
        if part is not None:
            results.append(part)
    return results


def parse_generic_results(html: str, base_url: str, mentions: List[str]) -> List[PartResult]:
    """
    Plain WordPress search hits whose title mentions one of ``mentions``

    No price is rendered for these, so none is reported.
    """
    mentions = [m.lower() for m in mentions if m]
    if not mentions:
        return []

    soup = make_soup(html)
    results = []
    for entry in select_first_matching(soup, GENERIC_RESULT_SELECTORS):
        name = first_text(entry, GENERIC_TITLE_SELECTORS)
        if not name:
            continue
        lowered = name.lower()
        if not any(m in lowered for m in mentions):
            continue
        results.append(PartResult(
            name=name,
            url=_absolute(base_url, first_attr(entry, ["a[href]"], "href")),
        ))
    return results


def parse_listing_entries(html: str, base_url: str, required: Optional[List[str]] = None) -> List[PartResult]:
    """
    Category / make-model listing entries

    Fields come from loose patterns over the rendered card text. Only
    cards whose text mentions every ``required`` term are kept.
    """
    wanted = [t.lower() for t in (required or []) if t]
    soup = make_soup(html)
    results = []

    for card in select_first_matching(soup, PRODUCT_CARD_SELECTORS):
        text = safe_get_text(card).lower()
        if not all(term in text for term in wanted):
            continue
        part = parse_product_card(card, base_url)
        if part is not None:
            results.append(part)

    return results


def extract_vehicle_fragments(html: str) -> List[str]:
    """
    Vehicle-looking text fragments from the homepage

    A fragment qualifies when it starts with a four-digit year or carries a
    stock-number marker. Blocks with more than one marker hold several
    vehicles and are skipped; a heading inside a kept vehicle card is
    folded into that card. Identical fragments are kept once.
    """
    soup = make_soup(html)
    candidates: List[Tag] = []

    for element in soup.select(VEHICLE_FRAGMENT_SELECTORS):
        text = safe_get_text(element)
        if YEAR_PREFIX_RE.match(text) or STOCK_MARKER in text:
            candidates.append(element)

    for string in soup.find_all(string=re.compile(re.escape(STOCK_MARKER))):
        if string.parent is not None:
            candidates.append(string.parent)

    kept = {}
    for element in candidates:
        text = safe_get_text(element)
        if not text or len(text) >= MAX_FRAGMENT_LENGTH:
            continue
        if text.count(STOCK_MARKER) > 1:
            continue
        kept.setdefault(id(element), (element, text))

    fragments: List[str] = []
    for element, text in kept.values():
        if any(id(parent) in kept for parent in element.parents):
            continue
        if text not in fragments:
            fragments.append(text)
    return fragments


def parse_vehicle_listing(text: str) -> VehicleListing:
    stock = STOCK_NUMBER_RE.search(text)
    vin = VIN_RE.search(text)
    return VehicleListing(
        description=text,
        stock_number=stock.group(1) if stock else None,
        vin=vin.group(1).upper() if vin else None,
    )


def parse_vehicle_listings(html: str) -> List[VehicleListing]:
    return [parse_vehicle_listing(text) for text in extract_vehicle_fragments(html)]


def match_vehicles(listings: List[VehicleListing], terms: List[str]) -> List[VehicleListing]:
    """
    Listings containing every term (case-insensitive substring match)

    An empty term list matches nothing.
    """
    terms = [t.lower() for t in terms if t]
    if not terms:
        return []
    return [
        listing for listing in listings
        if all(term in listing.description.lower() for term in terms)
    ]
