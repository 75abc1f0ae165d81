"""
Search Strategies - Store Lookups

Each strategy is one independent way of asking the store for parts.
They know nothing about each other; ordering and fallback live in
search/chain.py.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Dict, List, Optional, Tuple
from urllib.parse import urljoin

from aplus_voice.core.store_client import StoreClient, UpstreamError
from aplus_voice.models import ChainResult, PartResult, SearchQuery, VehicleListing
from aplus_voice.scraping.extractors import (
    find_part_number,
    find_price,
    match_vehicles,
    parse_generic_results,
    parse_listing_entries,
    parse_product_cards,
    parse_vehicle_listings,
    strip_html,
)

logger = logging.getLogger(__name__)

CATEGORY_PATH = "/product-category/{slug}/"
INVENTORY_NAME_KEYS = ["name", "title", "part_name"]


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def format_minor_units(
    amount: Any,
    minor_unit: int = 2,
    prefix: str = "$",
    suffix: str = ""
) -> Optional[str]:
    """
    Store API amount (integer string in minor units) as a display price

    "1999" -> "$19.99". Empty, non-numeric or non-positive amounts are the
    store's "no price" marker and come back as None.
    """
    if amount is None or isinstance(amount, bool):
        return None
    text = str(amount).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    value = Decimal(int(text)).scaleb(-minor_unit)
    if value <= 0:
        return None
    return f"{prefix}{value:,.{minor_unit}f}{suffix}"


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def map_store_product(item: Dict[str, Any], base_url: str) -> Optional[PartResult]:
    """
    One Store API product as a PartResult

    Returns None for items without a usable name.
    """
    name = strip_html(item.get("name"))
    if not name:
        return None

    prices = item.get("prices")
    if not isinstance(prices, dict):
        prices = {}
    minor_unit = _as_int(prices.get("currency_minor_unit"))
    if minor_unit is None:
        minor_unit = 2
    prefix = prices.get("currency_prefix")
    suffix = prices.get("currency_suffix") or ""
    if prefix is None:
        prefix = "" if suffix else "$"

    if "is_in_stock" in item:
        in_stock = bool(item.get("is_in_stock"))
    else:
        in_stock = item.get("is_purchasable") is not False

    description = strip_html(item.get("short_description")) or None

    images = item.get("images")
    image = None
    if isinstance(images, list) and images and isinstance(images[0], dict):
        image = images[0].get("src")

    categories = [
        c["name"] for c in item.get("categories") or []
        if isinstance(c, dict) and c.get("name")
    ]

    return PartResult(
        name=name,
        price=format_minor_units(prices.get("price"), minor_unit, prefix, suffix),
        regular_price=format_minor_units(prices.get("regular_price"), minor_unit, prefix, suffix),
        on_sale=bool(item.get("on_sale")),
        sku=item.get("sku") or None,
        in_stock=in_stock,
        url=item.get("permalink") or f"{base_url}/?p={item.get('id')}",
        image=image,
        part_number=find_part_number(name) or find_part_number(description),
        stock_count=_as_int(item.get("low_stock_remaining")),
        categories=categories,
        description=description,
    )


def format_display_price(value: Any) -> Optional[str]:
    """
    Inventory price as a display price

    Numbers are dollars; strings are searched for a dollar amount or a
    plain number. Zero and "Call for price" come back as None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        text = str(value).strip()
        found = find_price(text)
        if found:
            return found
        try:
            amount = Decimal(text.replace(",", ""))
        except InvalidOperation:
            return None
    if not amount.is_finite() or amount <= 0:
        return None
    return f"${amount:,.2f}"


def _first_field(item: Dict[str, Any], keys: List[str]) -> Optional[str]:
    for key in keys:
        value = item.get(key)
        if value not in (None, "", []):
            return strip_html(str(value)) or None
    return None


def map_inventory_item(item: Dict[str, Any], base_url: str) -> Optional[PartResult]:
    """
    One inventory search hit as a PartResult

    The plugin's field names vary between versions, so each field is read
    from the first key that carries it. Returns None for nameless items.
    """
    name = _first_field(item, INVENTORY_NAME_KEYS)
    if not name:
        return None

    description = _first_field(item, ["description", "notes", "condition"])
    url = _first_field(item, ["url", "link", "permalink"])
    stock = item.get("in_stock", item.get("available"))

    return PartResult(
        name=name,
        price=format_display_price(item.get("price")),
        sku=_first_field(item, ["sku", "stock_number", "stk"]),
        in_stock=str(stock).lower() not in ("0", "false", "no"),
        url=urljoin(base_url + "/", url) if url else None,
        image=_first_field(item, ["image", "image_url", "thumbnail"]),
        part_number=_first_field(item, ["part_number", "interchange"]) or find_part_number(description),
        stock_count=_as_int(item.get("quantity", item.get("qty"))),
        part_type=_first_field(item, ["part_type", "part", "type"]),
        description=description,
    )


class SearchStrategies:
    """
    The store lookups, bound to one StoreClient

    Strategy methods take a SearchQuery and return a ChainResult; an empty
    result means "nothing here, try the next one". Upstream failures are
    raised and turned into empty results by the chain.
    """

    def __init__(self, store: StoreClient):
        self.store = store

    @property
    def max_results(self) -> int:
        return self.store.max_results

    async def _attempt(self, label: str, lookup: Awaitable[List]) -> List:
        """Run one sub-lookup; an upstream failure counts as no results"""
        try:
            return await lookup
        except UpstreamError as e:
            logger.warning("[Search] %s failed: %s", label, e)
            return []

    # Building blocks, also used outside the chain

    async def catalog_parts(self, text: str) -> List[PartResult]:
        """Store API product search, mapped to PartResults"""
        items = await self.store.search_products(text, per_page=self.max_results)
        parts = []
        for item in items:
            part = map_store_product(item, self.store.base_url)
            if part is not None:
                parts.append(part)
        return parts[:self.max_results]

    async def search_page_parts(self, text: str, mentions: Optional[List[str]] = None) -> List[PartResult]:
        """Product cards from the site's search page, generic hits as a last resort"""
        html = await self.store.fetch_search_page(text)
        parts = parse_product_cards(html, self.store.base_url)
        if not parts:
            parts = parse_generic_results(html, self.store.base_url, mentions or [])
        return parts[:self.max_results]

    async def homepage_vehicles(self) -> List[VehicleListing]:
        """Every vehicle listing on the homepage (raises UpstreamError)"""
        html = await self.store.fetch_homepage()
        vehicles = parse_vehicle_listings(html)
        logger.info("[Search] Homepage lists %s vehicles", len(vehicles))
        return vehicles

    # Chain strategies

    async def identifier_lookup(self, query: SearchQuery) -> ChainResult:
        """
        Direct lookup by part number or stock number

        Part numbers go to the catalog, then the search page. Stock numbers
        are matched against homepage listings first, then the catalog.
        """
        if query.part_number:
            parts = await self._attempt("catalog by part number", self.catalog_parts(query.part_number))
            if not parts:
                parts = await self._attempt(
                    "search page by part number",
                    self.search_page_parts(query.part_number, [query.part_number])
                )
            if parts:
                return ChainResult(parts=parts)

        if query.stock_number:
            vehicles = await self._attempt("homepage by stock number", self.homepage_vehicles())
            matches = match_vehicles(vehicles, [query.stock_number])
            if matches:
                return ChainResult(vehicles=matches[:self.max_results])
            parts = await self._attempt("catalog by stock number", self.catalog_parts(query.stock_number))
            if parts:
                return ChainResult(parts=parts)

        return ChainResult()

    async def catalog_query(self, query: SearchQuery) -> ChainResult:
        """Store API search with every descriptive field joined"""
        text = query.search_text()
        if not text:
            return ChainResult()
        return ChainResult(parts=await self.catalog_parts(text))

    async def inventory_search(self, query: SearchQuery) -> ChainResult:
        """Used-parts inventory search with the structured vehicle fields"""
        fields = {
            key: value for key, value in [
                ("year", query.year),
                ("make", query.make),
                ("model", query.model),
                ("part_type", query.part_type),
            ]
            if value
        }
        if not fields:
            return ChainResult()

        parts = []
        for item in await self.store.inventory_search(fields):
            part = map_inventory_item(item, self.store.base_url)
            if part is not None:
                parts.append(part)
        return ChainResult(parts=parts[:self.max_results])

    async def search_page_scrape(self, query: SearchQuery) -> ChainResult:
        """Rendered search results for the same joined query"""
        text = query.search_text()
        if not text:
            return ChainResult()
        parts = await self.search_page_parts(text, [query.make, query.model])
        return ChainResult(parts=parts)

    async def category_scrape(self, query: SearchQuery) -> ChainResult:
        """
        Category or make/model listing pages

        The first candidate page with a matching entry wins.
        """
        if not (query.part_type or query.make):
            return ChainResult()

        for path, required in await self._category_pages(query):
            try:
                html = await self.store.fetch_page(path)
            except UpstreamError as e:
                logger.info("[Search] Category page %s unavailable: %s", path, e)
                continue
            parts = parse_listing_entries(html, self.store.base_url, required)
            if parts:
                logger.info("[Search] Category page %s: %s entries", path, len(parts))
                return ChainResult(parts=parts[:self.max_results])

        return ChainResult()

    async def _category_pages(self, query: SearchQuery) -> List[Tuple[str, List[str]]]:
        """
        Candidate listing pages, most specific first, with the terms an
        entry must mention

        A part-type category lists every vehicle's parts, so its entries
        must also mention the make. Make and make/model pages only filter
        on the part type.
        """
        pages: List[Tuple[str, List[str]]] = []
        categories = await self._attempt("category listing", self.store.list_categories())

        def resolve(needle: Optional[str]) -> Optional[str]:
            if not needle:
                return None
            needle = needle.lower()
            for category in categories:
                name = strip_html(str(category.get("name") or "")).lower()
                permalink = category.get("permalink")
                if name and permalink and needle in name:
                    return permalink
            return None

        by_part_type = [query.part_type] if query.part_type else []

        permalink = resolve(query.part_type)
        if permalink:
            pages.append((permalink, by_part_type + ([query.make] if query.make else [])))
        permalink = resolve(query.make)
        if permalink:
            pages.append((permalink, by_part_type))

        if query.make and query.model:
            pages.append((CATEGORY_PATH.format(slug=slugify(f"{query.make} {query.model}")), by_part_type))
        if query.make:
            pages.append((CATEGORY_PATH.format(slug=slugify(query.make)), by_part_type))

        unique: Dict[str, List[str]] = {}
        for path, required in pages:
            unique.setdefault(path, required)
        return list(unique.items())

    async def broad_catalog_query(self, query: SearchQuery) -> ChainResult:
        """Store API search on make and model alone"""
        text = " ".join(f for f in [query.make, query.model] if f)
        if not text or text == query.search_text():
            return ChainResult()
        return ChainResult(parts=await self.catalog_parts(text))

    async def homepage_vehicle_match(self, query: SearchQuery) -> ChainResult:
        """Latest-arrival vehicles containing every year/make/model term"""
        if not query.has_vehicle():
            return ChainResult()
        matches = match_vehicles(await self.homepage_vehicles(), query.vehicle_terms())
        return ChainResult(vehicles=matches[:self.max_results])
