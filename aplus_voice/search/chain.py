"""
Search Chain - ordered fallback over the store lookups

Flow:
0. Identifier lookup (only when a part/stock number was given)
1. Catalog API query
2. Used-parts inventory search
3. Search page scrape
4. Category listing scrape
5. Broad make/model catalog query
6. Homepage vehicle match

Strategies run one at a time; the first non-empty result ends the chain.
"""

import logging
from typing import Awaitable, Callable, List, Tuple

from aplus_voice.core.store_client import UpstreamError
from aplus_voice.models import ChainResult, SearchQuery
from aplus_voice.search.strategies import SearchStrategies

logger = logging.getLogger(__name__)

Strategy = Callable[[SearchQuery], Awaitable[ChainResult]]

IDENTIFIER_LOOKUP = "identifier_lookup"
CATALOG_API = "catalog_api"
INVENTORY_SEARCH = "inventory_search"
SEARCH_PAGE = "search_page"
CATEGORY_LISTING = "category_listing"
CATALOG_BROAD = "catalog_broad"
HOMEPAGE_VEHICLES = "homepage_vehicles"


class SearchChain:
    """Named strategies tried strictly in order"""

    def __init__(self, steps: List[Tuple[str, Strategy]]):
        self.steps = steps

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.steps]

    async def _attempt(self, name: str, strategy: Strategy, query: SearchQuery) -> ChainResult:
        """Error boundary: a failing strategy is an empty strategy"""
        try:
            result = await strategy(query)
        except UpstreamError as e:
            logger.warning("[Search] Strategy %s: upstream unavailable: %s", name, e)
            return ChainResult()
        except Exception:
            logger.exception("[Search] Strategy %s failed", name)
            return ChainResult()
        if result is None:
            return ChainResult()
        return result

    async def run(self, query: SearchQuery) -> ChainResult:
        for name, strategy in self.steps:
            result = await self._attempt(name, strategy, query)
            if result.found:
                logger.info(
                    "[Search] %s: %s parts, %s vehicles",
                    name, len(result.parts), len(result.vehicles)
                )
                result.method = name
                return result
            logger.info("[Search] %s: nothing, falling through", name)

        logger.info("[Search] All strategies empty")
        return ChainResult()


def build_search_chain(strategies: SearchStrategies, query: SearchQuery) -> SearchChain:
    """
    Chain for one request

    An identifier lookup is only worth a round trip when the caller gave
    a part or stock number, and it goes first.
    """
    steps: List[Tuple[str, Strategy]] = []

    if query.part_number or query.stock_number:
        steps.append((IDENTIFIER_LOOKUP, strategies.identifier_lookup))

    steps.extend([
        (CATALOG_API, strategies.catalog_query),
        (INVENTORY_SEARCH, strategies.inventory_search),
        (SEARCH_PAGE, strategies.search_page_scrape),
        (CATEGORY_LISTING, strategies.category_scrape),
        (CATALOG_BROAD, strategies.broad_catalog_query),
        (HOMEPAGE_VEHICLES, strategies.homepage_vehicle_match),
    ])

    return SearchChain(steps)
