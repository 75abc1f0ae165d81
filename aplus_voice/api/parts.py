"""
Parts search endpoint

POST /search-parts - run the strategy chain, answer with one sentence
"""

import logging
from fastapi import APIRouter, Depends, Request

from aplus_voice.api.deps import get_strategies, parse_args, read_args
from aplus_voice.models import SearchPartsResponse, SearchQuery
from aplus_voice.responses import CLARIFY_PART, format_search_message
from aplus_voice.search.chain import build_search_chain
from aplus_voice.search.strategies import SearchStrategies

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search-parts", response_model=SearchPartsResponse)
async def search_parts(request: Request, strategies: SearchStrategies = Depends(get_strategies)):
    """
    Search the store for a part

    Body fields may sit at the top level or under ``args``:
    year, make, model, part_type, query, part_number, stock_number
    """
    query = parse_args(SearchQuery, await read_args(request))
    logger.info("[Parts] Search request: %s", query.model_dump(exclude_none=True))

    if query.is_empty():
        return SearchPartsResponse(success=False, count=0, message=CLARIFY_PART)

    chain = build_search_chain(strategies, query)
    result = await chain.run(query)
    message = format_search_message(result, query)

    logger.info("[Parts] Responding (%s): %s", result.method, message)

    return SearchPartsResponse(
        success=result.found,
        count=len(result.parts) or len(result.vehicles),
        message=message,
        search_method=result.method,
        results=result.parts,
        vehicles=result.vehicles
    )
