"""
Vehicle lookup endpoint

POST /check-vehicle - is a year/make/model (or stock number) being parted out?
"""

import logging
from fastapi import APIRouter, Depends, Request

from aplus_voice.api.deps import get_strategies, parse_args, read_args
from aplus_voice.core.store_client import UpstreamError
from aplus_voice.models import SearchQuery, VehicleCheckResponse
from aplus_voice.responses import (
    CLARIFY_VEHICLE,
    VEHICLE_CHECK_FAILED,
    format_vehicle_found,
    format_vehicle_not_found,
)
from aplus_voice.scraping.extractors import match_vehicles
from aplus_voice.search.strategies import SearchStrategies

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/check-vehicle", response_model=VehicleCheckResponse)
async def check_vehicle(request: Request, strategies: SearchStrategies = Depends(get_strategies)):
    """
    Match the homepage's latest arrivals against the caller's vehicle

    A stock number, when given, is the only term; otherwise every
    year/make/model term must appear in a listing.
    """
    query = parse_args(SearchQuery, await read_args(request))
    terms = [query.stock_number] if query.stock_number else query.vehicle_terms()
    description = query.vehicle_description()

    logger.info("[Vehicle] Check: %s", terms)

    if not terms:
        return VehicleCheckResponse(success=False, count=0, message=CLARIFY_VEHICLE)

    try:
        vehicles = await strategies.homepage_vehicles()
    except UpstreamError as e:
        logger.warning("[Vehicle] Homepage fetch failed: %s", e)
        return VehicleCheckResponse(success=False, count=0, message=VEHICLE_CHECK_FAILED)

    matches = match_vehicles(vehicles, terms)
    logger.info("[Vehicle] %s of %s listings match", len(matches), len(vehicles))

    if matches:
        message = format_vehicle_found(len(matches), description)
    else:
        message = format_vehicle_not_found(description)

    return VehicleCheckResponse(
        success=bool(matches),
        count=len(matches),
        message=message,
        vehicles=matches
    )
