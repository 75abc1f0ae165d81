"""
Request plumbing shared by the function-call routes

Voice platforms post loosely shaped JSON; these helpers turn whatever
arrived into a validated model without ever failing the request.
"""

import logging
from typing import Any, Dict, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from aplus_voice.core.store_client import get_store_client
from aplus_voice.models import unwrap_args
from aplus_voice.search.strategies import SearchStrategies

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_args(request: Request) -> Dict[str, Any]:
    """Function arguments from the body; malformed or empty bodies give {}"""
    try:
        body = await request.json()
    except ValueError:
        logger.info("[API] %s: body is not JSON, treating as empty", request.url.path)
        return {}
    return unwrap_args(body)


def parse_args(model: Type[ModelT], args: Dict[str, Any]) -> ModelT:
    """
    Validate arguments, dropping the fields that fail

    A caller who sends one badly typed field still gets the others used;
    if what remains is still invalid the result is an empty model.
    """
    try:
        return model.model_validate(args)
    except ValidationError as e:
        bad = {error["loc"][0] for error in e.errors() if error.get("loc")}
        logger.warning("[API] Dropping unusable %s fields: %s", model.__name__, sorted(map(str, bad)))

    try:
        return model.model_validate({k: v for k, v in args.items() if k not in bad})
    except ValidationError as e:
        logger.warning("[API] Unusable %s arguments: %s", model.__name__, e.errors())
        return model()


def get_strategies() -> SearchStrategies:
    return SearchStrategies(get_store_client())
