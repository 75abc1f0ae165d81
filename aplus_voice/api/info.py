"""
Business info endpoint

Quick reference for the agent: hours, policies, contact details
"""

from fastapi import APIRouter

from aplus_voice.business import get_business_info
from aplus_voice.models import BusinessInfo

router = APIRouter()


@router.get("/business-info", response_model=BusinessInfo)
async def business_info():
    return get_business_info()
