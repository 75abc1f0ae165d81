"""
Inquiry endpoint

POST /submit-inquiry - acknowledge a callback request

Nothing is forwarded anywhere yet; the inquiry is logged for the parts
team and echoed back to the caller.
"""

import logging
from fastapi import APIRouter, Request

from aplus_voice.api.deps import parse_args, read_args
from aplus_voice.models import InquiryRequest, InquiryResponse
from aplus_voice.responses import format_inquiry_confirmation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/submit-inquiry", response_model=InquiryResponse)
async def submit_inquiry(request: Request):
    inquiry = parse_args(InquiryRequest, await read_args(request))

    logger.info(
        "[Inquiry] name=%s phone=%s email=%s vehicle=%s part=%s",
        inquiry.customer_name, inquiry.phone, inquiry.email,
        " ".join(f for f in [inquiry.year, inquiry.make, inquiry.model] if f) or None,
        inquiry.part_needed
    )

    return InquiryResponse(success=True, message=format_inquiry_confirmation(inquiry))
