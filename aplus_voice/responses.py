"""
Spoken responses

Everything the voice agent reads aloud is built here. Each function
returns exactly one short string; missing fields drop their clause
instead of leaking "None" into speech.
"""

from typing import List, Optional

from aplus_voice.business import SPOKEN_HOURS
from aplus_voice.models import ChainResult, InquiryRequest, PartResult, SearchQuery, VehicleListing


CLARIFY_PART = (
    "What part are you looking for? If you can give me the year, make, and model "
    "of the vehicle, I can check our inventory."
)
CLARIFY_VEHICLE = (
    "What's the year, make, and model of the vehicle you're asking about?"
)
NOT_FOUND = (
    "Part not found in online inventory. We have 100,000+ parts in our warehouse. "
    "Offer to take their info and have the parts team check."
)
VEHICLE_CHECK_FAILED = (
    "I'm having trouble checking inventory right now. Let me take down your "
    "information and have our team get back to you."
)
# Used by the error boundary when a request fails outright
SERVICE_FALLBACK = (
    "I'm sorry, I'm having trouble looking that up right now. Let me take down your "
    "information and have our parts team get back to you."
)
PRICE_ON_REQUEST = "Price available upon request."


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    if count == 1:
        return singular
    return plural or f"{singular}s"


def with_article(noun: str) -> str:
    article = "an" if noun[:1].lower() in "aeiou" else "a"
    return f"{article} {noun}"


def format_parts_message(parts: List[PartResult]) -> str:
    """
    Lead with the first part, then how many more there are

    Found: 2015 Honda Accord Alternator - $89.99. In stock. Plus 2 more options.
    """
    if not parts:
        return NOT_FOUND

    first = parts[0]
    if first.price:
        message = f"Found: {first.name} - {first.price}."
    else:
        message = f"Found: {first.name}. {PRICE_ON_REQUEST}"

    message += " In stock." if first.in_stock else " Currently out of stock."

    remaining = len(parts) - 1
    if remaining > 0:
        message += f" Plus {remaining} more {pluralize(remaining, 'option')}."

    return message


def format_vehicle_match_message(vehicles: List[VehicleListing], description: str = "") -> str:
    """Homepage vehicle hits: say how many, then ask which part they need"""
    if not vehicles:
        return NOT_FOUND

    count = len(vehicles)
    noun = pluralize(count, "vehicle")
    subject = f"{count} {description} {noun}" if description else f"{count} matching {noun}"
    pronoun = "it" if count == 1 else "them"
    return (
        f"We have {subject} in our inventory that we're parting out. "
        f"Which specific part do you need from {pronoun}?"
    )


def format_search_message(result: ChainResult, query: SearchQuery) -> str:
    if result.parts:
        return format_parts_message(result.parts)
    if result.vehicles:
        return format_vehicle_match_message(result.vehicles, query.vehicle_description())
    return NOT_FOUND


def format_vehicle_found(count: int, description: str) -> str:
    noun = pluralize(count, "vehicle")
    subject = f"{count} {description} {noun}" if description else f"{count} matching {noun}"
    parts_from = "these vehicles are" if count > 1 else "this vehicle is"
    return (
        f"Yes! We have {subject} in our inventory. The parts from {parts_from} available. "
        "Would you like me to look up a specific part?"
    )


def format_vehicle_not_found(description: str) -> str:
    vehicle = with_article(description) if description else "that vehicle"
    return (
        f"I don't see {vehicle} in our most recent arrivals, "
        "but we have a large warehouse with over 100,000 parts. We may still have parts "
        "from that vehicle. Would you like me to check with our parts team?"
    )


def format_inquiry_confirmation(inquiry: InquiryRequest) -> str:
    """Confirmation that echoes back what the caller told us"""
    sentences = []

    if inquiry.customer_name:
        sentences.append(f"Thanks, {inquiry.customer_name}.")

    wanted = " ".join(
        f for f in [inquiry.year, inquiry.make, inquiry.model, inquiry.part_needed] if f
    )
    if wanted:
        sentences.append(f"I've submitted your inquiry for {with_article(wanted)}.")
    else:
        sentences.append("I've submitted your inquiry.")

    contact = inquiry.phone or inquiry.email
    if contact:
        sentences.append(f"Our parts team will reach out to you at {contact} shortly.")
    else:
        sentences.append("Our parts team will follow up with you shortly.")

    sentences.append(SPOKEN_HOURS)
    sentences.append("Is there anything else I can help you with?")
    return " ".join(sentences)
