"""
Static business facts for the voice agent

Nothing here is fetched; the store's hours and policies change rarely
enough that they are kept in code.
"""

from aplus_voice.models import BusinessHours, BusinessInfo


BUSINESS_INFO = BusinessInfo(
    name="A Plus Auto LLC",
    phone="(859) 421-3043",
    email="sales@aplusauto.parts",
    address="2125 Catnip Hill Rd, Nicholasville, KY 40356",
    hours=BusinessHours(
        weekdays="Monday - Friday: 8:30 AM - 6:00 PM",
        saturday="Saturday: 9:00 AM - 12:00 PM",
        sunday="Closed",
    ),
    warranty="1-year standard warranty on all parts, 2-year and 3-year extended available",
    shipping="Ships within 1 business day",
    return_policy="30-day satisfaction guarantee",
    website="https://aplusauto.parts",
    ebay_store="https://ebay.com/str/aplus4",
    specialties=[
        "Premium recycled auto parts",
        "Grade A+ quality",
        "All parts cleaned, photographed, and inspected",
        "Over 100,000 parts in inventory",
    ],
)

# Read aloud at the end of inquiry confirmations
SPOKEN_HOURS = (
    "Our hours are Monday through Friday, 8:30 AM to 6 PM, "
    "and Saturday 9 AM to noon."
)


def get_business_info() -> BusinessInfo:
    return BUSINESS_INFO
