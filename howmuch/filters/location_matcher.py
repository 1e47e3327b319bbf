# howmuch/filters/location_matcher.py

"""Free-text location parsing and matching for observation queries."""

import logging

from howmuch.models.location import Location
from howmuch.models.price_observation import PriceObservation

logger = logging.getLogger("howmuch.filters")

STATE_REGIONS: dict[str, str] = {
    "NY": "Northeast",
    "MA": "Northeast",
    "PA": "Northeast",
    "NJ": "Northeast",
    "CA": "West",
    "WA": "West",
    "OR": "West",
    "NV": "West",
    "TX": "South",
    "FL": "Southeast",
    "GA": "Southeast",
    "NC": "Southeast",
    "IL": "Midwest",
    "MI": "Midwest",
    "OH": "Midwest",
    "WI": "Midwest",
}

DEFAULT_REGION = "Other"


def region_for_state(state: str) -> str:
    """Map a two-letter state code to its region bucket."""
    return STATE_REGIONS.get(state.strip().upper(), DEFAULT_REGION)


def parse_location(text: str) -> Location:
    """Parse 'zip, city, state' free text into a :class:`Location`.

    A single token fills both ``zip_code`` and ``city`` so that a bare
    city name still matches by substring later on.
    """
    parts = [p.strip() for p in text.split(",")]
    zip_code = parts[0] if parts else ""
    city = parts[1] if len(parts) > 1 and parts[1] else zip_code
    state = parts[2].upper() if len(parts) > 2 else ""
    return Location(
        zip_code=zip_code,
        city=city,
        state=state,
        region=region_for_state(state),
    )


def matches_location(
    observation: PriceObservation, query: str,
) -> bool:
    """Return True if the observation satisfies a location query.

    Exact zip match, or case-insensitive substring of the city. The
    substring rule over-matches ("ork" hits "New York"); the free-text
    search box relies on that looseness.
    """
    location = observation.location
    if location.zip_code == query:
        return True
    return query.lower() in location.city.lower()


def filter_by_location(
    observations: list[PriceObservation],
    service_id: str,
    query: str,
) -> list[PriceObservation]:
    """Keep observations for *service_id* that match *query*."""
    matched = [
        o
        for o in observations
        if o.service_id == service_id
        and matches_location(o, query)
    ]
    logger.debug(
        "Location filter '%s' kept %d of %d observations for %s",
        query,
        len(matched),
        len(observations),
        service_id,
    )
    return matched
