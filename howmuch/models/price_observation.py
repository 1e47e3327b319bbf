# howmuch/models/price_observation.py

"""Price observation model for inter-module data flow."""

from dataclasses import dataclass
from datetime import date

from howmuch.models.location import Location


@dataclass(frozen=True)
class PriceObservation:
    """One recorded or inferred price for a service at a place and time.

    Observations come from the sample dataset, persisted submissions or
    scraped marketplace pages and are never mutated after creation.
    """

    service_id: str
    location: Location
    price: float
    date: date
    description: str = ""
    id: str = ""
    source: str = ""


@dataclass(frozen=True)
class PriceSubmission:
    """A price a user paid, as entered on the submission form."""

    service_id: str
    price: float
    location: Location
    service_date: date
    description: str = ""

    def to_observation(self, source: str = "user") -> PriceObservation:
        """Convert to the observation shape used by stores and summaries."""
        return PriceObservation(
            service_id=self.service_id,
            location=self.location,
            price=self.price,
            date=self.service_date,
            description=self.description,
            source=source,
        )
