# howmuch/storage/base_store.py

"""Abstract persistence interface and row mapping shared by all stores."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from howmuch.models.location import Location
from howmuch.models.price_observation import PriceObservation
from howmuch.models.service import PriceRange, Service


def parse_day(value: Any) -> date | None:
    """Parse the date part of an ISO date or timestamp string."""
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp, accepting a trailing 'Z'."""
    if not value:
        return None
    text = str(value).replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def row_to_service(row: Mapping[str, Any]) -> Service:
    """Build a :class:`Service` from a ``services`` table row."""
    return Service(
        id=str(row["id"]),
        name=str(row["name"]),
        category=str(row["category"]),
        icon=str(row.get("icon") or ""),
        description=str(row.get("description") or ""),
        national_average=float(row.get("national_average") or 0),
        price_range=PriceRange(
            min=float(row.get("price_range_min") or 0),
            max=float(row.get("price_range_max") or 0),
        ),
    )


def row_to_observation(row: Mapping[str, Any]) -> PriceObservation:
    """Build a :class:`PriceObservation` from a ``price_submissions`` row.

    The service date wins over the creation timestamp when both exist.
    """
    observed_on = (
        parse_day(row.get("service_date"))
        or parse_day(row.get("created_at"))
        or date.today()
    )
    return PriceObservation(
        id=str(row.get("id") or ""),
        service_id=str(row["service_id"]),
        location=Location(
            zip_code=str(row.get("location_zip") or ""),
            city=str(row.get("location_city") or ""),
            state=str(row.get("location_state") or ""),
            region=str(row.get("location_region") or ""),
        ),
        price=float(row["price"]),
        date=observed_on,
        description=str(row.get("description") or ""),
        source=str(row.get("source") or "user"),
    )


def observation_to_row(
    observation: PriceObservation,
    source: str,
    created_at: datetime,
) -> dict[str, Any]:
    """Serialise an observation for insertion into ``price_submissions``."""
    return {
        "service_id": observation.service_id,
        "price": observation.price,
        "location_zip": observation.location.zip_code,
        "location_city": observation.location.city,
        "location_state": observation.location.state,
        "location_region": observation.location.region,
        "description": observation.description or None,
        "service_date": observation.date.isoformat(),
        "created_at": created_at.isoformat(),
        "source": source,
    }


class PriceStore(ABC):
    """Persistence backend for the service catalog and price submissions.

    Implementations raise :class:`~howmuch.errors.StoreError` on any
    transport or backend failure and return empty results (or ``None``)
    for missing data.
    """

    name: str = "store"

    @abstractmethod
    def list_services(self) -> list[Service]:
        """Return every catalog service ordered by name."""
        ...

    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        """Return one catalog service, or ``None`` if unknown."""
        ...

    @abstractmethod
    def list_services_by_category(
        self, category: str,
    ) -> list[Service]:
        """Return the services of one category ordered by name."""
        ...

    @abstractmethod
    def insert_observations(
        self,
        observations: list[PriceObservation],
        source: str,
    ) -> int:
        """Persist observations tagged with *source*; return the count."""
        ...

    @abstractmethod
    def find_observations(
        self, service_id: str, location_query: str,
    ) -> list[PriceObservation]:
        """Return matching observations, most recently created first."""
        ...

    @abstractmethod
    def source_counts(
        self,
    ) -> tuple[dict[str, int], datetime | None]:
        """Count submissions per source tag and return the newest timestamp."""
        ...

    def close(self) -> None:
        """Release backend resources."""
