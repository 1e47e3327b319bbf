# howmuch/models/service.py

"""Service catalog data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PriceRange:
    """Inclusive low / high price bounds."""

    min: float
    max: float


@dataclass(frozen=True)
class Service:
    """A home service offered in the catalog."""

    id: str
    name: str
    category: str
    icon: str
    description: str
    national_average: float
    price_range: PriceRange


@dataclass
class ServiceCategory:
    """A named group of catalog services."""

    id: str
    name: str
    services: list[Service] = field(
        default_factory=lambda: list[Service]()
    )
