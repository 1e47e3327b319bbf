# howmuch/data/sample_data.py

"""Static catalog and sample prices used when no database is configured."""

from datetime import date

from howmuch.models.location import Location
from howmuch.models.price_observation import PriceObservation
from howmuch.models.service import PriceRange, Service

CATEGORY_NAMES: dict[str, str] = {
    "cleaning": "Cleaning Services",
    "landscaping": "Landscaping",
    "maintenance": "Maintenance",
    "seasonal": "Seasonal Services",
}

SERVICES: list[Service] = [
    Service(
        id="junk-removal",
        name="Junk Removal",
        category="cleaning",
        icon="🗑️",
        description="Professional junk removal and disposal services",
        national_average=250.0,
        price_range=PriceRange(150.0, 400.0),
    ),
    Service(
        id="lawn-mowing",
        name="Lawn Mowing",
        category="landscaping",
        icon="🌱",
        description="Regular lawn maintenance and grass cutting",
        national_average=45.0,
        price_range=PriceRange(25.0, 75.0),
    ),
    Service(
        id="house-cleaning",
        name="House Cleaning",
        category="cleaning",
        icon="🧹",
        description="Professional house cleaning services",
        national_average=150.0,
        price_range=PriceRange(100.0, 250.0),
    ),
    Service(
        id="pest-control",
        name="Pest Control",
        category="maintenance",
        icon="🐜",
        description="Pest control and extermination services",
        national_average=200.0,
        price_range=PriceRange(150.0, 300.0),
    ),
    Service(
        id="snow-removal",
        name="Snow Removal",
        category="seasonal",
        icon="❄️",
        description="Snow plowing and removal services",
        national_average=75.0,
        price_range=PriceRange(50.0, 120.0),
    ),
    Service(
        id="plumbing",
        name="Plumbing",
        category="maintenance",
        icon="🚰",
        description="Plumbing repair and installation services",
        national_average=300.0,
        price_range=PriceRange(200.0, 500.0),
    ),
    Service(
        id="handyman",
        name="Handyman",
        category="maintenance",
        icon="🛠️",
        description="General handyman and repair services",
        national_average=100.0,
        price_range=PriceRange(60.0, 150.0),
    ),
    Service(
        id="window-cleaning",
        name="Window Cleaning",
        category="cleaning",
        icon="🪟",
        description="Professional window cleaning services",
        national_average=120.0,
        price_range=PriceRange(80.0, 200.0),
    ),
]

_NEW_YORK = Location("10001", "New York", "NY", "Northeast")
_BEVERLY_HILLS = Location("90210", "Beverly Hills", "CA", "West")
_MIAMI = Location("33101", "Miami", "FL", "Southeast")

OBSERVATIONS: list[PriceObservation] = [
    PriceObservation(
        id="1",
        service_id="junk-removal",
        location=_NEW_YORK,
        price=300.0,
        date=date(2024, 1, 15),
        description="Full truck load of furniture and appliances",
        source="sample",
    ),
    PriceObservation(
        id="2",
        service_id="junk-removal",
        location=_NEW_YORK,
        price=250.0,
        date=date(2024, 1, 10),
        description="Half truck load of household items",
        source="sample",
    ),
    PriceObservation(
        id="3",
        service_id="lawn-mowing",
        location=_BEVERLY_HILLS,
        price=60.0,
        date=date(2024, 1, 12),
        description="Standard lawn maintenance",
        source="sample",
    ),
    PriceObservation(
        id="4",
        service_id="house-cleaning",
        location=_MIAMI,
        price=180.0,
        date=date(2024, 1, 8),
        description="Deep cleaning service",
        source="sample",
    ),
]
