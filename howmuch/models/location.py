# howmuch/models/location.py

"""Structured place descriptor attached to every price observation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A US place: zip code, city, two-letter state and coarse region."""

    zip_code: str = ""
    city: str = ""
    state: str = ""
    region: str = ""

    def label(self) -> str:
        """Human-readable 'City, ST 00000' label, skipping blanks."""
        place = ", ".join(p for p in (self.city, self.state) if p)
        return " ".join(p for p in (place, self.zip_code) if p)
