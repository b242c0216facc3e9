"""
models/club.py
--------------
Domain models for the running-club directory.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ClubCategory(str, Enum):
    """Kind of running club. Values are stored as-is in clubs.club_category."""
    ROAD_RUNNER = "RoadRunner"
    WOMENS = "Womens"
    STANDARD = "Standard"
    CITY = "City"
    TRAIL = "Trail"
    ENDURANCE = "Endurance"

    @classmethod
    def parse(cls, value: str) -> "ClubCategory":
        """Case-insensitive lookup by stored value, e.g. 'trail' -> TRAIL."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown club category: {value!r}")


@dataclass
class Address:
    """Street address owned by exactly one club."""
    street: str
    city: str
    state: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.state}"


@dataclass
class Club:
    """
    A running club listed in the directory.

    Attributes:
        id: Database primary key (None for new records).
        title: Display name of the club.
        description: Free-text description.
        address: The club's address; inserted and deleted together with it.
        club_category: Kind of club (default: City).
        image: Optional image URL.
        created_at: Timestamp when the record was created.
    """
    title: str
    description: str
    address: Address
    club_category: ClubCategory = ClubCategory.CITY
    image: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.title} [{self.club_category.value}] - {self.address.city}, {self.address.state}"
