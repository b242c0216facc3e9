"""
models/pokemon.py
-----------------
Domain models for the Pokémon review catalogue.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass
class Category:
    """A tag shared by many Pokémon (e.g. 'Electric')."""
    name: str
    id: Optional[int] = None


@dataclass
class Owner:
    """A trainer who owns one or more Pokémon."""
    first_name: str
    last_name: str
    gym: Optional[str] = None
    id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Reviewer:
    """
    The author of a review.

    Attributes:
        telegram_id: Set when the reviewer was created from a bot user.
    """
    first_name: str
    last_name: str = ""
    telegram_id: Optional[int] = None
    id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Review:
    """
    A rated review of a single Pokémon.

    Attributes:
        id: Database primary key (None for new records).
        title: Short headline.
        text: Free-text body.
        rating: Integer score, 1 (worst) to 5 (best).
        reviewer: The author; must be set before the review is stored.
        pokemon_id: Parent Pokémon; filled in when added through the Pokémon.
    """
    title: str
    text: str
    rating: int
    reviewer: Optional[Reviewer] = None
    pokemon_id: Optional[int] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        stars = "★" * self.rating + "☆" * (5 - self.rating)
        author = self.reviewer.full_name if self.reviewer else "anonymous"
        return f"{stars} {self.title} by {author}"


@dataclass
class Pokemon:
    """
    A Pokémon with its categories, owners and reviews.

    Relations are only populated by lookups that load them
    (get_by_id / get_by_name); listings leave them empty.
    """
    name: str
    birth_date: date
    categories: list[Category] = field(default_factory=list)
    owners: list[Owner] = field(default_factory=list)
    reviews: list[Review] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def average_rating(self) -> float:
        """Mean rating of the attached reviews, 0.0 when there are none."""
        if not self.reviews:
            return 0.0
        return sum(r.rating for r in self.reviews) / len(self.reviews)

    def __str__(self) -> str:
        return f"#{self.id} {self.name} (born {self.birth_date})"
