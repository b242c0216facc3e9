"""
Shared pytest fixtures.

Repository tests never touch PostgreSQL: the `db` fixture patches every
repository module so get_connection() hands out one MagicMock connection
whose cursor can be scripted per test.
"""

from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

import config
from models.club import Address, Club, ClubCategory
from models.pokemon import Category, Owner, Pokemon, Review, Reviewer
from security import rate_limiter

REPOSITORY_MODULES = (
    "repositories.pokemon_repo",
    "repositories.review_repo",
    "repositories.reviewer_repo",
    "repositories.category_repo",
    "repositories.club_repo",
)


@pytest.fixture
def db(monkeypatch):
    """Mocked connection + cursor wired into every repository module."""
    conn = MagicMock(name="connection")
    cursor = MagicMock(name="cursor")
    conn.cursor.return_value.__enter__.return_value = cursor
    release = MagicMock(name="release_connection")

    for module in REPOSITORY_MODULES:
        monkeypatch.setattr(f"{module}.get_connection", lambda: conn)
        monkeypatch.setattr(f"{module}.release_connection", release)

    return SimpleNamespace(conn=conn, cursor=cursor, release=release)


@pytest.fixture
def pikachu() -> Pokemon:
    """A new Pokémon with the three reviews used across the suite (5, 5, 1)."""
    return Pokemon(
        name="Pikachu",
        birth_date=date(1903, 1, 1),
        categories=[Category(name="Electric")],
        owners=[Owner(first_name="Ash", last_name="Ketchum", gym="Pallet")],
        reviews=[
            Review(
                title="Pikachu",
                text="Pikachu is the best pokemon, because it is electric",
                rating=5,
                reviewer=Reviewer(first_name="Teddy", last_name="Smith"),
            ),
            Review(
                title="Pikachu",
                text="Pikachu is the best at killing rocks",
                rating=5,
                reviewer=Reviewer(first_name="Taylor", last_name="Jones"),
            ),
            Review(
                title="Pikachu",
                text="Pikachu, pikachu, pikachu",
                rating=1,
                reviewer=Reviewer(first_name="Jessica", last_name="McGregor"),
            ),
        ],
    )


@pytest.fixture
def running_club() -> Club:
    return Club(
        title="Running Club 1",
        description="This is the description of the first club",
        image="https://example.com/running.jpg",
        club_category=ClubCategory.CITY,
        address=Address(street="123 Main St", city="Charlotte", state="NC"),
    )


@pytest.fixture(autouse=True)
def open_bot(monkeypatch):
    """No whitelist and a fresh rate-limit window for every test."""
    monkeypatch.setattr(config, "ALLOWED_USER_IDS", [])
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def make_update():
    """Build a fake telegram Update whose replies can be awaited and inspected."""
    def _make(user_id: int = 42, first_name: str = "Ash", last_name: str = "Ketchum"):
        update = MagicMock(name="update")
        update.effective_user = SimpleNamespace(
            id=user_id, first_name=first_name, last_name=last_name, username="ash"
        )
        update.message.reply_text = AsyncMock()
        update.message.reply_document = AsyncMock()
        return update

    return _make
