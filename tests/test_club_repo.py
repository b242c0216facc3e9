"""Unit tests for ClubRepository against a mocked psycopg2 connection."""

from datetime import datetime

import psycopg2
import pytest

from models.club import Address, Club, ClubCategory
from repositories.club_repo import ClubRepository
from repositories.errors import AmbiguousMatchError, NotFoundError, PersistenceError, ValidationError

CREATED = datetime(2024, 5, 1, 8, 30)


def club_row(club_id=1, title="Running Club 1", state="NC", city="Charlotte", category="City"):
    return (
        club_id, title, "A club", None, category, CREATED,
        club_id + 100, "123 Main St", city, state,
    )


@pytest.fixture
def repo():
    return ClubRepository()


def test_add_inserts_address_then_club(db, repo, running_club):
    db.cursor.fetchone.side_effect = [(5,), (9, CREATED)]

    saved = repo.add(running_club)

    assert saved.id == 9
    assert saved.address.id == 5
    assert saved.created_at == CREATED
    first, second = db.cursor.execute.call_args_list
    assert "INSERT INTO addresses" in first.args[0]
    assert first.args[1] == ("123 Main St", "Charlotte", "NC")
    assert "INSERT INTO clubs" in second.args[0]
    assert second.args[1][3] == "City"
    assert second.args[1][4] == 5
    db.conn.commit.assert_called_once()
    db.release.assert_called_once_with(db.conn)


def test_add_failure_leaves_no_ids(db, repo, running_club):
    db.cursor.fetchone.side_effect = [(5,)]
    db.cursor.execute.side_effect = [None, psycopg2.IntegrityError("duplicate key")]

    with pytest.raises(PersistenceError):
        repo.add(running_club)

    assert running_club.id is None
    assert running_club.address.id is None
    db.conn.rollback.assert_called_once()


def test_add_requires_state(db, repo):
    club = Club(title="Nowhere RC", description="", address=Address("1 Road", "Town", ""))

    with pytest.raises(ValidationError):
        repo.add(club)

    db.conn.cursor.assert_not_called()


def test_get_by_id_maps_row_to_club(db, repo):
    db.cursor.fetchall.return_value = [club_row(category="Trail")]

    club = repo.get_by_id(1)

    assert club.title == "Running Club 1"
    assert club.club_category is ClubCategory.TRAIL
    assert club.address == Address(id=101, street="123 Main St", city="Charlotte", state="NC")


def test_get_by_id_raises_not_found(db, repo):
    db.cursor.fetchall.return_value = []

    with pytest.raises(NotFoundError):
        repo.get_by_id(1)


def test_get_by_name_raises_on_duplicates(db, repo):
    db.cursor.fetchall.return_value = [club_row(1), club_row(2)]

    with pytest.raises(AmbiguousMatchError):
        repo.get_by_name("running club 1")


def test_get_by_state_filters_on_state(db, repo):
    db.cursor.fetchall.return_value = [club_row()]

    result = repo.get_by_state("NC")

    sql, params = db.cursor.execute.call_args.args
    assert "a.state = %s" in sql
    assert params == ("NC",)
    assert result[0].title == "Running Club 1"


def test_get_by_city_is_case_insensitive(db, repo):
    db.cursor.fetchall.return_value = []

    repo.get_by_city("charlotte")

    assert "LOWER(a.city) = LOWER(%s)" in db.cursor.execute.call_args.args[0]


def test_get_all_states_uses_distinct(db, repo):
    db.cursor.fetchall.return_value = [("CA",), ("NC",)]

    states = repo.get_all_states()

    assert states == ["CA", "NC"]
    assert "DISTINCT" in db.cursor.execute.call_args.args[0]


def test_get_slice_passes_offset_and_size(db, repo):
    db.cursor.fetchall.return_value = []

    repo.get_slice(10, 5)

    assert db.cursor.execute.call_args.args[1] == (10, 5)


def test_counts(db, repo):
    db.cursor.fetchall.side_effect = [[(4,)], [(2,)]]

    assert repo.count() == 4
    assert repo.count_by_category(ClubCategory.TRAIL) == 2
    assert db.cursor.execute.call_args.args[1] == ("Trail",)


def test_delete_removes_club_and_its_address(db, repo):
    db.cursor.fetchone.return_value = (101,)

    assert repo.delete(1) is True

    first, second = db.cursor.execute.call_args_list
    assert "DELETE FROM clubs" in first.args[0]
    assert "DELETE FROM addresses" in second.args[0]
    assert second.args[1] == (101,)
    db.conn.commit.assert_called_once()


def test_delete_missing_club(db, repo):
    db.cursor.fetchone.return_value = None

    assert repo.delete(99) is False
    assert db.cursor.execute.call_count == 1


def test_update_missing_club_returns_false(db, repo, running_club):
    running_club.id = 99
    db.cursor.fetchone.return_value = None

    assert repo.update(running_club) is False
    db.conn.commit.assert_not_called()


def test_update_rewrites_address(db, repo, running_club):
    running_club.id = 1
    running_club.address.state = "SC"
    db.cursor.fetchone.return_value = (101,)

    assert repo.update(running_club) is True
    assert db.cursor.execute.call_args.args[1] == ("123 Main St", "Charlotte", "SC", 101)
    assert running_club.address.id == 101
