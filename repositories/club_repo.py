"""
repositories/club_repo.py
--------------------------
Data access layer for running clubs.
All SQL queries related to the `clubs` and `addresses` tables live here.
A club and its address are always written and deleted together.
"""

import psycopg2

from db.connection import get_connection, release_connection
from models.club import Address, Club, ClubCategory
from repositories.errors import (
    AmbiguousMatchError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

CLUB_SELECT = """
    SELECT c.id, c.title, c.description, c.image, c.club_category, c.created_at,
           a.id, a.street, a.city, a.state
    FROM clubs c
    JOIN addresses a ON a.id = c.address_id
"""


class ClubRepository:
    """Repository for CRUD operations on the clubs table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, club: Club) -> Club:
        """
        Insert a club and its address in one transaction.

        Args:
            club: The Club to persist.

        Returns:
            The same Club with its `id`, `created_at` and address `id` populated.

        Raises:
            ValidationError: If the title or state is blank.
            PersistenceError: If the store rejects either insert.
        """
        self._validate(club)
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO addresses (street, city, state) VALUES (%s, %s, %s) RETURNING id;",
                    (club.address.street, club.address.city, club.address.state),
                )
                club.address.id = cur.fetchone()[0]
                cur.execute(
                    """
                    INSERT INTO clubs (title, description, image, club_category, address_id)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, created_at;
                    """,
                    (
                        club.title, club.description, club.image,
                        club.club_category.value, club.address.id,
                    ),
                )
                club.id, club.created_at = cur.fetchone()
            conn.commit()
            logger.info(f"Added club '{club.title}' #{club.id} in {club.address.state}")
            return club
        except psycopg2.Error as e:
            conn.rollback()
            club.id = None
            club.address.id = None
            logger.error(f"Failed to add club '{club.title}': {e}")
            raise PersistenceError(f"Could not store club '{club.title}'") from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, club_id: int) -> Club:
        """
        Fetch a club with its address.

        Raises:
            NotFoundError: If no club has this ID.
        """
        rows = self._fetch(CLUB_SELECT + " WHERE c.id = %s;", (club_id,))
        if not rows:
            raise NotFoundError("Club", club_id)
        return rows[0]

    def get_by_name(self, title: str) -> Club:
        """
        Fetch a club by title, ignoring case and surrounding whitespace.

        Raises:
            NotFoundError: If no club has this title.
            AmbiguousMatchError: If several clubs share this title.
        """
        rows = self._fetch(
            CLUB_SELECT + " WHERE LOWER(TRIM(c.title)) = LOWER(TRIM(%s)) ORDER BY c.id;",
            (title,),
        )
        if not rows:
            raise NotFoundError("Club", title)
        if len(rows) > 1:
            raise AmbiguousMatchError("Club", title, len(rows))
        return rows[0]

    def get_all(self) -> list[Club]:
        """All clubs in insertion order."""
        return self._fetch(CLUB_SELECT + " ORDER BY c.id;", ())

    def get_slice(self, offset: int, size: int) -> list[Club]:
        """One page of clubs in insertion order."""
        return self._fetch(CLUB_SELECT + " ORDER BY c.id OFFSET %s LIMIT %s;", (offset, size))

    def get_by_state(self, state: str) -> list[Club]:
        """Clubs whose address is in `state` (exact match, e.g. 'NC')."""
        return self._fetch(CLUB_SELECT + " WHERE a.state = %s ORDER BY c.id;", (state,))

    def get_by_city(self, city: str) -> list[Club]:
        """Clubs whose address is in `city`, ignoring case."""
        return self._fetch(CLUB_SELECT + " WHERE LOWER(a.city) = LOWER(%s) ORDER BY c.id;", (city,))

    def get_all_states(self) -> list[str]:
        """Every state that has at least one club, without duplicates, sorted."""
        rows = self._query("SELECT DISTINCT state FROM addresses ORDER BY state;", ())
        return [r[0] for r in rows]

    def count(self) -> int:
        """Number of clubs currently stored."""
        return int(self._query("SELECT COUNT(*) FROM clubs;", ())[0][0])

    def count_by_category(self, category: ClubCategory) -> int:
        rows = self._query(
            "SELECT COUNT(*) FROM clubs WHERE club_category = %s;", (category.value,)
        )
        return int(rows[0][0])

    # ── UPDATE ────────────────────────────────────────────

    def update(self, club: Club) -> bool:
        """
        Update a club's fields and its address.

        Returns:
            True if the club row was updated, False otherwise.
        """
        self._validate(club)
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE clubs
                    SET title = %s, description = %s, image = %s, club_category = %s
                    WHERE id = %s
                    RETURNING address_id;
                    """,
                    (club.title, club.description, club.image, club.club_category.value, club.id),
                )
                row = cur.fetchone()
                if row is None:
                    conn.rollback()
                    return False
                cur.execute(
                    "UPDATE addresses SET street = %s, city = %s, state = %s WHERE id = %s;",
                    (club.address.street, club.address.city, club.address.state, row[0]),
                )
                club.address.id = row[0]
            conn.commit()
            return True
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update club #{club.id}: {e}")
            raise PersistenceError(f"Could not update club #{club.id}") from e
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, club_id: int) -> bool:
        """
        Delete a club and its address in one transaction.

        Returns:
            True if a club was deleted, False otherwise.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM clubs WHERE id = %s RETURNING address_id;", (club_id,))
                row = cur.fetchone()
                if row is not None:
                    cur.execute("DELETE FROM addresses WHERE id = %s;", (row[0],))
            conn.commit()
            if row is not None:
                logger.info(f"Deleted club #{club_id} and its address #{row[0]}")
            return row is not None
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete club #{club_id}: {e}")
            raise PersistenceError(f"Could not delete club #{club_id}") from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _validate(club: Club) -> None:
        if not club.title or not club.title.strip():
            raise ValidationError("Club title is required")
        if club.address is None or not club.address.state or not club.address.state.strip():
            raise ValidationError("Club address needs a state")

    def _fetch(self, sql: str, params: tuple) -> list[Club]:
        return [self._row_to_club(r) for r in self._query(sql, params)]

    @staticmethod
    def _query(sql: str, params: tuple) -> list[tuple]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Club query failed: {e}")
            raise PersistenceError("Could not query clubs") from e
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_club(row: tuple) -> Club:
        """Convert a CLUB_SELECT row into a Club with its Address."""
        return Club(
            id=row[0],
            title=row[1],
            description=row[2],
            image=row[3],
            club_category=ClubCategory(row[4]),
            created_at=row[5],
            address=Address(id=row[6], street=row[7], city=row[8], state=row[9]),
        )
