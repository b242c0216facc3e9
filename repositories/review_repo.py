"""
repositories/review_repo.py
----------------------------
Data access layer for Pokémon reviews.
All SQL queries related to the `reviews` table live here.
"""

import psycopg2

from config import RATING_MIN, RATING_MAX
from db.connection import get_connection, release_connection
from models.pokemon import Review, Reviewer
from repositories.errors import NotFoundError, PersistenceError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

REVIEW_SELECT = """
    SELECT r.id, r.pokemon_id, r.title, r.text, r.rating,
           v.id, v.first_name, v.last_name, v.telegram_id
    FROM reviews r
    JOIN reviewers v ON v.id = r.reviewer_id
"""


def validate_review(review: Review, require_pokemon: bool = True) -> None:
    """
    Check a review against the domain rules before it is written.

    Args:
        review: The review to check.
        require_pokemon: False when the parent Pokémon is inserted in the
            same transaction and its id is not known yet.

    Raises:
        ValidationError: On an out-of-range rating, missing reviewer,
            missing parent Pokémon or blank title.
    """
    rating = review.rating
    if isinstance(rating, bool) or not isinstance(rating, int) or not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationError(
            f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}, got {review.rating!r}"
        )
    if review.reviewer is None:
        raise ValidationError("A review needs a reviewer")
    if require_pokemon and review.pokemon_id is None:
        raise ValidationError("A review needs a parent Pokémon")
    if not review.title or not review.title.strip():
        raise ValidationError("A review needs a title")


def insert_review(cur, review: Review) -> Review:
    """
    Insert a review (and its reviewer, when new) using an open cursor.
    The caller owns the transaction.
    """
    reviewer = review.reviewer
    if reviewer.id is None:
        cur.execute(
            "INSERT INTO reviewers (first_name, last_name, telegram_id) VALUES (%s, %s, %s) RETURNING id;",
            (reviewer.first_name, reviewer.last_name, reviewer.telegram_id),
        )
        reviewer.id = cur.fetchone()[0]
    cur.execute(
        """
        INSERT INTO reviews (pokemon_id, reviewer_id, title, text, rating)
        VALUES (%s, %s, %s, %s, %s)
        RETURNING id;
        """,
        (review.pokemon_id, reviewer.id, review.title, review.text, review.rating),
    )
    review.id = cur.fetchone()[0]
    return review


def row_to_review(row: tuple) -> Review:
    """Convert a REVIEW_SELECT row into a Review with its Reviewer."""
    return Review(
        id=row[0],
        pokemon_id=row[1],
        title=row[2],
        text=row[3],
        rating=row[4],
        reviewer=Reviewer(
            id=row[5],
            first_name=row[6],
            last_name=row[7],
            telegram_id=row[8],
        ),
    )


class ReviewRepository:
    """Repository for CRUD operations on the reviews table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, review: Review) -> Review:
        """
        Insert a new review for an existing Pokémon.

        Args:
            review: The Review to persist; `pokemon_id` and `reviewer` must be set.

        Returns:
            The same Review with its `id` (and its reviewer's id) populated.

        Raises:
            ValidationError: If the review breaks a domain rule.
            PersistenceError: If the store rejects the insert
                (e.g. the Pokémon does not exist).
        """
        validate_review(review)
        new_reviewer = review.reviewer.id is None
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                insert_review(cur, review)
            conn.commit()
            logger.info(f"Added review #{review.id} ({review.rating}/5) for Pokémon #{review.pokemon_id}")
            return review
        except psycopg2.Error as e:
            conn.rollback()
            review.id = None
            if new_reviewer:
                review.reviewer.id = None
            logger.error(f"Failed to add review for Pokémon #{review.pokemon_id}: {e}")
            raise PersistenceError(f"Could not store review for Pokémon #{review.pokemon_id}") from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, review_id: int) -> Review:
        """
        Fetch a single review by ID.

        Raises:
            NotFoundError: If no review has this ID.
        """
        rows = self._fetch(REVIEW_SELECT + " WHERE r.id = %s;", (review_id,))
        if not rows:
            raise NotFoundError("Review", review_id)
        return rows[0]

    def get_for_pokemon(self, pokemon_id: int) -> list[Review]:
        """All reviews of one Pokémon, oldest first."""
        return self._fetch(REVIEW_SELECT + " WHERE r.pokemon_id = %s ORDER BY r.id;", (pokemon_id,))

    def get_by_reviewer(self, reviewer_id: int) -> list[Review]:
        """All reviews written by one reviewer, oldest first."""
        return self._fetch(REVIEW_SELECT + " WHERE r.reviewer_id = %s ORDER BY r.id;", (reviewer_id,))

    # ── DELETE ────────────────────────────────────────────

    def delete(self, review_id: int) -> bool:
        """
        Delete a review by ID.

        Returns:
            True if a row was deleted, False otherwise.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM reviews WHERE id = %s;", (review_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted review #{review_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete review #{review_id}: {e}")
            raise PersistenceError(f"Could not delete review #{review_id}") from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _fetch(sql: str, params: tuple) -> list[Review]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [row_to_review(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Review query failed: {e}")
            raise PersistenceError("Could not load reviews") from e
        finally:
            release_connection(conn)
