"""
repositories/reviewer_repo.py
------------------------------
Data access layer for reviewers (the authors of reviews).
"""

from typing import Optional

import psycopg2

from db.connection import get_connection, release_connection
from models.pokemon import Reviewer
from repositories.errors import NotFoundError, PersistenceError
from utils.logger import get_logger

logger = get_logger(__name__)


class ReviewerRepository:
    """Repository for the reviewers table."""

    def ensure_reviewer(
        self, telegram_id: int, first_name: str, last_name: Optional[str] = None
    ) -> Reviewer:
        """
        Insert a reviewer for a Telegram user if they don't exist, or return
        the existing record with a refreshed name.
        Uses PostgreSQL's ON CONFLICT (upsert) for atomicity.

        Args:
            telegram_id: The Telegram user ID.
            first_name: First name from Telegram.
            last_name: Optional last name from Telegram.

        Returns:
            The stored Reviewer.
        """
        sql = """
            INSERT INTO reviewers (first_name, last_name, telegram_id)
            VALUES (%s, %s, %s)
            ON CONFLICT (telegram_id) DO UPDATE
                SET first_name = EXCLUDED.first_name, last_name = EXCLUDED.last_name
            RETURNING id, first_name, last_name, telegram_id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (first_name, last_name or "", telegram_id))
                row = cur.fetchone()
            conn.commit()
            return self._row_to_reviewer(row)
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to ensure reviewer {telegram_id}: {e}")
            raise PersistenceError(f"Could not store reviewer {telegram_id}") from e
        finally:
            release_connection(conn)

    def get_by_id(self, reviewer_id: int) -> Reviewer:
        """
        Fetch a reviewer by primary key.

        Raises:
            NotFoundError: If no reviewer has this ID.
        """
        sql = "SELECT id, first_name, last_name, telegram_id FROM reviewers WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (reviewer_id,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to load reviewer #{reviewer_id}: {e}")
            raise PersistenceError(f"Could not load reviewer #{reviewer_id}") from e
        finally:
            release_connection(conn)
        if row is None:
            raise NotFoundError("Reviewer", reviewer_id)
        return self._row_to_reviewer(row)

    @staticmethod
    def _row_to_reviewer(row: tuple) -> Reviewer:
        return Reviewer(id=row[0], first_name=row[1], last_name=row[2], telegram_id=row[3])
