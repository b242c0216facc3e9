"""
repositories/category_repo.py
------------------------------
Data access layer for Pokémon categories and the pokemon_categories join table.
"""

import psycopg2

from db.connection import get_connection, release_connection
from models.pokemon import Category, Pokemon
from repositories.errors import NotFoundError, PersistenceError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def upsert_category(cur, name: str) -> int:
    """
    Return the id of the category called `name`, creating it if needed.
    Runs on the caller's cursor and transaction.
    """
    cur.execute(
        """
        INSERT INTO categories (name) VALUES (%s)
        ON CONFLICT (name) DO UPDATE SET name = EXCLUDED.name
        RETURNING id;
        """,
        (name.strip(),),
    )
    return cur.fetchone()[0]


class CategoryRepository:
    """Repository for CRUD operations on the categories table."""

    def add(self, name: str) -> Category:
        """
        Create a category, or return the existing one with the same name.

        Raises:
            ValidationError: If the name is blank.
        """
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                category_id = upsert_category(cur, name)
            conn.commit()
            logger.info(f"Stored category '{name.strip()}' #{category_id}")
            return Category(id=category_id, name=name.strip())
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to add category '{name}': {e}")
            raise PersistenceError(f"Could not store category '{name}'") from e
        finally:
            release_connection(conn)

    def get_all(self) -> list[Category]:
        """All categories ordered by name."""
        rows = self._query("SELECT id, name FROM categories ORDER BY name;", ())
        return [Category(id=r[0], name=r[1]) for r in rows]

    def get_by_id(self, category_id: int) -> Category:
        """
        Fetch a category by ID.

        Raises:
            NotFoundError: If no category has this ID.
        """
        rows = self._query("SELECT id, name FROM categories WHERE id = %s;", (category_id,))
        if not rows:
            raise NotFoundError("Category", category_id)
        return Category(id=rows[0][0], name=rows[0][1])

    def get_pokemon_by_category(self, category_id: int) -> list[Pokemon]:
        """Pokémon tagged with a category (relations not loaded), by id."""
        sql = """
            SELECT p.id, p.name, p.birth_date, p.created_at
            FROM pokemon p
            JOIN pokemon_categories pc ON pc.pokemon_id = p.id
            WHERE pc.category_id = %s
            ORDER BY p.id;
        """
        rows = self._query(sql, (category_id,))
        return [Pokemon(id=r[0], name=r[1], birth_date=r[2], created_at=r[3]) for r in rows]

    def delete(self, category_id: int) -> bool:
        """Delete a category; its links to Pokémon go with it (ON DELETE CASCADE)."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM categories WHERE id = %s;", (category_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted category #{category_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete category #{category_id}: {e}")
            raise PersistenceError(f"Could not delete category #{category_id}") from e
        finally:
            release_connection(conn)

    @staticmethod
    def _query(sql: str, params: tuple) -> list[tuple]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Category query failed: {e}")
            raise PersistenceError("Could not load categories") from e
        finally:
            release_connection(conn)
