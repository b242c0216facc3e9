"""
repositories/pokemon_repo.py
-----------------------------
Data access layer for Pokémon.
All SQL queries related to the `pokemon` table and its relations
(categories, owners, reviews) live here.
"""

import psycopg2

from db.connection import get_connection, release_connection
from models.pokemon import Category, Owner, Pokemon
from repositories.category_repo import upsert_category
from repositories.errors import (
    AmbiguousMatchError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from repositories.review_repo import REVIEW_SELECT, insert_review, row_to_review, validate_review
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, name, birth_date, created_at"


class PokemonRepository:
    """Repository for CRUD operations on the pokemon table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, pokemon: Pokemon) -> Pokemon:
        """
        Insert a Pokémon together with its categories, owners and reviews,
        all in one transaction.

        Categories are matched by name and created when missing. Owners and
        reviewers without an id are inserted; those with an id are linked.

        Args:
            pokemon: The Pokémon to persist.

        Returns:
            The same Pokémon with every generated id populated.

        Raises:
            ValidationError: On a blank name or an invalid review.
            PersistenceError: If the store rejects any of the inserts;
                nothing is written in that case.
        """
        if not pokemon.name or not pokemon.name.strip():
            raise ValidationError("Pokémon name is required")
        for review in pokemon.reviews:
            validate_review(review, require_pokemon=False)

        # ids assigned below point at rolled-back rows if the insert fails
        unsaved = [
            obj
            for obj in (
                *pokemon.categories,
                *pokemon.owners,
                *pokemon.reviews,
                *(review.reviewer for review in pokemon.reviews),
            )
            if obj.id is None
        ]

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO pokemon (name, birth_date) VALUES (%s, %s) RETURNING id, created_at;",
                    (pokemon.name.strip(), pokemon.birth_date),
                )
                pokemon.id, pokemon.created_at = cur.fetchone()

                for category in pokemon.categories:
                    category.id = upsert_category(cur, category.name)
                    cur.execute(
                        "INSERT INTO pokemon_categories (pokemon_id, category_id) VALUES (%s, %s) ON CONFLICT DO NOTHING;",
                        (pokemon.id, category.id),
                    )

                for owner in pokemon.owners:
                    if owner.id is None:
                        cur.execute(
                            "INSERT INTO owners (first_name, last_name, gym) VALUES (%s, %s, %s) RETURNING id;",
                            (owner.first_name, owner.last_name, owner.gym),
                        )
                        owner.id = cur.fetchone()[0]
                    cur.execute(
                        "INSERT INTO pokemon_owners (pokemon_id, owner_id) VALUES (%s, %s) ON CONFLICT DO NOTHING;",
                        (pokemon.id, owner.id),
                    )

                for review in pokemon.reviews:
                    review.pokemon_id = pokemon.id
                    insert_review(cur, review)
            conn.commit()
            logger.info(
                f"Added Pokémon '{pokemon.name}' #{pokemon.id} "
                f"({len(pokemon.categories)} categories, {len(pokemon.reviews)} reviews)"
            )
            return pokemon
        except psycopg2.Error as e:
            conn.rollback()
            pokemon.id = None
            for obj in unsaved:
                obj.id = None
            for review in pokemon.reviews:
                review.pokemon_id = None
            logger.error(f"Failed to add Pokémon '{pokemon.name}': {e}")
            raise PersistenceError(f"Could not store Pokémon '{pokemon.name}'") from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, pokemon_id: int) -> Pokemon:
        """
        Fetch a Pokémon with its categories, owners and reviews.

        Raises:
            NotFoundError: If no Pokémon has this ID.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM pokemon WHERE id = %s;", (pokemon_id,))
                row = cur.fetchone()
                if row is None:
                    raise NotFoundError("Pokemon", pokemon_id)
                pokemon = self._row_to_pokemon(row)
                self._load_relations(cur, pokemon)
                return pokemon
        except psycopg2.Error as e:
            logger.error(f"Failed to load Pokémon #{pokemon_id}: {e}")
            raise PersistenceError(f"Could not load Pokémon #{pokemon_id}") from e
        finally:
            release_connection(conn)

    def get_by_name(self, name: str) -> Pokemon:
        """
        Fetch a Pokémon by name, ignoring case and surrounding whitespace.

        Raises:
            NotFoundError: If no Pokémon has this name.
            AmbiguousMatchError: If several Pokémon share this name.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM pokemon WHERE LOWER(TRIM(name)) = LOWER(TRIM(%s)) ORDER BY id;",
                    (name,),
                )
                rows = cur.fetchall()
                if not rows:
                    raise NotFoundError("Pokemon", name)
                if len(rows) > 1:
                    raise AmbiguousMatchError("Pokemon", name, len(rows))
                pokemon = self._row_to_pokemon(rows[0])
                self._load_relations(cur, pokemon)
                return pokemon
        except psycopg2.Error as e:
            logger.error(f"Failed to load Pokémon '{name}': {e}")
            raise PersistenceError(f"Could not load Pokémon '{name}'") from e
        finally:
            release_connection(conn)

    def get_all(self) -> list[Pokemon]:
        """All Pokémon in insertion order, without relations."""
        rows = self._query(f"SELECT {_COLUMNS} FROM pokemon ORDER BY id;", ())
        return [self._row_to_pokemon(r) for r in rows]

    def exists(self, pokemon_id: int) -> bool:
        rows = self._query("SELECT EXISTS (SELECT 1 FROM pokemon WHERE id = %s);", (pokemon_id,))
        return bool(rows[0][0])

    def name_exists(self, name: str) -> bool:
        """True if a Pokémon with this name (trimmed, any case) is stored."""
        rows = self._query(
            "SELECT EXISTS (SELECT 1 FROM pokemon WHERE UPPER(TRIM(name)) = UPPER(TRIM(%s)));",
            (name,),
        )
        return bool(rows[0][0])

    def count(self) -> int:
        """Number of Pokémon currently stored."""
        return int(self._query("SELECT COUNT(*) FROM pokemon;", ())[0][0])

    def get_rating(self, pokemon_id: int) -> float:
        """
        Average review rating of a Pokémon.

        Returns:
            The arithmetic mean of its review ratings, or 0.0 when it has no reviews.
        """
        rows = self._query("SELECT AVG(rating) FROM reviews WHERE pokemon_id = %s;", (pokemon_id,))
        avg = rows[0][0]
        return float(avg) if avg is not None else 0.0

    # ── UPDATE ────────────────────────────────────────────

    def update(self, pokemon: Pokemon) -> bool:
        """
        Update a Pokémon's name and birth date.

        Returns:
            True if a row was updated, False otherwise.
        """
        if not pokemon.name or not pokemon.name.strip():
            raise ValidationError("Pokémon name is required")
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE pokemon SET name = %s, birth_date = %s WHERE id = %s;",
                    (pokemon.name.strip(), pokemon.birth_date, pokemon.id),
                )
                updated = cur.rowcount > 0
            conn.commit()
            return updated
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update Pokémon #{pokemon.id}: {e}")
            raise PersistenceError(f"Could not update Pokémon #{pokemon.id}") from e
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, pokemon_id: int) -> bool:
        """
        Delete a Pokémon by ID. Its reviews and category/owner links are
        removed by the store (ON DELETE CASCADE).

        Returns:
            True if a row was deleted, False otherwise.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM pokemon WHERE id = %s;", (pokemon_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted Pokémon #{pokemon_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete Pokémon #{pokemon_id}: {e}")
            raise PersistenceError(f"Could not delete Pokémon #{pokemon_id}") from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _load_relations(cur, pokemon: Pokemon) -> None:
        """Fill in categories, owners and reviews using an open cursor."""
        cur.execute(
            """
            SELECT c.id, c.name FROM categories c
            JOIN pokemon_categories pc ON pc.category_id = c.id
            WHERE pc.pokemon_id = %s ORDER BY c.id;
            """,
            (pokemon.id,),
        )
        pokemon.categories = [Category(id=r[0], name=r[1]) for r in cur.fetchall()]

        cur.execute(
            """
            SELECT o.id, o.first_name, o.last_name, o.gym FROM owners o
            JOIN pokemon_owners po ON po.owner_id = o.id
            WHERE po.pokemon_id = %s ORDER BY o.id;
            """,
            (pokemon.id,),
        )
        pokemon.owners = [
            Owner(id=r[0], first_name=r[1], last_name=r[2], gym=r[3]) for r in cur.fetchall()
        ]

        cur.execute(REVIEW_SELECT + " WHERE r.pokemon_id = %s ORDER BY r.id;", (pokemon.id,))
        pokemon.reviews = [row_to_review(r) for r in cur.fetchall()]

    @staticmethod
    def _query(sql: str, params: tuple) -> list[tuple]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Pokémon query failed: {e}")
            raise PersistenceError("Could not query Pokémon") from e
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_pokemon(row: tuple) -> Pokemon:
        """Convert a database row tuple to a Pokemon domain object."""
        return Pokemon(
            id=row[0],
            name=row[1],
            birth_date=row[2],
            created_at=row[3],
        )
