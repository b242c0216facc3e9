"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- ── Pokémon review catalogue ─────────────────────────────

CREATE TABLE IF NOT EXISTS categories (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS owners (
    id              SERIAL PRIMARY KEY,
    first_name      VARCHAR(100) NOT NULL,
    last_name       VARCHAR(100) NOT NULL,
    gym             VARCHAR(100)
);

-- Reviewers created from Telegram users carry their telegram_id
CREATE TABLE IF NOT EXISTS reviewers (
    id              SERIAL PRIMARY KEY,
    first_name      VARCHAR(100) NOT NULL,
    last_name       VARCHAR(100) NOT NULL DEFAULT '',
    telegram_id     BIGINT UNIQUE
);

CREATE TABLE IF NOT EXISTS pokemon (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) NOT NULL,
    birth_date      DATE NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS pokemon_categories (
    pokemon_id      INT NOT NULL REFERENCES pokemon(id) ON DELETE CASCADE,
    category_id     INT NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
    PRIMARY KEY (pokemon_id, category_id)
);

CREATE TABLE IF NOT EXISTS pokemon_owners (
    pokemon_id      INT NOT NULL REFERENCES pokemon(id) ON DELETE CASCADE,
    owner_id        INT NOT NULL REFERENCES owners(id) ON DELETE CASCADE,
    PRIMARY KEY (pokemon_id, owner_id)
);

CREATE TABLE IF NOT EXISTS reviews (
    id              SERIAL PRIMARY KEY,
    pokemon_id      INT NOT NULL REFERENCES pokemon(id) ON DELETE CASCADE,
    reviewer_id     INT NOT NULL REFERENCES reviewers(id) ON DELETE CASCADE,
    title           VARCHAR(200) NOT NULL,
    text            TEXT NOT NULL DEFAULT '',
    rating          INT NOT NULL CHECK (rating BETWEEN 1 AND 5)
);

-- ── Running-club directory ───────────────────────────────

CREATE TABLE IF NOT EXISTS addresses (
    id              SERIAL PRIMARY KEY,
    street          VARCHAR(200) NOT NULL,
    city            VARCHAR(100) NOT NULL,
    state           VARCHAR(50) NOT NULL
);

-- Each address is owned by exactly one club (UNIQUE address_id)
CREATE TABLE IF NOT EXISTS clubs (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(200) NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    image           TEXT,
    club_category   VARCHAR(20) NOT NULL DEFAULT 'City'
                    CHECK (club_category IN ('RoadRunner', 'Womens', 'Standard', 'City', 'Trail', 'Endurance')),
    address_id      INT UNIQUE NOT NULL REFERENCES addresses(id),
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_pokemon_name ON pokemon(LOWER(name));
CREATE INDEX IF NOT EXISTS idx_reviews_pokemon ON reviews(pokemon_id);
CREATE INDEX IF NOT EXISTS idx_addresses_state ON addresses(state);
CREATE INDEX IF NOT EXISTS idx_addresses_city ON addresses(city);
"""

DROP_SQL = """
DROP TABLE IF EXISTS clubs, addresses, reviews, pokemon_owners,
    pokemon_categories, pokemon, reviewers, owners, categories CASCADE;
"""


def _execute_script(sql: str, action: str) -> None:
    """Run a DDL script in a single transaction."""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(sql)
        conn.commit()
        logger.info(f"Database schema {action} successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Schema script failed, nothing {action}: {e}")
        raise
    finally:
        release_connection(conn)


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    _execute_script(SCHEMA_SQL, "initialized")


def drop_tables() -> None:
    """Drop every table owned by the application. Used to reset test databases."""
    _execute_script(DROP_SQL, "dropped")


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("✅ Database schema created successfully.")
