"""
db/ - Database Layer
====================
PostgreSQL connection pool and schema for the Pokémon catalogue and the
running-club directory. Lowest layer: depends only on config and logging.
"""
