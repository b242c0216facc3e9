"""
repositories/errors.py
-----------------------
Error types raised by the data access layer.

Repositories never let psycopg2 exceptions escape: store failures are
wrapped in PersistenceError (with the original chained), and lookups that
find nothing raise NotFoundError instead of returning None.
"""


class RepositoryError(RuntimeError):
    """Base class for every error raised by a repository."""


class NotFoundError(RepositoryError):
    """Raised when a lookup by id or name yields no row."""

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key!r} not found")


class AmbiguousMatchError(RepositoryError):
    """Raised when a lookup by name matches more than one row."""

    def __init__(self, entity: str, key, count: int):
        self.entity = entity
        self.key = key
        self.count = count
        super().__init__(f"{count} {entity} rows match {key!r}")


class ValidationError(RepositoryError):
    """Raised before touching the store when a record breaks a domain rule."""


class PersistenceError(RepositoryError):
    """Raised when the store rejects a write or a query fails."""
