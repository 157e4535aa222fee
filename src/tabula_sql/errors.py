from typing import Optional


class TabulaError(Exception):
    """Base class for every error raised by tabula_sql."""


class DbConnectionError(TabulaError):
    """The database file or engine could not be reached."""


class ExecutionError(TabulaError):
    """A statement was rejected by the database engine."""

    def __init__(self, message: str, sql: Optional[str] = None):
        super().__init__(message)
        self.sql = sql


class SchemaDriftError(ExecutionError):
    """An existing table does not match the columns it was asked to have."""

    def __init__(self, table: str, existing: list, requested: list, sql: Optional[str] = None):
        super().__init__(
            f"Table {table} already exists with columns {existing}, "
            f"refusing to reuse it for columns {requested}",
            sql,
        )
        self.table = table
        self.existing = existing
        self.requested = requested


class UnsupportedBackendError(TabulaError):
    """The requested database kind has no working backend."""


class UnsupportedRelationError(TabulaError):
    """The relationship kind is not one of the recognised tags."""


class SerializationError(TabulaError):
    """A record could not be turned into named fields."""
