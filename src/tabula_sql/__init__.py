from typing import Optional

from .backends import DatabaseKind, SqliteBackend, MysqlBackend
from .config import TabulaConfig, configure_logging, get_config
from .core import Tabula
from .errors import (
    TabulaError,
    DbConnectionError,
    ExecutionError,
    SchemaDriftError,
    SerializationError,
    UnsupportedBackendError,
    UnsupportedRelationError,
)
from .relationships import RelationType
from .schema import Column, SqlType, columns_for, generate_columns

_GLOBAL_TABULA: Optional[Tabula] = None


def get_tabula() -> Tabula:
    """Shared instance built from the environment on first use."""
    global _GLOBAL_TABULA
    if _GLOBAL_TABULA is None:
        _GLOBAL_TABULA = Tabula.from_config()
    return _GLOBAL_TABULA


def reset_tabula() -> None:
    global _GLOBAL_TABULA
    if _GLOBAL_TABULA is not None:
        _GLOBAL_TABULA.close()
        _GLOBAL_TABULA = None


__all__ = [
    "Tabula",
    "get_tabula",
    "reset_tabula",
    "DatabaseKind",
    "SqliteBackend",
    "MysqlBackend",
    "RelationType",
    "Column",
    "SqlType",
    "generate_columns",
    "columns_for",
    "TabulaConfig",
    "get_config",
    "configure_logging",
    "TabulaError",
    "DbConnectionError",
    "ExecutionError",
    "SchemaDriftError",
    "SerializationError",
    "UnsupportedBackendError",
    "UnsupportedRelationError",
]
