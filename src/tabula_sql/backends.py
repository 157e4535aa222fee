import enum
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .errors import (
    DbConnectionError,
    ExecutionError,
    SchemaDriftError,
    UnsupportedBackendError,
)
from .schema import Column

logger = logging.getLogger(__name__)


class DatabaseKind(str, enum.Enum):
    SQLITE = "sqlite"
    MYSQL = "mysql"

    @classmethod
    def parse(cls, kind: Union[str, "DatabaseKind"]) -> "DatabaseKind":
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().lower())
        except ValueError:
            raise UnsupportedBackendError(f"Database {kind} not supported") from None


def _column_def(column: Union[Column, str]) -> str:
    return str(column)


_CONSTRAINT_WORDS = {"PRIMARY", "NOT", "NULL", "UNIQUE", "DEFAULT", "REFERENCES",
                     "CHECK", "COLLATE", "CONSTRAINT", "GENERATED", "AS"}


def _split_def(col_def: str) -> Tuple[str, str]:
    """``"id INTEGER PRIMARY KEY AUTOINCREMENT"`` -> ``("id", "INTEGER")``."""
    name, *rest = col_def.split()
    type_words = []
    for word in rest:
        if word.upper() in _CONSTRAINT_WORDS:
            break
        type_words.append(word)
    return name, " ".join(type_words).upper()


class Backend:
    """Operations every database backend provides."""

    kind: DatabaseKind

    def create_table(self, table_name: str, columns: Sequence[Union[Column, str]]) -> None:
        raise NotImplementedError

    def insert(self, table_name: str, columns: Sequence[str], values: Sequence[Any]) -> int:
        raise NotImplementedError

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        raise NotImplementedError

    def table_columns(self, table_name: str) -> List[str]:
        raise NotImplementedError

    def table_schema(self, table_name: str) -> Dict[str, str]:
        raise NotImplementedError

    def close(self) -> None:
        pass


class SqliteBackend(Backend):
    """Runs generated statements against one SQLite file."""

    kind = DatabaseKind.SQLITE

    def __init__(self, uri: Union[str, Path], strict_schema: bool = True):
        self.uri = str(uri)
        self.strict_schema = strict_schema
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            conn = None
            try:
                conn = sqlite3.connect(self.uri)
                conn.execute("PRAGMA foreign_keys = ON")
            except sqlite3.Error as exc:
                if conn is not None:
                    conn.close()
                raise DbConnectionError(f"Cannot open SQLite database {self.uri}: {exc}") from exc
            conn.row_factory = sqlite3.Row
            self._conn = conn
            logger.debug("Opened SQLite database %s", self.uri)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Run one statement and commit it; roll back and wrap engine errors."""
        conn = self.conn
        logger.debug("SQL: %s | params=%r", sql, params)
        try:
            cursor = conn.execute(sql, tuple(params))
            conn.commit()
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: an int parameter outside SQLite's 64-bit range
            conn.rollback()
            raise ExecutionError(f"{exc} (while running: {sql})", sql) from exc
        return cursor

    def table_schema(self, table_name: str) -> Dict[str, str]:
        """Existing column name -> declared type, empty when the table is missing."""
        rows = self.execute(f'PRAGMA table_info("{table_name}")').fetchall()
        return {row["name"]: row["type"].upper() for row in rows}

    def table_columns(self, table_name: str) -> List[str]:
        return list(self.table_schema(table_name))

    def create_table(self, table_name: str, columns: Sequence[Union[Column, str]]) -> None:
        """Create the table unless it exists.

        An existing table is reused when it has every requested column with
        the same declared type. Column order and extra columns, such as the
        ``*_ref`` columns added by relationships, do not count as drift.
        """
        if not columns:
            raise ExecutionError(f"Cannot create table {table_name} without columns")

        col_defs = [_column_def(c) for c in columns]
        query = f"CREATE TABLE IF NOT EXISTS {table_name} ({', '.join(col_defs)})"

        existing = self.table_schema(table_name)
        if existing:
            requested = dict(_split_def(d) for d in col_defs)
            drifted = [name for name, sql_type in requested.items()
                       if existing.get(name) != sql_type]
            if drifted:
                if self.strict_schema:
                    raise SchemaDriftError(table_name, list(existing), list(requested), query)
                logger.warning(
                    "Table %s already exists with columns %s; ignoring requested columns %s",
                    table_name, list(existing), drifted,
                )
            return

        self.execute(query)
        logger.info("Created table %s (%s)", table_name, ", ".join(col_defs))

    def insert(self, table_name: str, columns: Sequence[str], values: Sequence[Any]) -> int:
        if len(columns) != len(values):
            raise ValueError(
                f"Got {len(columns)} columns but {len(values)} values for {table_name}"
            )

        if columns:
            placeholders = ", ".join(["?"] * len(values))
            query = f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders})"
        else:
            query = f"INSERT INTO {table_name} DEFAULT VALUES"

        row_id = self.execute(query, values).lastrowid
        logger.debug("Inserted row %s into %s", row_id, table_name)
        return row_id


class MysqlBackend(Backend):
    """Placeholder: every operation fails."""

    kind = DatabaseKind.MYSQL

    def __init__(self, uri: Union[str, Path], strict_schema: bool = True):
        self.uri = str(uri)
        self.strict_schema = strict_schema

    def _unsupported(self, *args, **kwargs):
        raise UnsupportedBackendError("MySQL database not supported yet")

    create_table = _unsupported
    insert = _unsupported
    execute = _unsupported
    table_columns = _unsupported
    table_schema = _unsupported


_BACKENDS = {
    DatabaseKind.SQLITE: SqliteBackend,
    DatabaseKind.MYSQL: MysqlBackend,
}


def open_backend(kind: Union[str, DatabaseKind], uri: Union[str, Path],
                 strict_schema: bool = True) -> Backend:
    backend_cls = _BACKENDS[DatabaseKind.parse(kind)]
    return backend_cls(uri, strict_schema=strict_schema)
