import logging
from dataclasses import is_dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from .backends import Backend, DatabaseKind, open_backend
from .config import TabulaConfig, get_config
from .relationships import RelationType, create_relationship
from .schema import Column, columns_for, generate_columns, table_name_for, to_row

logger = logging.getLogger(__name__)


class Tabula:
    """Creates tables from records and inserts records into them."""

    def __init__(self, database: Union[str, DatabaseKind] = "sqlite",
                 uri: Union[str, Path] = "database.db", strict_schema: bool = True):
        self.database = DatabaseKind.parse(database)
        self.uri = str(uri)
        self.backend: Backend = open_backend(self.database, self.uri, strict_schema=strict_schema)
        if self.database is not DatabaseKind.SQLITE:
            logger.warning("%s database not supported yet; every operation will fail",
                           self.database.value)

    @classmethod
    def from_config(cls, cfg: Optional[TabulaConfig] = None) -> "Tabula":
        cfg = cfg or get_config()
        return cls(cfg.database, cfg.uri, strict_schema=cfg.strict_schema)

    def __enter__(self) -> "Tabula":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.backend.close()

    def columns(self, record: Any) -> List[Column]:
        """Columns for a record instance, or for a dataclass type's annotations."""
        if isinstance(record, type) and is_dataclass(record):
            return columns_for(record)
        return generate_columns(record)

    def create_table(self, record: Any, table: Optional[str] = None) -> str:
        """Create the record's table if missing and return its name."""
        table_name = table or table_name_for(record)
        logger.info("Creating table for %s", table_name)
        self.backend.create_table(table_name, self.columns(record))
        return table_name

    def insert(self, record: Any, table: Optional[str] = None) -> int:
        """Insert one record and return the new row id."""
        table_name = table or table_name_for(record)
        row = to_row(record)
        return self.backend.insert(table_name, list(row.keys()), list(row.values()))

    def create_relationship(self, table_a: str, table_b: str, key_a: str, key_b: str,
                            relation_type: Union[str, RelationType]) -> None:
        create_relationship(self.backend, table_a, table_b, key_a, key_b, relation_type)
