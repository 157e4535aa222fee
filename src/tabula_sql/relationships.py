import enum
import logging
from typing import List, Union

from .backends import Backend
from .errors import UnsupportedRelationError

logger = logging.getLogger(__name__)


class RelationType(str, enum.Enum):
    MANY_TO_MANY = "MANY_TO_MANY"
    ONE_TO_MANY = "ONE_TO_MANY"
    ONE_TO_ONE = "ONE_TO_ONE"

    @classmethod
    def parse(cls, kind: Union[str, "RelationType"]) -> "RelationType":
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().upper())
        except ValueError:
            raise UnsupportedRelationError(f"Relation type {kind} not supported") from None


def junction_table_name(table_a: str, table_b: str) -> str:
    return f"{table_a.lower()}_{table_b.lower()}"


def relationship_statements(table_a: str, table_b: str, key_a: str, key_b: str,
                            kind: Union[str, RelationType]) -> List[str]:
    """SQL realizing the relationship, in execution order.

    MANY_TO_MANY creates a junction table, ONE_TO_MANY adds a reference to
    ``table_a`` on ``table_b``, ONE_TO_ONE adds a unique reference to
    ``table_b`` on ``table_a``. SQLite cannot add a UNIQUE column with ALTER
    TABLE, so uniqueness for ONE_TO_ONE comes from a separate unique index.
    """
    relation = RelationType.parse(kind)
    ref_a = f"{table_a.lower()}_ref"
    ref_b = f"{table_b.lower()}_ref"

    if relation is RelationType.MANY_TO_MANY:
        junction = junction_table_name(table_a, table_b)
        return [
            f"CREATE TABLE IF NOT EXISTS {junction} "
            f"({ref_a} INTEGER REFERENCES {table_a}({key_a}), "
            f"{ref_b} INTEGER REFERENCES {table_b}({key_b}))"
        ]

    if relation is RelationType.ONE_TO_MANY:
        return [f"ALTER TABLE {table_b} ADD COLUMN {ref_a} INTEGER REFERENCES {table_a}({key_a})"]

    return [
        f"ALTER TABLE {table_a} ADD COLUMN {ref_b} INTEGER REFERENCES {table_b}({key_b})",
        f"CREATE UNIQUE INDEX IF NOT EXISTS uq_{table_a.lower()}_{ref_b} ON {table_a}({ref_b})",
    ]


def create_relationship(backend: Backend, table_a: str, table_b: str, key_a: str, key_b: str,
                        kind: Union[str, RelationType]) -> None:
    statements = relationship_statements(table_a, table_b, key_a, key_b, kind)
    # no rollback: a failure after the first statement leaves it applied
    for statement in statements:
        backend.execute(statement)
    logger.info("Created %s relationship between %s and %s",
                RelationType.parse(kind).value, table_a, table_b)
