import pytest
from dataclasses import dataclass
from typing import Optional

from tabula_sql.errors import SerializationError
from tabula_sql.schema import (
    Column,
    SqlType,
    columns_for,
    generate_columns,
    get_sqlite_type,
    table_name_for,
    to_row,
)


@dataclass
class Sample:
    a: str
    b: int
    c: bool


@dataclass
class Client:
    id: Optional[int]
    name: str
    age: int


@dataclass
class Reading:
    label: str
    value: float
    note: Optional[str] = None
    count: Optional[int] = None
    tags: Optional[list] = None


@dataclass
class Invoice:
    __table_name__ = "invoices"
    total: float


class Plain:
    def __init__(self, name, age):
        self.name = name
        self.age = age
        self._cache = {}


class Slotted:
    __slots__ = ("name",)

    def __init__(self, name):
        self.name = name


def test_field_order_and_types():
    """Fields keep declaration order and map to their SQL types."""
    cols = generate_columns(Sample("x", 1, True))
    assert cols == [
        Column("a", SqlType.TEXT),
        Column("b", SqlType.INTEGER),
        Column("c", SqlType.BOOLEAN),
    ]


def test_id_becomes_leading_primary_key():
    for client in (Client(None, "John Doe", 25), Client(7, "Jane Doe", 30)):
        cols = generate_columns(client)
        assert [str(c) for c in cols] == [
            "id INTEGER PRIMARY KEY AUTOINCREMENT",
            "name TEXT",
            "age INTEGER",
        ]


def test_id_is_first_even_when_declared_last():
    cols = generate_columns({"name": "x", "id": None})
    assert [c.name for c in cols] == ["id", "name"]


def test_value_type_mapping():
    assert get_sqlite_type(True) is SqlType.BOOLEAN
    assert get_sqlite_type(3) is SqlType.INTEGER
    assert get_sqlite_type(2.5) is SqlType.REAL
    assert get_sqlite_type("s") is SqlType.TEXT
    assert get_sqlite_type([1, 2]) is SqlType.TEXT
    assert get_sqlite_type(None) is SqlType.TEXT


def test_none_values_use_declared_annotation():
    cols = generate_columns(Reading("t", 1.5))
    assert cols == [
        Column("label", SqlType.TEXT),
        Column("value", SqlType.REAL),
        Column("note", SqlType.TEXT),
        Column("count", SqlType.INTEGER),
        Column("tags", SqlType.TEXT),
    ]


def test_mapping_and_plain_object_records():
    assert generate_columns({"name": None, "score": 9.0}) == [
        Column("name", SqlType.TEXT),
        Column("score", SqlType.REAL),
    ]
    # private attributes are not columns
    assert [c.name for c in generate_columns(Plain("Bob", 4))] == ["name", "age"]


@pytest.mark.parametrize("record", [42, "text", Slotted("x"), {1: "a"}, {}])
def test_unserializable_records_raise(record):
    with pytest.raises(SerializationError):
        generate_columns(record)


def test_columns_for_dataclass_type():
    assert [str(c) for c in columns_for(Client)] == [
        "id INTEGER PRIMARY KEY AUTOINCREMENT",
        "name TEXT",
        "age INTEGER",
    ]
    with pytest.raises(SerializationError):
        columns_for(Plain)


def test_to_row_drops_null_id_only():
    assert to_row(Client(None, "John Doe", 25)) == {"name": "John Doe", "age": 25}
    assert to_row(Client(3, "Jane", 30)) == {"id": 3, "name": "Jane", "age": 30}

    row = to_row(Reading("t", 1.0, tags=["a", "b"]))
    assert row["note"] is None
    assert row["tags"] == '["a", "b"]'


def test_table_names():
    assert table_name_for(Client(None, "x", 1)) == "Client"
    assert table_name_for(Client) == "Client"
    assert table_name_for(Invoice(1.0)) == "invoices"
    with pytest.raises(SerializationError):
        table_name_for({"a": 1})


def test_integer_range_decides_type():
    assert get_sqlite_type(2 ** 63 - 1) is SqlType.INTEGER
    assert get_sqlite_type(-2 ** 63) is SqlType.INTEGER
    assert get_sqlite_type(2 ** 63) is SqlType.REAL
    assert get_sqlite_type(-2 ** 63 - 1) is SqlType.REAL


def test_to_row_big_integers_and_bytes():
    assert to_row({"n": 2 ** 64}) == {"n": float(2 ** 64)}
    assert to_row({"data": bytearray(b"ab")}) == {"data": b"ab"}
    with pytest.raises(SerializationError):
        to_row({"n": 10 ** 400})
