"""Schema inference: turn records into column definitions and bindable rows.

A record is a dataclass instance, an object with public instance attributes,
or a mapping of field name to value. Fields are read in declaration order for
dataclasses and in insertion order otherwise.
"""
import enum
import json
import logging
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Dict, List, Optional, Union

from .errors import SerializationError

logger = logging.getLogger(__name__)

ID_FIELD = "id"


class SqlType(str, enum.Enum):
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    REAL = "REAL"
    BOOLEAN = "BOOLEAN"
    PRIMARY_KEY = "INTEGER PRIMARY KEY AUTOINCREMENT"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Column:
    name: str
    sql_type: SqlType

    def __str__(self) -> str:
        return f"{self.name} {self.sql_type}"


_ANNOTATION_TYPES = {
    bool: SqlType.BOOLEAN,
    int: SqlType.INTEGER,
    float: SqlType.REAL,
    str: SqlType.TEXT,
}

# Annotations left as strings (unresolvable forward references)
_ANNOTATION_NAMES = {tp.__name__: sql_type for tp, sql_type in _ANNOTATION_TYPES.items()}


INT64_MIN, INT64_MAX = -2 ** 63, 2 ** 63 - 1


def _fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def get_sqlite_type(value: Any) -> SqlType:
    # bool is a subclass of int, so it has to be tested first
    if isinstance(value, bool): return SqlType.BOOLEAN
    if isinstance(value, int): return SqlType.INTEGER if _fits_int64(value) else SqlType.REAL
    if isinstance(value, float): return SqlType.REAL
    return SqlType.TEXT


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _annotation_type(annotation: Any) -> SqlType:
    if isinstance(annotation, str):
        name = annotation.replace(" ", "")
        if name.startswith("Optional[") and name.endswith("]"):
            name = name[len("Optional["):-1]
        name = name.replace("|None", "").replace("None|", "")
        return _ANNOTATION_NAMES.get(name, SqlType.TEXT)
    return _ANNOTATION_TYPES.get(_unwrap_optional(annotation), SqlType.TEXT)


def _declared_types(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # fall back to the raw annotations, which may be strings
        return {f.name: f.type for f in fields(cls)}


def to_fields(record: Any) -> Dict[str, Any]:
    """Return the record's fields as an ordered name -> value dict."""
    if is_dataclass(record) and not isinstance(record, type):
        return {f.name: getattr(record, f.name) for f in fields(record)}

    if isinstance(record, Mapping):
        for key in record:
            if not isinstance(key, str):
                raise SerializationError(f"Field names must be strings, got {key!r}")
        return dict(record)

    try:
        attrs = vars(record)
    except TypeError as exc:
        raise SerializationError(
            f"Cannot read fields from {type(record).__name__} value {record!r}"
        ) from exc
    return {k: v for k, v in attrs.items() if not k.startswith('_')}


def generate_columns(record: Any) -> List[Column]:
    """Infer the ordered column list for a record.

    A field named ``id`` always becomes the leading
    ``INTEGER PRIMARY KEY AUTOINCREMENT`` column. A ``None`` value falls back
    to the dataclass annotation when there is one, and to TEXT otherwise.
    """
    values = to_fields(record)
    declared = _declared_types(type(record)) if is_dataclass(record) else {}

    columns = []
    if ID_FIELD in values:
        columns.append(Column(ID_FIELD, SqlType.PRIMARY_KEY))

    for name, value in values.items():
        if name == ID_FIELD:
            continue
        if value is None and name in declared:
            sql_type = _annotation_type(declared[name])
        else:
            sql_type = get_sqlite_type(value)
        columns.append(Column(name, sql_type))

    if not columns:
        raise SerializationError(f"{type(record).__name__} has no fields to map to columns")
    return columns


def columns_for(cls: type) -> List[Column]:
    """Build columns from a dataclass type's declared annotations alone."""
    if not (isinstance(cls, type) and is_dataclass(cls)):
        raise SerializationError(f"{cls!r} is not a dataclass type")

    declared = _declared_types(cls)
    names = [f.name for f in fields(cls)]
    columns = [Column(ID_FIELD, SqlType.PRIMARY_KEY)] if ID_FIELD in names else []
    columns.extend(Column(n, _annotation_type(declared[n])) for n in names if n != ID_FIELD)
    return columns


def _bindable(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool) and not _fits_int64(value):
        # stored in a REAL column, like get_sqlite_type reports
        try:
            return float(value)
        except OverflowError as exc:
            raise SerializationError(f"Integer {value} is too large to store") from exc
    if value is None or isinstance(value, (str, int, float)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return json.dumps(value, default=str)


def to_row(record: Any) -> Dict[str, Any]:
    """Ordered column -> bound value mapping for an insert.

    An ``id`` of ``None`` is left out so the database assigns one.
    """
    row = {}
    for name, value in to_fields(record).items():
        if name == ID_FIELD and value is None:
            continue
        row[name] = _bindable(value)
    return row


def table_name_for(record: Any) -> str:
    """Table name: ``__table_name__`` when declared, else the class name."""
    cls = record if isinstance(record, type) else type(record)
    explicit: Optional[str] = getattr(cls, "__table_name__", None)
    if explicit:
        return explicit
    if issubclass(cls, Mapping):
        raise SerializationError("Mapping records need an explicit table name")
    # __qualname__ may be dotted for nested classes; keep the last segment
    return cls.__qualname__.split(".")[-1]
