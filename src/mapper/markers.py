"""
Record Declarations
===================

Record types are plain dataclasses. These helpers attach the mapping
information the descriptor resolver reads:

- ``@table("users")`` names the table (required) and may also carry the
  primary key field, a type-level exclusion list and type-level JSON fields.
- ``@not_columns("a", "b")`` adds names to the type-level exclusion list.
- ``primary_key()``, ``not_column()`` and ``json_column()`` are drop-in
  replacements for ``dataclasses.field()`` that mark a single field.

Usage:
    @table("users")
    @dataclass
    class User:
        id: Optional[int] = primary_key(default=None)
        name: Optional[str] = None
        settings: Optional[dict] = json_column(default=None)
        display_name: Optional[str] = not_column(default=None)

Class-level declarations are read from the decorated class only; a record
subclass has to declare its own table.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Optional

# dataclasses.Field.metadata keys
PRIMARY_KEY = "mapper.primary_key"
NOT_COLUMN = "mapper.not_column"
JSON_COLUMN = "mapper.json_column"

# Attribute holding the TableConfig on a record class
TABLE_CONFIG_ATTR = "__mapper_table__"


@dataclass(frozen=True)
class TableConfig:
    """Type-level mapping declaration for one record type."""
    table_name: Optional[str] = None
    primary_key_field: Optional[str] = None
    excluded_fields: FrozenSet[str] = frozenset()
    json_fields: FrozenSet[str] = frozenset()


def table_config(record_type: type) -> Optional[TableConfig]:
    """Return the TableConfig declared directly on ``record_type``, if any."""
    return vars(record_type).get(TABLE_CONFIG_ATTR)


def _update_config(record_type: type, **changes: Any) -> type:
    current = table_config(record_type) or TableConfig()
    setattr(record_type, TABLE_CONFIG_ATTR, dataclasses.replace(current, **changes))
    return record_type


def table(
    name: str,
    *,
    primary_key: Optional[str] = None,
    exclude: Iterable[str] = (),
    json_fields: Iterable[str] = (),
):
    """Class decorator declaring the table a record type maps to."""
    if not name:
        raise ValueError("table name must be a non-empty string")

    def decorate(record_type: type) -> type:
        current = table_config(record_type) or TableConfig()
        return _update_config(
            record_type,
            table_name=name,
            primary_key_field=primary_key or current.primary_key_field,
            excluded_fields=current.excluded_fields | frozenset(exclude),
            json_fields=current.json_fields | frozenset(json_fields),
        )

    return decorate


def not_columns(*names: str):
    """Class decorator excluding the named fields from persistence."""

    def decorate(record_type: type) -> type:
        current = table_config(record_type) or TableConfig()
        return _update_config(
            record_type, excluded_fields=current.excluded_fields | frozenset(names)
        )

    return decorate


def _marked_field(marker: str, kwargs: dict):
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[marker] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def primary_key(**kwargs):
    """``dataclasses.field()`` marking the primary key."""
    return _marked_field(PRIMARY_KEY, kwargs)


def not_column(**kwargs):
    """``dataclasses.field()`` marking a field that is not persisted."""
    return _marked_field(NOT_COLUMN, kwargs)


def json_column(**kwargs):
    """``dataclasses.field()`` marking a field bound with a JSON cast."""
    return _marked_field(JSON_COLUMN, kwargs)
