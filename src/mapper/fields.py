"""
Field Selection
===============

Walks a record dataclass and its dataclass ancestors and returns the fields
that map to columns, most-derived class first, each class's fields in
declaration order.

A field is dropped when it is a ClassVar, carries the ``not_column()``
marker, or is named in the record's type-level exclusion list.
"""

import dataclasses
from dataclasses import dataclass
from typing import List

from .markers import JSON_COLUMN, NOT_COLUMN, PRIMARY_KEY, TableConfig, table_config
from .naming import camel_to_underscore


@dataclass(frozen=True)
class FieldInfo:
    """One persistent field of a record type."""
    name: str
    column: str
    primary_key: bool = False
    json: bool = False


def _inherited_field_ids(klass: type) -> set:
    inherited = set()
    for base in klass.__bases__:
        for base_field in getattr(base, "__dataclass_fields__", {}).values():
            inherited.add(id(base_field))
    return inherited


def select_fields(record_type: type) -> List[FieldInfo]:
    """
    Return the persistent fields of ``record_type``.

    The result order is deterministic for a given class. ``record_type``
    must be a dataclass.
    """
    persistent = {f.name for f in dataclasses.fields(record_type)}
    config = table_config(record_type) or TableConfig()

    selected: List[FieldInfo] = []
    seen = set()
    for klass in record_type.__mro__:
        own_fields = vars(klass).get("__dataclass_fields__")
        if not own_fields:
            continue
        inherited = _inherited_field_ids(klass)

        for name, field in own_fields.items():
            # Inherited Field objects are shared with the base that declared them
            if id(field) in inherited or name in seen:
                continue
            seen.add(name)

            if name not in persistent:
                continue
            if name in config.excluded_fields or field.metadata.get(NOT_COLUMN):
                continue

            selected.append(FieldInfo(
                name=name,
                column=camel_to_underscore(name),
                primary_key=bool(field.metadata.get(PRIMARY_KEY)) or name == config.primary_key_field,
                json=bool(field.metadata.get(JSON_COLUMN)) or name in config.json_fields,
            ))

    return selected
