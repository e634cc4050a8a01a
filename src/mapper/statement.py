"""
Statement Translation
=====================

Bridges provider SQL to SQLAlchemy. Providers write placeholders as
``#{name}`` (optionally followed by a ``::TYPE`` cast); SQLAlchemy's
text() expects ``:name``. A ``:name::TYPE`` form would confuse text()'s
bind parser, so on PostgreSQL casts are rewritten as ``CAST(:name AS TYPE)``.

Other dialects have no JSONB type (SQLite gives it numeric affinity and
stores JSON text as 0), so there the cast is dropped and the serialized
JSON string is bound as plain text.
"""

import dataclasses
import json
import re
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from .descriptor import TableDescriptor
from .fields import FieldInfo

_CAST_PLACEHOLDER = re.compile(r"#\{(\w+)\}::(\w+)")
_PLACEHOLDER = re.compile(r"#\{(\w+)\}")

# Dialects that understand the JSONB cast providers emit
CAST_DIALECTS = frozenset({"postgresql"})


def to_bind_syntax(sql: str, dialect_name: Optional[str] = "postgresql") -> str:
    """
    Rewrite ``#{name}`` placeholders to SQLAlchemy ``:name`` binds.

    Example:
        >>> to_bind_syntax("VALUES (#{id}, #{payload}::JSONB)")
        'VALUES (:id, CAST(:payload AS JSONB))'
        >>> to_bind_syntax("VALUES (#{id}, #{payload}::JSONB)", "sqlite")
        'VALUES (:id, :payload)'
    """
    if dialect_name in CAST_DIALECTS:
        sql = _CAST_PLACEHOLDER.sub(r"CAST(:\1 AS \2)", sql)
    else:
        sql = _CAST_PLACEHOLDER.sub(r"#{\1}", sql)
    return _PLACEHOLDER.sub(r":\1", sql)


def to_text(sql: str, dialect_name: Optional[str] = "postgresql") -> TextClause:
    """Build an executable SQLAlchemy TextClause from provider SQL."""
    return text(to_bind_syntax(sql, dialect_name))


def bind_values(table: TableDescriptor, entity: Any) -> Dict[str, Any]:
    """
    Build the parameter dict for ``entity`` keyed by field name.

    JSON-marked fields are serialized with json.dumps; None stays None.
    The primary key value is also bound under the primary key column name,
    which is the placeholder used in WHERE clauses.
    """
    params: Dict[str, Any] = {}
    for field in table.fields:
        value = getattr(entity, field.name)
        if field.json and value is not None:
            if dataclasses.is_dataclass(value):
                value = dataclasses.asdict(value)
            value = json.dumps(value, default=str)
        params[field.name] = value

    if table.primary_key_field is not None:
        params.setdefault(table.primary_key_column, params[table.primary_key_field.name])
    return params


def column_value(field: FieldInfo, value: Any) -> Any:
    """
    Convert a selected column value back to the field's Python value.

    Drivers without a JSON type hand JSON columns back as text.
    """
    if field.json and isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


def placeholder_names(sql: str) -> set:
    """Names of the ``#{name}`` placeholders used in ``sql``."""
    return set(_PLACEHOLDER.findall(sql))
