"""
Table Descriptor Resolution
===========================

Turns a mapper class (``class UserMapper(BaseMapper[User])``) into a
TableDescriptor: the table name, primary key column, persistent fields and
the column lists every SQL provider works from.

Resolution is the only place configuration mistakes surface. They are
programmer errors, so they raise MapperConfigurationError instead of
returning partial metadata.
"""

import dataclasses
import typing
from dataclasses import dataclass
from typing import Optional, Tuple

from .fields import FieldInfo, select_fields
from .markers import table_config
from .naming import COLUMN_SEPARATOR

DEFAULT_PRIMARY_KEY = "id"
JSON_CAST = "::JSONB"


class MapperConfigurationError(Exception):
    """Raised when a mapper or record type cannot be turned into a table descriptor."""

    def __init__(self, message: str, type_name: str):
        super().__init__(message)
        self.type_name = type_name


def _qualified_name(klass: type) -> str:
    return f"{klass.__module__}.{klass.__qualname__}"


@dataclass(frozen=True)
class TableDescriptor:
    """
    Resolved, immutable mapping metadata for one record type.

    ``fields``/``columns``/``select_columns`` are positionally parallel, as
    are ``fields_without_primary_key``/``columns_without_primary_key``.
    """
    record_type: type
    table_name: str
    primary_key_column: str
    primary_key_field: Optional[FieldInfo]
    fields: Tuple[FieldInfo, ...]
    fields_without_primary_key: Tuple[FieldInfo, ...]
    columns: Tuple[str, ...]
    columns_without_primary_key: Tuple[str, ...]
    select_columns: Tuple[str, ...]

    @property
    def primary_key_where(self) -> str:
        pk = self.primary_key_column
        return f"{pk} = #{{{pk}}}"

    @staticmethod
    def bind_parameter(field: FieldInfo) -> str:
        """Named placeholder for ``field``, with a JSON cast where marked."""
        value = f"#{{{field.name}}}"
        return value + JSON_CAST if field.json else value

    @staticmethod
    def assign_parameter(field: FieldInfo) -> str:
        return f"{field.column} = {TableDescriptor.bind_parameter(field)}"

    @staticmethod
    def select_column(field: FieldInfo) -> str:
        """Column reference, aliased back to the field name for compound columns."""
        if COLUMN_SEPARATOR in field.column:
            return f"{field.column} AS {field.name}"
        return field.column

    @classmethod
    def of(cls, mapper_type: type) -> "TableDescriptor":
        """Resolve the descriptor for ``mapper_type``."""
        record_type = entity_type(mapper_type)
        return cls.for_record(record_type)

    @classmethod
    def for_record(cls, record_type: type) -> "TableDescriptor":
        """Resolve the descriptor for a record dataclass directly."""
        if not dataclasses.is_dataclass(record_type):
            raise MapperConfigurationError(
                f"Record type {_qualified_name(record_type)} must be a dataclass.",
                _qualified_name(record_type),
            )

        name = table_name(record_type)
        fields = tuple(select_fields(record_type))
        _check_constructible(record_type, fields)
        pk_field = _primary_key_field(record_type, fields)

        if pk_field is not None:
            primary_key_column = pk_field.column
        else:
            primary_key_column = DEFAULT_PRIMARY_KEY

        fields_without_pk = tuple(f for f in fields if f is not pk_field)

        return cls(
            record_type=record_type,
            table_name=name,
            primary_key_column=primary_key_column,
            primary_key_field=pk_field,
            fields=fields,
            fields_without_primary_key=fields_without_pk,
            columns=tuple(f.column for f in fields),
            columns_without_primary_key=tuple(f.column for f in fields_without_pk),
            select_columns=tuple(cls.select_column(f) for f in fields),
        )


def entity_type(mapper_type: type) -> type:
    """
    Return the record type bound to ``mapper_type``'s ``BaseMapper[...]`` base.

    Raises:
        MapperConfigurationError: If no concrete record type is bound
    """
    # Imported here to avoid a circular import with base_mapper
    from .base_mapper import BaseMapper

    for klass in getattr(mapper_type, "__mro__", ()):
        for base in vars(klass).get("__orig_bases__", ()):
            origin = typing.get_origin(base)
            if not (isinstance(origin, type) and issubclass(origin, BaseMapper)):
                continue
            args = typing.get_args(base)
            if args and isinstance(args[0], type):
                return args[0]

    raise MapperConfigurationError(
        f"No record type bound to BaseMapper for {_qualified_name(mapper_type)}. "
        f"Declare it as: class {mapper_type.__name__}(BaseMapper[Record]).",
        _qualified_name(mapper_type),
    )


def table_name(record_type: type) -> str:
    """
    Return the table name declared with ``@table`` on ``record_type``.

    Raises:
        MapperConfigurationError: If the record type has no table declaration
    """
    config = table_config(record_type)
    if config is None or not config.table_name:
        raise MapperConfigurationError(
            f"Record type {_qualified_name(record_type)} has no @table declaration.",
            _qualified_name(record_type),
        )
    return config.table_name


def _primary_key_field(record_type: type, fields: Tuple[FieldInfo, ...]) -> Optional[FieldInfo]:
    """
    Pick the primary key field: the single marked field, otherwise a field
    whose column is the default key column.
    """
    config = table_config(record_type)
    configured = config.primary_key_field if config else None
    if configured and configured not in {f.name for f in fields}:
        raise MapperConfigurationError(
            f"Primary key field '{configured}' of {_qualified_name(record_type)} "
            f"is not a persistent field.",
            _qualified_name(record_type),
        )

    marked = [f for f in fields if f.primary_key]
    if len(marked) > 1:
        names = ", ".join(f.name for f in marked)
        raise MapperConfigurationError(
            f"Record type {_qualified_name(record_type)} marks more than one "
            f"primary key field: {names}.",
            _qualified_name(record_type),
        )
    if marked:
        return marked[0]

    for field in fields:
        if field.column == DEFAULT_PRIMARY_KEY:
            return field
    return None


def _check_constructible(record_type: type, fields: Tuple[FieldInfo, ...]) -> None:
    """
    Ensure a record can be built from its persistent fields alone.

    Rows only carry persistent columns, so every other __init__ argument
    needs a default.
    """
    persistent = {f.name for f in fields}
    for field in dataclasses.fields(record_type):
        if not field.init or field.name in persistent:
            continue
        if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
            raise MapperConfigurationError(
                f"Non-persistent field '{field.name}' of {_qualified_name(record_type)} "
                f"needs a default so records can be built from query results.",
                _qualified_name(record_type),
            )
