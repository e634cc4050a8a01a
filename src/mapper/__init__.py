"""
Record Mapper
=============

Convention-driven SQL for dataclass records: declare the table on the
record, bind a mapper to it, and insert/fetch without writing SQL.

Modules:
- naming.py: field name to column name conversion
- markers.py: @table, @not_columns and field markers
- fields.py: persistent field selection
- descriptor.py: TableDescriptor resolution
- registry.py: per-mapper descriptor cache
- providers.py: SQL text builders
- statement.py: provider SQL to SQLAlchemy text()
- base_mapper.py: BaseMapper executing provider SQL on a connection
"""

from .base_mapper import BaseMapper
from .descriptor import DEFAULT_PRIMARY_KEY, MapperConfigurationError, TableDescriptor
from .entity import BaseEntity
from .fields import FieldInfo, select_fields
from .markers import TableConfig, json_column, not_column, not_columns, primary_key, table
from .naming import camel_to_underscore
from .providers import (
    InsertSqlProvider,
    InsertWithoutPrimaryKeySqlProvider,
    SelectByPrimaryKeyInSqlProvider,
    SelectOneSqlProvider,
    UpdateByPrimaryKeySqlProvider,
)
from .registry import DescriptorRegistry, get_descriptor_registry, reset_descriptor_registry

__all__ = [
    "BaseMapper",
    "BaseEntity",
    "DEFAULT_PRIMARY_KEY",
    "DescriptorRegistry",
    "FieldInfo",
    "InsertSqlProvider",
    "InsertWithoutPrimaryKeySqlProvider",
    "MapperConfigurationError",
    "SelectByPrimaryKeyInSqlProvider",
    "SelectOneSqlProvider",
    "TableConfig",
    "TableDescriptor",
    "UpdateByPrimaryKeySqlProvider",
    "camel_to_underscore",
    "get_descriptor_registry",
    "json_column",
    "not_column",
    "not_columns",
    "primary_key",
    "reset_descriptor_registry",
    "select_fields",
    "table",
]
