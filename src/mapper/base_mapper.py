"""
Record Mapper - Generic Mapper
Provides insert/fetch/update for any @table record without hand-written SQL.

Declare one mapper per record type:

    class UserMapper(BaseMapper[User]):
        pass

    with get_db_connection() as conn:
        mapper = UserMapper(conn)
        user = User(name="User1")
        mapper.insert(user)           # user.id now holds the generated key
        mapper.query_by_id(user.id)
"""

import dataclasses
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from sqlalchemy.engine import Connection

from utils.logger import log_statement

from .descriptor import TableDescriptor
from .providers import (
    InsertSqlProvider,
    InsertWithoutPrimaryKeySqlProvider,
    SelectByPrimaryKeyInSqlProvider,
    SelectOneSqlProvider,
    UpdateByPrimaryKeySqlProvider,
)
from .registry import DescriptorRegistry, get_descriptor_registry
from .statement import bind_values, column_value, placeholder_names, to_text

S = TypeVar("S")


class BaseMapper(Generic[S]):
    """
    Data access for one record type, bound to a SQLAlchemy connection.

    The record type comes from the ``BaseMapper[...]`` parameter of the
    subclass; its TableDescriptor is resolved once per mapper class and
    shared through the registry.
    """

    def __init__(self, connection: Connection, registry: Optional[DescriptorRegistry] = None):
        """
        Initialize mapper with database connection.

        Args:
            connection: SQLAlchemy connection object
            registry: Descriptor registry, the process-wide one by default
        """
        self.conn = connection
        self._registry = registry or get_descriptor_registry()

    def table_info(self) -> TableDescriptor:
        """
        Resolved metadata for this mapper's record type.

        Raises:
            MapperConfigurationError: If the mapper or record type is misconfigured
        """
        return self._registry.get_or_resolve(type(self))

    def insert(self, entity: S) -> None:
        """
        Insert ``entity`` leaving the primary key to the database.

        The generated key is written back into the entity's primary key field.
        """
        table = self.table_info()
        sql = InsertWithoutPrimaryKeySqlProvider.sql(table)
        pk_field = table.primary_key_field
        returning = pk_field is not None and self.conn.dialect.insert_returning
        if returning:
            sql = f"{sql} RETURNING {table.primary_key_column}"

        result = self._execute("insert", table, sql, bind_values(table, entity))

        if pk_field is None:
            return
        if returning:
            generated = result.scalar_one()
        else:
            generated = result.lastrowid
        setattr(entity, pk_field.name, generated)

    def insert_with_primary_key(self, entity: S) -> None:
        """Insert ``entity`` including its primary key value."""
        table = self.table_info()
        sql = InsertSqlProvider.sql(table)
        self._execute("insert_with_primary_key", table, sql, bind_values(table, entity))

    def query_by_id(self, id: Any) -> Optional[S]:
        """
        Fetch a record by primary key.

        Returns:
            Record instance or None if not found
        """
        table = self.table_info()
        sql = SelectOneSqlProvider.sql(table)
        row = self._execute("query_by_id", table, sql, {table.primary_key_column: id}).fetchone()

        if row is None:
            return None

        return self._row_to_record(table, row)

    def query_by_ids(self, ids: Sequence[int]) -> List[S]:
        """
        Fetch records whose primary key is in ``ids``.

        Keys are inlined into the SQL text, so only integers are accepted.

        Raises:
            TypeError: If any key is not an int
        """
        ids = list(ids)
        for key in ids:
            if isinstance(key, bool) or not isinstance(key, int):
                raise TypeError(
                    f"query_by_ids only accepts integer keys, got {type(key).__name__}: {key!r}"
                )
        if not ids:
            return []

        table = self.table_info()
        sql = SelectByPrimaryKeyInSqlProvider.sql(table, ids)
        result = self._execute("query_by_ids", table, sql, {})
        return [self._row_to_record(table, row) for row in result]

    def update_by_id(self, entity: S) -> int:
        """
        Update every non-key column of ``entity``'s row.

        Returns:
            Number of rows updated
        """
        table = self.table_info()
        sql = UpdateByPrimaryKeySqlProvider.sql(table)
        result = self._execute("update_by_id", table, sql, bind_values(table, entity))
        return result.rowcount

    def _execute(self, kind: str, table: TableDescriptor, sql: str, params: dict):
        log_statement(kind, table.table_name)
        used = placeholder_names(sql)
        return self.conn.execute(
            to_text(sql, self.conn.dialect.name),
            {name: value for name, value in params.items() if name in used},
        )

    @staticmethod
    def _row_to_record(table: TableDescriptor, row) -> S:
        """
        Build a record from a row selected with ``table.select_columns``.

        Fields accepted by __init__ are passed to it; init=False fields are
        set on the new instance afterwards.
        """
        init_names = {f.name for f in dataclasses.fields(table.record_type) if f.init}
        kwargs = {}
        late = {}
        for field, value in zip(table.fields, row):
            value = column_value(field, value)
            if field.name in init_names:
                kwargs[field.name] = value
            else:
                late[field.name] = value

        record = table.record_type(**kwargs)
        for name, value in late.items():
            # Also works on frozen records
            object.__setattr__(record, name, value)
        return record
