"""
SQL Providers
=============

Stateless builders turning a TableDescriptor into SQL text with named
``#{field}`` placeholders. Nothing here touches the database; see
mapper.statement for turning the text into an executable statement.

Providers do not validate the descriptor: a record with no persistent
fields yields incomplete SQL rather than an error.

Example (fields id, name, createdTime on table users):
    InsertSqlProvider.sql(table)
    -> INSERT INTO users (id, name, created_time) VALUES (#{id}, #{name}, #{createdTime})
"""

from typing import Iterable, Sequence

from .descriptor import TableDescriptor
from .fields import FieldInfo


def _values(fields: Sequence[FieldInfo]) -> str:
    return ", ".join(TableDescriptor.bind_parameter(f) for f in fields)


class InsertSqlProvider:
    """INSERT covering every persistent column, primary key included."""

    @staticmethod
    def sql(table: TableDescriptor) -> str:
        return (
            f"INSERT INTO {table.table_name} ({', '.join(table.columns)}) "
            f"VALUES ({_values(table.fields)})"
        )


class InsertWithoutPrimaryKeySqlProvider:
    """INSERT leaving the primary key to the database."""

    @staticmethod
    def sql(table: TableDescriptor) -> str:
        return (
            f"INSERT INTO {table.table_name} ({', '.join(table.columns_without_primary_key)}) "
            f"VALUES ({_values(table.fields_without_primary_key)})"
        )


class SelectOneSqlProvider:
    """SELECT one row by primary key, bound as ``#{<pk column>}``."""

    @staticmethod
    def sql(table: TableDescriptor) -> str:
        return (
            f"SELECT {', '.join(table.select_columns)} "
            f"FROM {table.table_name} "
            f"WHERE {table.primary_key_where}"
        )


class SelectByPrimaryKeyInSqlProvider:
    """
    SELECT rows whose primary key is in ``ids``.

    The keys are written into the SQL text as literals, not bound. Only pass
    values that cannot carry SQL, such as validated integer keys.
    """

    @staticmethod
    def sql(table: TableDescriptor, ids: Iterable) -> str:
        keys = ",".join(str(key) for key in ids)
        return (
            f"SELECT {', '.join(table.select_columns)} "
            f"FROM {table.table_name} "
            f"WHERE {table.primary_key_column} IN ({keys})"
        )


class UpdateByPrimaryKeySqlProvider:
    """UPDATE every non-key column of one row, matched by primary key."""

    @staticmethod
    def sql(table: TableDescriptor) -> str:
        assignments = ", ".join(
            TableDescriptor.assign_parameter(f) for f in table.fields_without_primary_key
        )
        return (
            f"UPDATE {table.table_name} SET {assignments} "
            f"WHERE {table.primary_key_where}"
        )
