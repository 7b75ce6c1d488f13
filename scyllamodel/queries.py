"""CQL statements derived from a model's table name and fields."""

from __future__ import annotations

from typing import Any

from scyllamodel.fields import (
    ModelFields,
    comma_sep_cols,
    insert_bind_markers,
    set_bind_markers,
    where_bind_markers,
    where_placeholders,
)


def _select_prefix(table_name: str, fields: ModelFields) -> str:
    return f"SELECT {comma_sep_cols(fields.db_fields)} FROM {table_name} WHERE "


def find_by_primary_key_query(table_name: str, fields: ModelFields) -> str:
    return _select_prefix(table_name, fields) + where_placeholders(fields.primary_key_fields())


def find_by_partition_key_query(table_name: str, fields: ModelFields) -> str:
    return _select_prefix(table_name, fields) + where_placeholders(fields.partition_key_fields)


def find_first_by_partition_key_query(table_name: str, fields: ModelFields) -> str:
    return find_by_partition_key_query(table_name, fields) + " LIMIT 1"


def insert_query(table_name: str, fields: ModelFields) -> str:
    return (
        f"INSERT INTO {table_name} ({comma_sep_cols(fields.db_fields)}) "
        f"VALUES ({insert_bind_markers(fields.db_fields)})"
    )


def insert_if_not_exists_query(table_name: str, fields: ModelFields) -> str:
    return insert_query(table_name, fields) + " IF NOT EXISTS"


def update_query(table_name: str, fields: ModelFields) -> str:
    return (
        f"UPDATE {table_name} SET {set_bind_markers(fields.non_primary_key_db_fields())} "
        f"WHERE {where_bind_markers(fields.primary_key_fields())}"
    )


def delete_query(table_name: str, fields: ModelFields) -> str:
    return f"DELETE FROM {table_name} WHERE {where_placeholders(fields.primary_key_fields())}"


def delete_by_partition_key_query(table_name: str, fields: ModelFields) -> str:
    return f"DELETE FROM {table_name} WHERE {where_placeholders(fields.partition_key_fields)}"


def find_model_query(table_name: str, fields: ModelFields, condition: str) -> str:
    """Select every database column, filtered by a caller supplied condition."""
    return _select_prefix(table_name, fields) + condition


def delete_model_query(table_name: str, condition: str) -> str:
    return f"DELETE FROM {table_name} WHERE {condition}"


def update_model_query(table_name: str, fields: ModelFields, assignments: str) -> str:
    """Update with caller supplied assignments, restricted to one primary key."""
    return f"UPDATE {table_name} SET {assignments} WHERE {where_placeholders(fields.primary_key_fields())}"


def primary_key_values(fields: ModelFields, instance: Any) -> tuple[Any, ...]:
    return tuple(getattr(instance, f.name) for f in fields.primary_key_fields())


def partition_key_values(fields: ModelFields, instance: Any) -> tuple[Any, ...]:
    return tuple(getattr(instance, f.name) for f in fields.partition_key_fields)