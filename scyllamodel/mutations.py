"""Mutation queries generated from a model's keys, collections and counters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from scyllamodel.fields import Field, ModelFields, names, where_placeholders
from scyllamodel.queries import primary_key_values

MAX_DELETE_BY_FUNCTIONS = 3

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


@dataclass(frozen=True)
class _KeyedMutation:
    """A named mutation whose arguments are bound to the given key fields."""

    name: str
    query: str
    parameters: tuple[Field, ...]

    @property
    def argument_names(self) -> list[str]:
        return names(self.parameters)

    @property
    def argument_types(self) -> list[str]:
        return [f.type_without_option() for f in self.parameters]

    def bind(self, *args: Any) -> tuple[str, tuple[Any, ...]]:
        """Pair the query with positional values, one per parameter."""
        if len(args) != len(self.parameters):
            raise TypeError(
                f"{self.name}() takes {len(self.parameters)} argument(s) but {len(args)} were given"
            )
        return self.query, tuple(args)


@dataclass(frozen=True)
class _InstanceMutation:
    """A mutation of one column of a model instance, identified by its primary key."""

    name: str
    query: str
    column: Field
    fields: ModelFields
    const_name: str | None = None
    counter: bool = False

    def bind(self, instance: Any, value: Any) -> tuple[str, tuple[Any, ...]]:
        """Values are the given value followed by the instance's primary key values."""
        if self.counter:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{self.name}() expects an integer, got {type(value).__name__}")
            if not _I64_MIN <= value <= _I64_MAX:
                raise ValueError(f"{self.name}() value {value} does not fit in a 64-bit counter")
        return self.query, (value, *primary_key_values(self.fields, instance))


def primary_key_deleters(table_name: str, fields: ModelFields) -> list[_KeyedMutation]:
    """Deleters for each primary key prefix of up to three fields that holds the whole partition key."""
    primary_key = fields.primary_key_fields()
    partition_len = len(fields.partition_key_fields)
    generated: list[_KeyedMutation] = []

    for size in range(1, min(len(primary_key), MAX_DELETE_BY_FUNCTIONS) + 1):
        if size < partition_len:
            continue
        current = primary_key[:size]
        generated.append(
            _KeyedMutation(
                name=f"delete_by_{'_and_'.join(names(current))}",
                query=f"DELETE FROM {table_name} WHERE {where_placeholders(current)}",
                parameters=tuple(current),
            )
        )

    return generated


def _column_mutations(
    table_name: str,
    fields: ModelFields,
    columns: Sequence[Field],
    verb: str,
    operator: str,
    if_exists: bool,
    counter: bool,
) -> list[_InstanceMutation]:
    where = where_placeholders(fields.primary_key_fields())
    suffix = " IF EXISTS" if if_exists else ""
    name_suffix = "_if_exists" if if_exists else ""
    generated = []
    for column in columns:
        const_name = None
        if not counter:
            const_name = f"{verb.upper()}_{column.name.upper()}{name_suffix.upper()}_QUERY"
        generated.append(
            _InstanceMutation(
                name=f"{verb}_{column.name}{name_suffix}",
                query=(
                    f"UPDATE {table_name} SET {column.name} = {column.name} {operator} ? "
                    f"WHERE {where}{suffix}"
                ),
                column=column,
                fields=fields,
                const_name=const_name,
                counter=counter,
            )
        )
    return generated


def collection_queries(table_name: str, fields: ModelFields) -> list[_InstanceMutation]:
    """Push and pull mutations for every collection column, with and without IF EXISTS."""
    collections = [f for f in fields.db_fields if f.is_collection()]
    return [
        *_column_mutations(table_name, fields, collections, "push", "+", False, False),
        *_column_mutations(table_name, fields, collections, "push", "+", True, False),
        *_column_mutations(table_name, fields, collections, "pull", "-", False, False),
        *_column_mutations(table_name, fields, collections, "pull", "-", True, False),
    ]


def counter_queries(table_name: str, fields: ModelFields) -> list[_InstanceMutation]:
    """Increment and decrement mutations for every counter column."""
    counters = [f for f in fields.db_fields if f.is_counter()]
    return [
        *_column_mutations(table_name, fields, counters, "increment", "+", False, True),
        *_column_mutations(table_name, fields, counters, "decrement", "-", False, True),
    ]