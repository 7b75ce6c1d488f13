"""Finder queries generated from a model's primary key and secondary indexes."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from scyllamodel.fields import (
    Field,
    ModelFields,
    comma_sep_cols,
    names,
    where_placeholders,
)

MAX_FIND_BY_FIELDS = 3


class ResultKind(enum.Enum):
    """What executing a finder yields."""

    STREAM = "stream"
    ROW = "row"
    OPTIONAL_ROW = "optional_row"


@dataclass(frozen=True)
class GeneratedQuery:
    """A named query with the fields its arguments are bound to."""

    name: str
    query: str
    parameters: tuple[Field, ...]
    kind: ResultKind

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


def _as_fields(fields: Field | Sequence[Field]) -> list[Field]:
    if isinstance(fields, Field):
        return [fields]
    return list(fields)


def _joined(fields: Field | Sequence[Field]) -> str:
    return "_and_".join(names(_as_fields(fields)))


def find_by_name(fields: Field | Sequence[Field]) -> str:
    return f"find_by_{_joined(fields)}"


def find_first_by_name(fields: Field | Sequence[Field]) -> str:
    return f"find_first_by_{_joined(fields)}"


def maybe_find_first_by_name(fields: Field | Sequence[Field]) -> str:
    return f"maybe_find_first_by_{_joined(fields)}"


def _finder_set(
    fields: Sequence[Field], query: str, find_kind: ResultKind
) -> list[GeneratedQuery]:
    params = tuple(fields)
    first_query = f"{query} LIMIT 1"
    return [
        GeneratedQuery(find_by_name(params), query, params, find_kind),
        GeneratedQuery(find_first_by_name(params), first_query, params, ResultKind.ROW),
        GeneratedQuery(
            maybe_find_first_by_name(params), first_query, params, ResultKind.OPTIONAL_ROW
        ),
    ]


def primary_key_finders(table_name: str, fields: ModelFields) -> list[GeneratedQuery]:
    """Finders for each primary key prefix of up to three fields that holds the whole partition key."""
    columns = comma_sep_cols(fields.db_fields)
    primary_key = fields.primary_key_fields()
    partition_len = len(fields.partition_key_fields)
    generated: list[GeneratedQuery] = []

    for size in range(1, min(len(primary_key), MAX_FIND_BY_FIELDS) + 1):
        current = primary_key[:size]
        if size < partition_len:
            continue
        query = f"SELECT {columns} FROM {table_name} WHERE {where_placeholders(current)}"
        kind = ResultKind.ROW if size == len(primary_key) else ResultKind.STREAM
        generated.extend(_finder_set(current, query, kind))

    return generated


def local_index_finders(table_name: str, fields: ModelFields) -> list[GeneratedQuery]:
    """Finders on the partition key plus each local secondary index."""
    columns = comma_sep_cols(fields.db_fields)
    generated: list[GeneratedQuery] = []

    for lsi in fields.local_secondary_index_fields:
        current = (*fields.partition_key_fields, lsi)
        query = f"SELECT {columns} FROM {table_name} WHERE {where_placeholders(current)}"
        generated.extend(_finder_set(current, query, ResultKind.STREAM))

    return generated


def global_index_finders(table_name: str, fields: ModelFields) -> list[GeneratedQuery]:
    """Finders on each global secondary index alone."""
    columns = comma_sep_cols(fields.db_fields)
    generated: list[GeneratedQuery] = []

    for gsi in fields.global_secondary_index_fields:
        query = f"SELECT {columns} FROM {table_name} WHERE {gsi.name} = ?"
        generated.extend(_finder_set((gsi,), query, ResultKind.STREAM))

    return generated