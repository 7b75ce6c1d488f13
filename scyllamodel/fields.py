"""Model field descriptions and the CQL fragments built from them."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

_OPTION_RE = re.compile(r"^\s*(?:(?:std\s*::\s*)?option\s*::\s*)?Option\s*<(?P<inner>.*)>\s*$", re.DOTALL)

_COLLECTION_TYPES = frozenset(
    {"List", "Set", "Map", "Vec", "HashSet", "BTreeSet", "HashMap", "BTreeMap"}
)
_COUNTER_TYPES = frozenset({"Counter"})


def strip_optional(type_name: str) -> str:
    """Return the inner type of ``Option<T>``, or the type unchanged."""
    match = _OPTION_RE.match(type_name)
    if match is None:
        return type_name.strip()
    return match.group("inner").strip()


def _outer_type(type_name: str) -> str:
    base = strip_optional(type_name)
    head = base.split("<", 1)[0].strip()
    return head.rsplit("::", 1)[-1].strip()


@dataclass(frozen=True)
class Field:
    """A single model field: its column name, its declared type and whether it is stored."""

    name: str
    type_name: str
    ignored: bool = False

    def is_collection(self) -> bool:
        return _outer_type(self.type_name) in _COLLECTION_TYPES

    def is_counter(self) -> bool:
        return _outer_type(self.type_name) in _COUNTER_TYPES

    def type_without_option(self) -> str:
        return strip_optional(self.type_name)


@dataclass(frozen=True)
class ModelFields:
    """All fields of a model, grouped by the role they play in the schema."""

    all_fields: tuple[Field, ...]
    partition_key_fields: tuple[Field, ...] = ()
    clustering_key_fields: tuple[Field, ...] = ()
    global_secondary_index_fields: tuple[Field, ...] = ()
    local_secondary_index_fields: tuple[Field, ...] = field(default=())

    @classmethod
    def build(
        cls,
        fields: Iterable[Field],
        partition_keys: Iterable[str],
        clustering_keys: Iterable[str] = (),
        global_secondary_indexes: Iterable[str] = (),
        local_secondary_indexes: Iterable[str] = (),
    ) -> ModelFields:
        """Group ``fields`` by the given column names; unknown names raise ``ValueError``."""
        all_fields = tuple(fields)
        by_name: dict[str, Field] = {}
        for f in all_fields:
            if f.name in by_name:
                raise ValueError(f"duplicate field {f.name!r}")
            by_name[f.name] = f

        def resolve(names: Iterable[str], role: str) -> tuple[Field, ...]:
            resolved = []
            for name in names:
                found = by_name.get(name)
                if found is None or found.ignored:
                    raise ValueError(f"{role} {name!r} is not a database field")
                resolved.append(found)
            return tuple(resolved)

        return cls(
            all_fields=all_fields,
            partition_key_fields=resolve(partition_keys, "partition key"),
            clustering_key_fields=resolve(clustering_keys, "clustering key"),
            global_secondary_index_fields=resolve(global_secondary_indexes, "global secondary index"),
            local_secondary_index_fields=resolve(local_secondary_indexes, "local secondary index"),
        )

    @property
    def db_fields(self) -> tuple[Field, ...]:
        return tuple(f for f in self.all_fields if not f.ignored)

    @property
    def non_db_fields(self) -> tuple[Field, ...]:
        return tuple(f for f in self.all_fields if f.ignored)

    def primary_key_fields(self) -> tuple[Field, ...]:
        """Partition key fields followed by clustering key fields."""
        return self.partition_key_fields + self.clustering_key_fields

    def non_primary_key_db_fields(self) -> tuple[Field, ...]:
        primary = {f.name for f in self.primary_key_fields()}
        return tuple(f for f in self.db_fields if f.name not in primary)


def names(fields: Sequence[Field]) -> list[str]:
    return [f.name for f in fields]


def comma_sep_cols(fields: Sequence[Field]) -> str:
    return ", ".join(names(fields))


def insert_bind_markers(fields: Sequence[Field]) -> str:
    return ", ".join(f":{f.name}" for f in fields)


def set_bind_markers(fields: Sequence[Field]) -> str:
    return ", ".join(f"{f.name} = :{f.name}" for f in fields)


def where_placeholders(fields: Sequence[Field]) -> str:
    return " AND ".join(f"{f.name} = ?" for f in fields)


def where_bind_markers(fields: Sequence[Field]) -> str:
    return " AND ".join(f"{f.name} = :{f.name}" for f in fields)