"""Differences between a model's schema in code and in the database."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

INDEX_SUFFIX = "idx"


class MigrationError(Exception):
    """Raised when a migration cannot be carried out."""


class ModelType(enum.Enum):
    UDT = "UDT"
    TABLE = "Table"
    MATERIALIZED_VIEW = "Materialized View"

    def __str__(self) -> str:
        return self.value


@dataclass
class SchemaObject:
    """Schema of one UDT, table or materialized view.

    ``fields`` holds ``(name, type, is_static)`` tuples; index lists hold
    ``(index_name, target_column)`` pairs.
    """

    fields: list[tuple[str, str, bool]] = field(default_factory=list)
    partition_keys: list[str] = field(default_factory=list)
    clustering_keys: list[str] = field(default_factory=list)
    global_secondary_indexes: list[tuple[str, str]] = field(default_factory=list)
    local_secondary_indexes: list[tuple[str, str]] = field(default_factory=list)
    table_options: str | None = None
    base_table: str = ""

    def contains_field(self, name: str) -> bool:
        return any(field_name == name for field_name, _, _ in self.fields)

    def types_by_name(self) -> dict[str, str]:
        return {field_name: field_type for field_name, field_type, _ in self.fields}

    def create_fields_clause(self) -> str:
        """Column definitions for a CREATE statement, one per line."""
        return ",\n".join(
            f"    {name} {type_name}{' STATIC' if is_static else ''}"
            for name, type_name, is_static in self.fields
        )


def _normalize_type(type_name: str) -> str:
    return type_name.lower().replace(" ", "")


def _new_index_targets(
    source: list[tuple[str, str]], other: list[tuple[str, str]]
) -> list[str]:
    targets = {target for _, target in other}
    return [target for _, target in source if target not in targets]


def _removed_index_names(
    source: list[tuple[str, str]], other: list[tuple[str, str]]
) -> list[str]:
    targets = {target for _, target in other}
    return [name for name, target in source if target not in targets]


@dataclass
class ModelData:
    """What changed between the code schema and the database schema of one model."""

    migration_object_name: str
    migration_object_type: ModelType
    current_code_schema: SchemaObject
    current_db_schema: SchemaObject
    new_fields: list[tuple[str, str]] = field(init=False)
    removed_fields: list[str] = field(init=False)
    new_global_secondary_indexes: list[str] = field(init=False)
    new_local_secondary_indexes: list[str] = field(init=False)
    removed_global_secondary_indexes: list[str] = field(init=False)
    removed_local_secondary_indexes: list[str] = field(init=False)
    changed_field_types: list[tuple[str, str, str]] = field(init=False)

    def __post_init__(self) -> None:
        code, db = self.current_code_schema, self.current_db_schema

        self.new_fields = [
            (name, type_name) for name, type_name, _ in code.fields if not db.contains_field(name)
        ]
        self.removed_fields = [name for name, _, _ in db.fields if not code.contains_field(name)]

        self.new_global_secondary_indexes = _new_index_targets(
            code.global_secondary_indexes, db.global_secondary_indexes
        )
        self.removed_global_secondary_indexes = _removed_index_names(
            db.global_secondary_indexes, code.global_secondary_indexes
        )
        self.new_local_secondary_indexes = _new_index_targets(
            code.local_secondary_indexes, db.local_secondary_indexes
        )
        self.removed_local_secondary_indexes = _removed_index_names(
            db.local_secondary_indexes, code.local_secondary_indexes
        )

        db_types = db.types_by_name()
        self.changed_field_types = []
        for name, type_name, _ in code.fields:
            db_type = db_types.get(name)
            if db_type is None:
                continue
            code_type = _normalize_type(type_name)
            old_type = _normalize_type(db_type)
            if code_type != old_type:
                self.changed_field_types.append((name, old_type, code_type))

    def construct_index_name(self, column_name: str) -> str:
        return f"{self.migration_object_name}_{column_name}_{INDEX_SUFFIX}"

    def is_first_migration(self) -> bool:
        return not self.current_db_schema.fields

    def has_new_global_secondary_indexes(self) -> bool:
        return bool(self.new_global_secondary_indexes)

    def has_removed_global_secondary_indexes(self) -> bool:
        return bool(self.removed_global_secondary_indexes)

    def has_new_local_secondary_indexes(self) -> bool:
        return bool(self.new_local_secondary_indexes)

    def has_removed_local_secondary_indexes(self) -> bool:
        return bool(self.removed_local_secondary_indexes)

    def has_new_fields(self) -> bool:
        return bool(self.new_fields)

    def has_removed_fields(self) -> bool:
        return bool(self.removed_fields)

    def has_changed_type_fields(self) -> bool:
        return bool(self.changed_field_types)

    def partition_key_changed(self) -> bool:
        return sorted(self.current_code_schema.partition_keys) != sorted(
            self.current_db_schema.partition_keys
        )

    def clustering_key_changed(self) -> bool:
        return sorted(self.current_code_schema.clustering_keys) != sorted(
            self.current_db_schema.clustering_keys
        )