"""CQL statements that bring one model's database schema in line with its code schema."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO

from scyllamodel.migrate.data import MigrationError, ModelData, ModelType

_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")
_COMPACT_STORAGE_RE = re.compile(r"\bCOMPACT STORAGE\b\s*(AND\s*)?", re.IGNORECASE)
_CLUSTERING_ORDER_RE = re.compile(r"\bCLUSTERING ORDER BY\b[^)]+\)\s*(AND\s*)?", re.IGNORECASE)


class Session(Protocol):
    """Anything that can run a CQL statement."""

    def execute(self, query: str) -> Any: ...


@dataclass(frozen=True)
class MigrationOptions:
    """Switches that change how a migration behaves."""

    drop_and_replace: bool = False
    verbose: bool = False


@dataclass
class ModelRunner:
    """Builds and runs the CQL for each migration step of one model."""

    session: Session
    data: ModelData
    options: MigrationOptions = field(default_factory=MigrationOptions)
    out: TextIO | None = None

    def _say(self, *parts: object) -> None:
        print(*parts, file=self.out if self.out is not None else sys.stdout)

    def _announce(self, message: str) -> None:
        self._say(
            f"\n{message}",
            self.data.migration_object_name,
            str(self.data.migration_object_type),
        )

    def _execute(self, cql: str, show: bool = True) -> None:
        if show:
            self._say("Running CQL:", cql)

        cql = _ANSI_ESCAPE_RE.sub("", cql)
        try:
            self.session.execute(cql)
        except Exception as exc:
            raise MigrationError(f"CQL execution failed! ❌ {exc}") from exc

        if show:
            self._say("CQL executed successfully! ✅\n")

    def _table_options_clause(self) -> str:
        options = self.data.current_code_schema.table_options
        return f"WITH {options}" if options is not None else ""

    def run_first_migration(self) -> None:
        data = self.data
        schema = data.current_code_schema
        self._say(
            "\nDetected first migration for:",
            data.migration_object_name,
            f"{data.migration_object_type}!",
        )

        if data.migration_object_type is ModelType.UDT:
            cql = (
                f"CREATE TYPE IF NOT EXISTS {data.migration_object_name}\n"
                f"(\n{schema.create_fields_clause()}\n);\n"
            )
        elif data.migration_object_type is ModelType.TABLE:
            clustering_keys = ", ".join(schema.clustering_keys)
            clustering_clause = f",{clustering_keys}" if clustering_keys else ""
            cql = (
                f"CREATE TABLE IF NOT EXISTS {data.migration_object_name}\n"
                f"(\n{schema.create_fields_clause()}, \n"
                f"    PRIMARY KEY (({', '.join(schema.partition_keys)}) {clustering_clause})\n"
                f") \n {self._table_options_clause()}"
            )
        else:
            primary_key = [*schema.partition_keys, *schema.clustering_keys]
            where_clause = "WHERE " + " AND ".join(f"{key} IS NOT NULL" for key in primary_key)
            columns = ", ".join(name for name, _, _ in schema.fields)
            select_clause = f"SELECT {columns} \nFROM {schema.base_table}\n{where_clause}"
            primary_key_clause = (
                f"PRIMARY KEY (({', '.join(schema.partition_keys)}), "
                f"{', '.join(schema.clustering_keys)})\n"
            )
            cql = (
                f"CREATE MATERIALIZED VIEW IF NOT EXISTS {data.migration_object_name}\n"
                f"AS {select_clause}\n{primary_key_clause}\n{self._table_options_clause()}"
            )

        self._execute(cql)

    def run_field_added_migration(self) -> None:
        self._announce("Detected new fields in")

        if self.data.migration_object_type is ModelType.TABLE:
            clause = ", ".join(f"{name} {type_name}" for name, type_name in self.data.new_fields)
            self._execute(
                f"ALTER {self.data.migration_object_type} "
                f"{self.data.migration_object_name} ADD ({clause})"
            )
        else:
            for name, type_name in self.data.new_fields:
                self._execute(
                    f"ALTER TYPE {self.data.migration_object_name} ADD {name} {type_name}"
                )

    def run_field_removed_migration(self) -> None:
        self._announce("Detected removed fields in")
        removed = ", ".join(self.data.removed_fields)
        self._execute(
            f"ALTER {self.data.migration_object_type} "
            f"{self.data.migration_object_name} DROP ({removed})"
        )

    def run_field_type_changed_migration(self) -> None:
        self._say("Field Type Change Migration (Drop and replace):")
        changed = self.data.changed_field_types
        object_type = self.data.migration_object_type
        name = self.data.migration_object_name

        dropped = ", ".join(field_name for field_name, _, _ in changed)
        self._execute(f"ALTER {object_type} {name} DROP ({dropped})")

        added = ", ".join(f"{field_name} {new_type}" for field_name, _, new_type in changed)
        self._execute(f"ALTER {object_type} {name} ADD ({added})")

    def run_global_index_added_migration(self) -> None:
        self._announce("Detected new indexes in ")
        for column in self.data.new_global_secondary_indexes:
            index_name = self.data.construct_index_name(column)
            self._execute(
                f"CREATE INDEX IF NOT EXISTS {index_name} "
                f"ON {self.data.migration_object_name} ({column})"
            )

    def run_global_index_removed_migration(self) -> None:
        self._announce("Detected removed indexes for ")
        for index in self.data.removed_global_secondary_indexes:
            self._execute(f"DROP INDEX {index}")

    def run_local_index_added_migration(self) -> None:
        self._announce("Detected new local indexes in ")
        partition_keys = self.data.current_code_schema.partition_keys
        for column in self.data.new_local_secondary_indexes:
            index_name = self.data.construct_index_name(f"{'_'.join(partition_keys)}_{column}")
            self._execute(
                f"CREATE INDEX IF NOT EXISTS {index_name} "
                f"ON {self.data.migration_object_name} (({', '.join(partition_keys)}), {column})"
            )

    def run_local_index_removed_migration(self) -> None:
        self._announce("Detected removed local indexes for ")
        for index in self.data.removed_local_secondary_indexes:
            self._execute(f"DROP INDEX {index}")

    def run_table_options_change_migration(self) -> None:
        if self.data.migration_object_type not in (ModelType.TABLE, ModelType.MATERIALIZED_VIEW):
            return
        options = self.extract_alter_table_options()
        if options is None:
            return
        self._execute(
            f"\n ALTER TABLE {self.data.migration_object_name} WITH {options}",
            show=self.options.verbose,
        )

    def extract_alter_table_options(self) -> str | None:
        """Table options without the clauses that ALTER TABLE does not accept."""
        options = self.data.current_code_schema.table_options
        if options is None:
            return None
        options = options.replace("WITH", "").strip()
        options = _COMPACT_STORAGE_RE.sub("", options)
        options = _CLUSTERING_ORDER_RE.sub("", options)
        return options or None