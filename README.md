# scyllamodel

`scyllamodel` builds the CQL statements that go with a ScyllaDB / Cassandra
table. It works from a plain description of the table's columns and keys. It
also compares a model's schema in code with its schema in the database, and it
turns the differences into `CREATE`, `ALTER` and `INDEX` statements.

The package has no runtime dependencies.

## Describing fields — `scyllamodel.fields`

`Field(name, type_name, ignored=False)` describes one column. Ignored fields
belong to the model but are not stored.

- `Field.is_collection()` is true when the outer type is one of `List`, `Set`,
  `Map`, `Vec`, `HashSet`, `BTreeSet`, `HashMap` or `BTreeMap`. An `Option<...>`
  wrapper is looked through first.
- `Field.is_counter()` is true for `Counter`.
- `Field.type_without_option()` and `strip_optional(type_name)` return the
  inner type of `Option<T>`. Any other type comes back unchanged.

`ModelFields.build(fields, partition_keys, clustering_keys,
global_secondary_indexes, local_secondary_indexes)` groups fields by role.
It raises `ValueError` in two cases: a duplicate field name, or a key or index
name that is not a stored field. The result has these members:

- `db_fields` and `non_db_fields`
- `primary_key_fields()`: the partition key followed by the clustering key
- `non_primary_key_db_fields()`

These helpers turn a sequence of fields into statement fragments:

| function              | output for fields `id`, `name` |
|-----------------------|--------------------------------|
| `names`               | `["id", "name"]`               |
| `comma_sep_cols`      | `id, name`                     |
| `insert_bind_markers` | `:id, :name`                   |
| `set_bind_markers`    | `id = :id, name = :name`       |
| `where_placeholders`  | `id = ? AND name = ?`          |
| `where_bind_markers`  | `id = :id AND name = :name`    |

## Model statements — `scyllamodel.queries`

Each function takes a table name and a `ModelFields`:

- `find_by_primary_key_query`
- `find_by_partition_key_query`
- `find_first_by_partition_key_query` (the same, with `LIMIT 1`)
- `insert_query`
- `insert_if_not_exists_query`
- `update_query`, which sets every non-key column and filters on the primary key
- `delete_query`
- `delete_by_partition_key_query`

Three functions build statements around a fragment that you supply:
`find_model_query(table_name, fields, condition)`,
`delete_model_query(table_name, condition)` and
`update_model_query(table_name, fields, assignments)`.

`primary_key_values(fields, instance)` and `partition_key_values(fields, instance)`
read the key attributes of an object and return them as a tuple.

```python
from scyllamodel.fields import Field, ModelFields
from scyllamodel.queries import delete_query

fields = ModelFields.build([Field("id", "Uuid"), Field("name", "Text")], ["id"])
delete_query("users", fields)   # 'DELETE FROM users WHERE id = ?'
```

## Finders — `scyllamodel.finders`

`primary_key_finders(table_name, fields)` walks the primary key prefixes of up
to three columns. It skips any prefix that does not hold the whole partition
key. Each prefix that remains gets three queries:

- `find_by_<a>_and_<b>`. Its `ResultKind` is `ROW` when the prefix is the
  whole primary key, and `STREAM` otherwise.
- `find_first_by_...`, with `LIMIT 1` and kind `ROW`.
- `maybe_find_first_by_...`, with `LIMIT 1` and kind `OPTIONAL_ROW`.

`local_index_finders` builds the same three queries for the partition key plus
each local secondary index. `global_index_finders` builds them for each global
secondary index on its own.

Each result is a `GeneratedQuery`. It has `name`, `query`, `parameters`,
`kind`, `argument_names` and `argument_types`. `bind(*args)` returns
`(query, args)`, and raises `TypeError` when the argument count is wrong. The
names on their own come from `find_by_name`, `find_first_by_name` and
`maybe_find_first_by_name`.

## Mutations — `scyllamodel.mutations`

- `primary_key_deleters(table_name, fields)` builds `delete_by_...` statements.
  It uses the same prefixes as the finders: up to three columns, each holding
  the whole partition key.
- `collection_queries(table_name, fields)` builds statements for every
  collection column. There are four for each column: `push_<col>`,
  `push_<col>_if_exists`, `pull_<col>` and `pull_<col>_if_exists`. Each one
  also carries a constant name, such as `PUSH_TAGS_QUERY`.
- `counter_queries(table_name, fields)` builds `increment_<col>` and
  `decrement_<col>` for every counter column.

A collection or counter statement is bound to an instance with
`bind(instance, value)`. The result is `(query, (value, *primary key values))`.
Counter statements accept 64-bit integers only:

- a non-integer (including `bool`) raises `TypeError`;
- an integer out of range raises `ValueError`.

## Migration data — `scyllamodel.migrate.data`

`SchemaObject` holds one UDT, table or materialized view:

- `fields` as `(name, type, is_static)` tuples
- partition and clustering keys
- global and local indexes as `(index_name, target_column)` pairs
- `table_options`
- `base_table`

Its methods are `contains_field`, `types_by_name` and `create_fields_clause`.

`ModelData(name, ModelType, code_schema, db_schema)` works out the changes
when it is created:

- `new_fields` and `removed_fields`
- `changed_field_types`, compared case-insensitively with spaces ignored
- new and removed global and local secondary indexes

It answers questions with `is_first_migration()`, the `has_...()` predicates,
`partition_key_changed()` and `clustering_key_changed()`.
`construct_index_name(column)` gives `<model>_<column>_idx`.

`ModelType` is one of `UDT`, `TABLE` or `MATERIALIZED_VIEW`.

## Running migration steps — `scyllamodel.migrate.runner`

`ModelRunner(session, data, options=MigrationOptions(), out=None)` builds the
statements for each step and runs them. `session` is any object with an
`execute(query)` method. Progress messages are printed to `out`, or to
standard output when `out` is `None`. Before a statement runs, ANSI escape
sequences are removed from it. If the session raises, the error comes back as
`MigrationError`.

The steps are:

- `run_first_migration` (`CREATE TYPE`, `CREATE TABLE` or `CREATE MATERIALIZED VIEW`)
- `run_field_added_migration`
- `run_field_removed_migration`
- `run_field_type_changed_migration`, which drops the changed columns and
  adds them back
- `run_global_index_added_migration`
- `run_global_index_removed_migration`
- `run_local_index_added_migration`
- `run_local_index_removed_migration`
- `run_table_options_change_migration`

`extract_alter_table_options()` returns the table options without
`COMPACT STORAGE` and `CLUSTERING ORDER BY`, because `ALTER TABLE` does not
accept them. It returns `None` when nothing is left.

`MigrationOptions.verbose` controls whether the table options statement is
printed. `MigrationOptions.drop_and_replace` is held as a setting, but the
runner does not check it itself.

## What the package does not do

- It has no command-line tool.
- It does not connect to a database. You pass in a session object.
- It does not read the live schema, and it does not find models in your code.
  You build both `SchemaObject`s yourself.
- It does not decide which steps a migration needs, in what order, or whether
  a change is allowed. `ModelData` reports key changes and field differences,
  and the caller acts on them.
- It has no class decorator, and it does not turn result rows into objects.