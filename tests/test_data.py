import pytest

from scyllamodel.migrate.data import (
    INDEX_SUFFIX,
    MigrationError,
    ModelData,
    ModelType,
    SchemaObject,
)


def make(code, db, model_type=ModelType.TABLE):
    return ModelData("users", model_type, code, db)


@pytest.mark.parametrize(
    ("model_type", "text"),
    [
        (ModelType.UDT, "UDT"),
        (ModelType.TABLE, "Table"),
        (ModelType.MATERIALIZED_VIEW, "Materialized View"),
    ],
)
def test_model_type_display(model_type, text):
    data = make(SchemaObject(), SchemaObject(), model_type)
    assert str(data.migration_object_type) == text


def test_first_migration_when_db_empty():
    code = SchemaObject(fields=[("id", "uuid", False)], partition_keys=["id"])
    data = make(code, SchemaObject())
    assert data.is_first_migration()
    assert data.new_fields == [("id", "uuid")]
    assert not data.has_removed_fields()


def test_not_first_migration_when_db_has_fields():
    schema = SchemaObject(fields=[("id", "uuid", False)], partition_keys=["id"])
    data = make(schema, schema)
    assert not data.is_first_migration()
    assert not data.has_new_fields()
    assert not data.has_changed_type_fields()


def test_new_and_removed_fields():
    code = SchemaObject(fields=[("id", "uuid", False), ("email", "text", False)])
    db = SchemaObject(fields=[("id", "uuid", False), ("age", "int", False)])
    data = make(code, db)
    assert data.new_fields == [("email", "text")]
    assert data.removed_fields == ["age"]
    assert data.has_new_fields() and data.has_removed_fields()


def test_type_change_ignores_case_and_spaces():
    code = SchemaObject(fields=[("tags", "Frozen<List<Text>>", False)])
    db = SchemaObject(fields=[("tags", "frozen<list< text >>", False)])
    assert not make(code, db).has_changed_type_fields()


def test_type_change_detected_with_old_and_new():
    code = SchemaObject(fields=[("score", "BigInt", False)])
    db = SchemaObject(fields=[("score", "int", False)])
    data = make(code, db)
    assert data.has_changed_type_fields()
    assert data.changed_field_types == [("score", "int", "bigint")]


def test_global_index_diff_by_target():
    code = SchemaObject(global_secondary_indexes=[("x", "email"), ("y", "name")])
    db = SchemaObject(global_secondary_indexes=[("users_email_idx", "email"), ("old_idx", "age")])
    data = make(code, db)
    assert data.new_global_secondary_indexes == ["name"]
    assert data.removed_global_secondary_indexes == ["old_idx"]
    assert data.has_new_global_secondary_indexes()
    assert data.has_removed_global_secondary_indexes()


def test_local_index_diff_by_target():
    code = SchemaObject(local_secondary_indexes=[("a", "title")])
    db = SchemaObject(local_secondary_indexes=[("old_lsi", "body")])
    data = make(code, db)
    assert data.new_local_secondary_indexes == ["title"]
    assert data.removed_local_secondary_indexes == ["old_lsi"]


def test_no_index_changes_when_targets_match():
    code = SchemaObject(global_secondary_indexes=[("a", "email")], local_secondary_indexes=[("b", "t")])
    db = SchemaObject(global_secondary_indexes=[("c", "email")], local_secondary_indexes=[("d", "t")])
    data = make(code, db)
    assert not data.has_new_global_secondary_indexes()
    assert not data.has_removed_global_secondary_indexes()
    assert not data.has_new_local_secondary_indexes()
    assert not data.has_removed_local_secondary_indexes()


def test_key_change_is_order_insensitive():
    code = SchemaObject(partition_keys=["a", "b"], clustering_keys=["c", "d"])
    db = SchemaObject(partition_keys=["b", "a"], clustering_keys=["d", "c"])
    data = make(code, db)
    assert not data.partition_key_changed()
    assert not data.clustering_key_changed()


def test_key_change_detected():
    code = SchemaObject(partition_keys=["a"], clustering_keys=["c"])
    db = SchemaObject(partition_keys=["b"], clustering_keys=[])
    data = make(code, db)
    assert data.partition_key_changed()
    assert data.clustering_key_changed()


def test_construct_index_name():
    data = make(SchemaObject(), SchemaObject())
    name = data.construct_index_name("email")
    assert name == "users_email_idx"
    assert name.endswith(INDEX_SUFFIX)


def test_schema_object_helpers():
    schema = SchemaObject(fields=[("id", "uuid", False), ("n", "int", True)])
    assert schema.contains_field("n")
    assert not schema.contains_field("missing")
    assert schema.types_by_name() == {"id": "uuid", "n": "int"}
    clause = schema.create_fields_clause()
    assert clause.splitlines()[0].strip() == "id uuid,"
    assert "STATIC" in clause.splitlines()[1]


def test_migration_error_carries_message():
    err = MigrationError("boom")
    assert str(err) == "boom"
    assert isinstance(err, Exception)