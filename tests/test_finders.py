import pytest

from scyllamodel.fields import Field, ModelFields
from scyllamodel.finders import (
    GeneratedQuery,
    ResultKind,
    find_by_name,
    find_first_by_name,
    global_index_finders,
    local_index_finders,
    maybe_find_first_by_name,
    primary_key_finders,
)
from scyllamodel.queries import (
    find_by_partition_key_query,
    find_by_primary_key_query,
    find_first_by_partition_key_query,
)


@pytest.fixture
def post_fields():
    return ModelFields.build(
        [
            Field("date", "Date"),
            Field("category_id", "Uuid"),
            Field("title", "Option<Text>"),
        ],
        partition_keys=["date"],
        clustering_keys=["category_id", "title"],
        global_secondary_indexes=["category_id"],
        local_secondary_indexes=["title"],
    )


def by_name(queries):
    return {q.name: q for q in queries}


def test_names_join_fields(post_fields):
    pk = post_fields.primary_key_fields()[:2]
    assert find_by_name(pk) == "find_by_date_and_category_id"
    assert find_first_by_name(pk) == "find_first_by_date_and_category_id"
    assert maybe_find_first_by_name(pk) == "maybe_find_first_by_date_and_category_id"


def test_single_field_name_matches_sequence(post_fields):
    date = post_fields.partition_key_fields[0]
    assert find_by_name(date) == find_by_name([date])


def test_primary_key_finder_names(post_fields):
    found = [q.name for q in primary_key_finders("posts", post_fields)]
    assert found == [
        "find_by_date",
        "find_first_by_date",
        "maybe_find_first_by_date",
        "find_by_date_and_category_id",
        "find_first_by_date_and_category_id",
        "maybe_find_first_by_date_and_category_id",
        "find_by_date_and_category_id_and_title",
        "find_first_by_date_and_category_id_and_title",
        "maybe_find_first_by_date_and_category_id_and_title",
    ]


def test_primary_key_finder_queries_match_consts(post_fields):
    found = by_name(primary_key_finders("posts", post_fields))
    assert found["find_by_date"].query == find_by_partition_key_query("posts", post_fields)
    assert found["find_first_by_date"].query == find_first_by_partition_key_query("posts", post_fields)
    full = found["find_by_date_and_category_id_and_title"]
    assert full.query == find_by_primary_key_query("posts", post_fields)
    assert full.kind is ResultKind.ROW


def test_partial_primary_key_is_stream(post_fields):
    found = by_name(primary_key_finders("posts", post_fields))
    assert found["find_by_date"].kind is ResultKind.STREAM
    assert found["find_by_date_and_category_id"].kind is ResultKind.STREAM
    assert found["maybe_find_first_by_date"].kind is ResultKind.OPTIONAL_ROW
    assert found["find_first_by_date_and_category_id"].query.endswith(" LIMIT 1")


def test_incomplete_partition_key_skipped():
    fields = ModelFields.build(
        [Field("a", "Int"), Field("b", "Int"), Field("c", "Int")],
        partition_keys=["a", "b"],
        clustering_keys=["c"],
    )
    found = [q.name for q in primary_key_finders("t", fields)]
    assert "find_by_a" not in found
    assert found[0] == "find_by_a_and_b"


def test_at_most_three_fields():
    fields = ModelFields.build(
        [Field(n, "Int") for n in "abcde"],
        partition_keys=["a"],
        clustering_keys=["b", "c", "d", "e"],
    )
    queries = primary_key_finders("t", fields)
    assert len(queries) == 9
    assert max(len(q.parameters) for q in queries) == 3
    assert all(q.kind is not ResultKind.ROW for q in queries if q.name.startswith("find_by_"))


def test_local_index_finders(post_fields):
    found = by_name(local_index_finders("posts", post_fields))
    assert set(found) == {
        "find_by_date_and_title",
        "find_first_by_date_and_title",
        "maybe_find_first_by_date_and_title",
    }
    finder = found["find_by_date_and_title"]
    assert finder.kind is ResultKind.STREAM
    assert finder.argument_names == ["date", "title"]
    assert finder.argument_types == ["Date", "Text"]
    assert finder.query.startswith(find_by_partition_key_query("posts", post_fields))


def test_global_index_finders(post_fields):
    found = by_name(global_index_finders("posts", post_fields))
    assert set(found) == {
        "find_by_category_id",
        "find_first_by_category_id",
        "maybe_find_first_by_category_id",
    }
    assert found["find_by_category_id"].query.endswith("WHERE category_id = ?")
    assert found["find_first_by_category_id"].query == found["find_by_category_id"].query + " LIMIT 1"


def test_bind_returns_query_and_values(post_fields):
    finder = by_name(local_index_finders("posts", post_fields))["find_by_date_and_title"]
    assert finder.bind("d", "t") == (finder.query, ("d", "t"))


def test_bind_rejects_wrong_count(post_fields):
    finder = by_name(global_index_finders("posts", post_fields))["find_by_category_id"]
    with pytest.raises(TypeError):
        finder.bind()
    with pytest.raises(TypeError):
        finder.bind(1, 2)


def test_generated_query_is_immutable(post_fields):
    finder = primary_key_finders("posts", post_fields)[0]
    assert isinstance(finder, GeneratedQuery)
    with pytest.raises(AttributeError):
        finder.name = "other"  # type: ignore[misc]
    assert finder.name == "find_by_date"