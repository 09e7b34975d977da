import pytest

from vmprovider.storage.query_builder import (
    InvalidColumnError,
    ProjectionMap,
    StrictQueryBuilder,
    concatenate_clauses,
    validate_selection,
)


def _builder(strict: bool = True) -> StrictQueryBuilder:
    pm = ProjectionMap.Builder().add("_id").add("name").add("state").build()
    return StrictQueryBuilder("things", pm, strict=strict)


@pytest.mark.parametrize(
    "clauses, expected",
    [
        ((None, None), None),
        (("", None), None),
        (("a = 1", None), "(a = 1)"),
        ((None, "_id=5"), "(_id=5)"),
        (("a = 1", "_id=5"), "(a = 1) AND (_id=5)"),
        (("a = 1 OR b = 2", "_id=5", "c = 3"), "(a = 1 OR b = 2) AND (_id=5) AND (c = 3)"),
    ],
)
def test_concatenate_clauses(clauses, expected):
    assert concatenate_clauses(*clauses) == expected


def test_projection_map_preserves_order_and_membership():
    pm = ProjectionMap(["b", "a", "c"])
    assert list(pm) == ["b", "a", "c"]
    assert len(pm) == 3
    assert "a" in pm
    assert "z" not in pm
    assert pm[0] == "b"


def test_projection_map_rejects_duplicates():
    with pytest.raises(ValueError):
        ProjectionMap.Builder().add("a").add("a").build()


def test_default_projection_selects_every_mapped_column():
    sql = _builder().build_query(None, None)
    assert sql == "SELECT _id, name, state FROM things"


def test_build_query_with_selection_and_sort():
    sql = _builder().build_query(
        ["name"], "(state = ?) AND (_id=5)", sort_order="name COLLATE NOCASE DESC, _id"
    )
    assert sql == (
        "SELECT name FROM things WHERE ((state = ?) AND (_id=5)) "
        "ORDER BY name COLLATE NOCASE DESC, _id"
    )


def test_strict_builder_rejects_unknown_projection_column():
    with pytest.raises(InvalidColumnError) as excinfo:
        _builder().build_query(["_id", "password"])
    assert excinfo.value.column == "password"
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.parametrize(
    "sort_order",
    ["password", "name DESC, password ASC", "(SELECT 1)", "name; DROP TABLE things", "1"],
)
def test_strict_builder_rejects_bad_sort_order(sort_order):
    with pytest.raises(InvalidColumnError):
        _builder().build_query(None, sort_order=sort_order)


@pytest.mark.parametrize("selection", ["1) OR (1", "name = ')' OR (1"])
def test_strict_builder_rejects_unbalanced_selection(selection):
    with pytest.raises(ValueError):
        _builder().build_query(None, selection)


def test_balanced_parentheses_inside_literals_are_ignored():
    sql = _builder().build_query(None, "name = '(('")
    assert sql.endswith("WHERE (name = '((')")


def test_lenient_builder_passes_unmapped_columns():
    sql = _builder(strict=False).build_query(["rowid"], sort_order="rowid")
    assert sql == "SELECT rowid FROM things ORDER BY rowid"


def test_limit_is_appended():
    assert _builder().build_query(["_id"], limit=3).endswith("LIMIT 3")


@pytest.mark.parametrize("selection", [None, "", "a = 1", "(a = 1) OR (b = ')')"])
def test_validate_selection_accepts_self_contained_clauses(selection):
    validate_selection(selection)


def test_validate_selection_runs_before_combining():
    raw = "1) OR (1"
    combined = concatenate_clauses(raw, "_id=2")
    assert combined == "(1) OR (1) AND (_id=2)"
    validate_selection(combined)
    with pytest.raises(ValueError):
        validate_selection(raw)
