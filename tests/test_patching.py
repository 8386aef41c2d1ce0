"""
Tests for the default structural patch engine.
"""

import pytest

from statehistory.core import AddEdit, PatchError, RemoveEdit, ReplaceEdit, StructuralPatchEngine
from statehistory.core.patching import apply_edits, diff_values, produce_with_edits


def _dump(edits):
    return [edit.model_dump() for edit in edits]


class TestDiff:
    """Tests for diff_values."""

    def test_equal_values_produce_no_edits(self):
        assert diff_values({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}) == []

    def test_dict_keys(self):
        edits = diff_values({"a": 1, "b": 2}, {"a": 1, "c": 3})

        assert _dump(edits) == [
            {"op": "remove", "path": ["b"]},
            {"op": "add", "path": ["c"], "value": 3},
        ]

    def test_nested_replace(self):
        edits = diff_values({"user": {"name": "fred"}}, {"user": {"name": "barney"}})

        assert _dump(edits) == [{"op": "replace", "path": ["user", "name"], "value": "barney"}]

    def test_list_growth(self):
        edits = diff_values([1], [1, 2, 3])

        assert _dump(edits) == [
            {"op": "add", "path": [1], "value": 2},
            {"op": "add", "path": [2], "value": 3},
        ]

    def test_list_shrink_removes_from_the_end(self):
        edits = diff_values([1, 2, 3], [1])

        assert _dump(edits) == [
            {"op": "remove", "path": [2]},
            {"op": "remove", "path": [1]},
        ]

    def test_type_change_replaces(self):
        edits = diff_values({"a": 1}, {"a": [1]})

        assert _dump(edits) == [{"op": "replace", "path": ["a"], "value": [1]}]

    def test_nan_equals_nan(self):
        assert diff_values({"x": float("nan")}, {"x": float("nan")}) == []

    @pytest.mark.parametrize("before, after", [(1, True), (1, 1.0), (0, False)])
    def test_equal_but_differently_typed_scalars(self, before, after):
        assert len(diff_values({"a": before}, {"a": after})) == 1

    def test_root_scalar(self):
        assert _dump(diff_values(1, 2)) == [{"op": "replace", "path": [], "value": 2}]

    def test_path_prefix(self):
        edits = diff_values({"x": 1}, {"x": 2}, path=["outer"])

        assert edits[0].path == ["outer", "x"]


class TestApply:
    """Tests for applying edits."""

    def test_apply_does_not_mutate_input(self):
        state = {"items": [1, 2]}

        result = apply_edits(state, [AddEdit(path=["items", 2], value=3)])

        assert result == {"items": [1, 2, 3]}
        assert state == {"items": [1, 2]}

    def test_add_with_dash_appends(self):
        result = apply_edits([1], [AddEdit(path=["-"], value=2)])

        assert result == [1, 2]

    def test_add_inserts_into_list(self):
        result = apply_edits(["a", "c"], [AddEdit(path=[1], value="b")])

        assert result == ["a", "b", "c"]

    def test_replace_root(self):
        assert apply_edits({"a": 1}, [ReplaceEdit(path=[], value=[1, 2])]) == [1, 2]

    def test_sequential_application(self):
        edits = [
            ReplaceEdit(path=["count"], value=2),
            ReplaceEdit(path=["count"], value=3),
            RemoveEdit(path=["stale"]),
        ]

        assert apply_edits({"count": 1, "stale": True}, edits) == {"count": 3}

    def test_applied_values_are_copied(self):
        edit = AddEdit(path=["items"], value=[1])
        result = apply_edits({}, [edit])

        result["items"].append(2)

        assert edit.value == [1]

    @pytest.mark.parametrize(
        "state, edit, message",
        [
            ({"a": 1}, RemoveEdit(path=["b"]), "not found"),
            ({"a": 1}, ReplaceEdit(path=["b"], value=2), "not found"),
            ({"a": {}}, ReplaceEdit(path=["b", "c"], value=1), "not found"),
            ([1], ReplaceEdit(path=[3], value=1), "out of range"),
            ([1], RemoveEdit(path=["x"]), "must be an integer"),
            ({"a": 1}, ReplaceEdit(path=["a", "b"], value=1), "inside a int"),
            ({"a": 1}, RemoveEdit(path=[]), "root"),
        ],
    )
    def test_invalid_paths_raise(self, state, edit, message):
        with pytest.raises(PatchError, match=message) as exc_info:
            apply_edits(state, [edit])

        assert exc_info.value.edit is edit


class TestProduce:
    """Tests for produce (the diff engine entry point)."""

    def test_produce_returns_forward_and_inverse(self):
        base = {"count": 1, "tags": ["a"]}

        def recipe(draft):
            draft["count"] += 1
            draft["tags"].append("b")

        state, forward, inverse = produce_with_edits(base, recipe)

        assert state == {"count": 2, "tags": ["a", "b"]}
        assert base == {"count": 1, "tags": ["a"]}
        assert apply_edits(base, forward) == state
        assert apply_edits(state, inverse) == base

    def test_recipe_replacement_value(self):
        state, forward, inverse = produce_with_edits({"a": 1}, lambda draft: [1, 2])

        assert state == [1, 2]
        assert _dump(forward) == [{"op": "replace", "path": [], "value": [1, 2]}]
        assert apply_edits(state, inverse) == {"a": 1}

    def test_edits_do_not_alias_state(self):
        engine = StructuralPatchEngine()
        state, forward, _ = engine.produce({}, lambda draft: draft.update(items=[1]))

        state["items"].append(2)

        assert forward[0].value == [1]

    @pytest.mark.parametrize(
        "base, target",
        [
            ({"a": [1, 2, {"b": 3}]}, {"a": [1, {"b": 4}], "c": None}),
            ([{"x": 1}, {"y": 2}], [{"x": 2}]),
            ({"deep": {"er": {"est": 1}}}, {"deep": {"er": {}}}),
            ("text", {"now": "a dict"}),
        ],
    )
    def test_inverse_law(self, base, target):
        state, forward, inverse = produce_with_edits(base, lambda draft: target)

        assert apply_edits(base, forward) == target
        assert apply_edits(state, inverse) == base
