"""Unit tests for the structural deep merge.

These tests pin down the merge rules the locale composer relies on: absent
values defer to the other side, scalars on the right win outright, mappings
merge key by key, and sequences merge positionally rather than concatenating.

Usage
-----
Run ``pytest tests/test_merge.py -v``. No fixtures are required.
"""

from __future__ import annotations

import copy

import pytest

from docmix.merge import deep_merge, merge_layers
from docmix.tree import ConfigShapeError


@pytest.mark.parametrize(
    "tree",
    [{"a": 1}, ["x", "y"], "scalar", 0, False],
)
def test_absent_side_is_identity(tree: object) -> None:
    """Merging with None on either side returns the other tree."""
    assert deep_merge(None, tree) == tree, "expected merge(None, x) == x"
    assert deep_merge(tree, None) == tree, "expected merge(x, None) == x"


def test_scalar_on_right_overrides_mapping() -> None:
    """A scalar on the right replaces a composite on the left outright."""
    actual = deep_merge({"a": 1}, "s")
    assert actual == "s", f"expected right-hand scalar to win, got {actual!r}"


def test_falsy_scalar_still_overrides() -> None:
    """Only None counts as absent; False and 0 are real overrides."""
    assert deep_merge({"flag": True}, {"flag": False}) == {"flag": False}, (
        "expected False to override True"
    )
    assert deep_merge({"depth": 3}, {"depth": 0}) == {"depth": 0}, (
        "expected 0 to override 3"
    )


def test_mappings_merge_as_deep_union() -> None:
    """Mappings merge into the union of keys with right-biased values."""
    actual = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
    assert actual == {"a": 1, "b": 3, "c": 4}, f"unexpected merge result {actual!r}"


def test_nested_mappings_merge_recursively() -> None:
    """Nested mappings keep keys from both sides."""
    left = {"docFooter": {"prev": "Previous", "next": "Next"}}
    right = {"docFooter": {"next": "Onwards"}}
    actual = deep_merge(left, right)
    assert actual == {"docFooter": {"prev": "Previous", "next": "Onwards"}}, (
        f"expected nested keys to survive, got {actual!r}"
    )


def test_sequences_merge_positionally() -> None:
    """Sequences merge index by index into an index-keyed mapping."""
    actual = deep_merge(["a", "b", "c"], ["z"])
    assert actual == {"0": "z", "1": "b", "2": "c"}, (
        f"expected positional merge instead of concatenation, got {actual!r}"
    )


def test_none_element_in_sequence_defers_to_left() -> None:
    """A None element on the right keeps the left element at that index."""
    actual = deep_merge(["keep"], [None, "added"])
    assert actual == {"0": "keep", "1": "added"}, f"unexpected result {actual!r}"


def test_inputs_are_not_mutated() -> None:
    """Merging builds new containers and leaves both inputs untouched."""
    left = {"nav": {"guide": {"text": "Guide"}}, "title": "L"}
    right = {"nav": {"guide": {"link": "/guide"}}, "title": "R"}
    left_before = copy.deepcopy(left)
    right_before = copy.deepcopy(right)

    deep_merge(left, right)

    assert left == left_before, "expected left input to be unchanged"
    assert right == right_before, "expected right input to be unchanged"


def test_merge_layers_folds_left_to_right() -> None:
    """Later layers take precedence over earlier ones."""
    actual = merge_layers({"title": "D"}, {"title": "M"}, None, {"title": "O"})
    assert actual == {"title": "O"}, f"expected last layer to win, got {actual!r}"


def test_merge_order_matters() -> None:
    """Swapping operands changes which scalar wins."""
    assert deep_merge({"a": 1}, {"a": 2}) != deep_merge({"a": 2}, {"a": 1}), (
        "expected merge to be order-sensitive"
    )


def test_malformed_value_reports_its_location() -> None:
    """Values that are not scalars, sequences, or mappings are config errors."""
    with pytest.raises(ConfigShapeError, match="'nav'"):
        deep_merge({"nav": {"a", "b"}}, {"nav": {"a": 1}})
