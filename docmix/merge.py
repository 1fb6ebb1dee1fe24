"""Structural deep merge for configuration trees.

Merging is right-biased: scalars on the right replace whatever sits on the
left, missing values on either side defer to the other, and composite values
are merged key by key. Sequences are merged positionally, as if they were
mappings keyed by index, never concatenated.

Examples
--------
>>> from docmix.merge import deep_merge
>>> deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
{'a': 1, 'b': 3, 'c': 4}
>>> deep_merge({"a": 1}, "s")
's'
>>> deep_merge(None, {"a": 1})
{'a': 1}
"""

from __future__ import annotations

import typing as typ

from .tree import TreeKind, child_path, entries, is_absent, tree_kind

if typ.TYPE_CHECKING:
    from .tree import ConfigTree


def deep_merge(a: ConfigTree, b: ConfigTree, *, path: str = "") -> ConfigTree:
    """Merge ``b`` over ``a`` and return the combined tree.

    Parameters
    ----------
    a : ConfigTree
        Lower-precedence tree.
    b : ConfigTree
        Higher-precedence tree.
    path : str, optional
        Dotted key path of the current node, used in shape errors.

    Returns
    -------
    ConfigTree
        ``b`` when ``a`` is absent, ``a`` when ``b`` is absent, ``b`` when it
        is a scalar, otherwise a new ``dict`` holding the union of both key
        sets with each value merged recursively. Neither input is mutated.

    Raises
    ------
    ConfigShapeError
        If either tree contains a value that is not a scalar, sequence, or
        mapping.
    """
    if is_absent(a):
        return b
    if is_absent(b):
        return a
    if tree_kind(b, path=path) is TreeKind.SCALAR:
        return b

    left = dict(entries(a, path=path))
    right = dict(entries(b, path=path))
    result: dict[str, ConfigTree] = {}
    for key in {**left, **right}:
        result[key] = deep_merge(
            left.get(key), right.get(key), path=child_path(path, key)
        )
    return result


def merge_layers(*layers: ConfigTree) -> ConfigTree:
    """Fold ``layers`` left to right; later layers take precedence."""
    result: ConfigTree = None
    for layer in layers:
        result = deep_merge(result, layer)
    return result


__all__ = ["deep_merge", "merge_layers"]
