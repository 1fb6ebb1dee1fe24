"""Shape classification for JSON-like configuration trees.

A configuration tree is one of three things: a scalar (string, number,
boolean, date, or ``None``), an ordered sequence of trees, or a mapping from string
keys to trees. Everything that walks a tree (:mod:`docmix.merge`,
:mod:`docmix.transform`) classifies values through :func:`tree_kind` so the
three cases are matched exhaustively and any foreign value is reported as a
configuration error rather than silently carried along.

Examples
--------
>>> from docmix.tree import TreeKind, tree_kind
>>> tree_kind({"link": "/guide"}) is TreeKind.MAPPING
True
>>> tree_kind(["a", "b"]) is TreeKind.SEQUENCE
True
>>> tree_kind(None) is TreeKind.SCALAR
True
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import enum
import typing as typ

from .errors import SiteConfigError

# YAML timestamps load as dates; they are leaf values like any other.
Scalar: typ.TypeAlias = str | int | float | bool | dt.date | dt.datetime | None
ConfigTree: typ.TypeAlias = (
    Scalar | list["ConfigTree"] | tuple["ConfigTree", ...] | dict[str, "ConfigTree"]
)


class ConfigShapeError(SiteConfigError):
    """Raised when a tree holds a value that is not a scalar, sequence, or mapping."""


class TreeKind(enum.Enum):
    """The three shapes a configuration tree node can take."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def tree_kind(value: object, *, path: str = "") -> TreeKind:
    """Classify ``value`` as a scalar, sequence, or mapping node.

    Parameters
    ----------
    value : object
        Node to classify.
    path : str, optional
        Dotted key path used in the error message when the node is malformed.

    Returns
    -------
    TreeKind
        The node's shape.

    Raises
    ------
    ConfigShapeError
        If ``value`` is none of the supported shapes (for example a ``set`` or
        an arbitrary object).
    """
    match value:
        case None | bool() | int() | float() | str() | dt.date():
            return TreeKind.SCALAR
        case list() | tuple():
            return TreeKind.SEQUENCE
        case cabc.Mapping():
            return TreeKind.MAPPING
        case _:
            location = f" at '{path}'" if path else ""
            msg = (
                f"Unsupported configuration value of type "
                f"{type(value).__name__!r}{location}; expected a scalar, "
                "sequence, or mapping."
            )
            raise ConfigShapeError(msg)


def is_absent(value: object) -> bool:
    """Return True when ``value`` stands for a missing tree."""
    return value is None


def child_path(path: str, key: object) -> str:
    """Return the dotted path of ``key`` beneath ``path``."""
    return f"{path}.{key}" if path else str(key)


def entries(value: ConfigTree, *, path: str = "") -> list[tuple[str, ConfigTree]]:
    """Return ``(key, child)`` pairs of a composite node.

    Sequences are addressed by their stringified indices so they can be merged
    positionally alongside mappings.
    """
    match tree_kind(value, path=path):
        case TreeKind.MAPPING:
            mapping = typ.cast("cabc.Mapping[object, ConfigTree]", value)
            return [(str(key), child) for key, child in mapping.items()]
        case TreeKind.SEQUENCE:
            sequence = typ.cast("cabc.Sequence[ConfigTree]", value)
            return [(str(index), child) for index, child in enumerate(sequence)]
        case TreeKind.SCALAR:
            return []


__all__ = [
    "ConfigShapeError",
    "ConfigTree",
    "Scalar",
    "TreeKind",
    "child_path",
    "entries",
    "is_absent",
    "tree_kind",
]
