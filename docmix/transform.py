"""Re-anchor locale documents when their content moves under a new URL prefix.

A locale document authored relative to ``old_prefix`` (for example a mixin's
German docs written against ``/de-DE``) is rewritten so that ``prefix`` is
spliced in immediately after ``old_prefix`` in every route-sensitive field.
Only three fields are route-sensitive, and each has its own rewrite rule:

``link``
    Internal links (leading ``/``) are spliced; external URLs pass through.
``activeMatch``
    Route patterns are spliced and anchored with ``^``.
``sidebar``
    A flat sidebar list becomes a single-entry mapping keyed by the relocated
    root; a mapping of route prefixes has every key spliced.

Every other key is recursed into unchanged. Splicing assumes the original
value starts with ``old_prefix`` as a whole path segment (``/de-DE/x``,
``/de-DE#top``, or ``/de-DE(/|$)`` qualify; ``/de-DEX`` does not); when it
does not the splice still happens,
but a :class:`SpliceWarning` is recorded and logged so broken links surface at
build time instead of in production.

Examples
--------
>>> from docmix.transform import transform
>>> transform("/guide", {"link": "/en-US/foo"}, "/en-US")
{'link': '/en-US/guide/foo'}
>>> transform("/en-US", {"activeMatch": "/bar"}, "")
{'activeMatch': '^/en-US/bar'}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from .tree import TreeKind, child_path, tree_kind

if typ.TYPE_CHECKING:
    from .tree import ConfigTree

logger = logging.getLogger(__name__)

_SEGMENT_PUNCTUATION = frozenset("-_.~%")

Rewrite = cabc.Callable[["PathTransformer", typ.Any, str], "ConfigTree"]


@dc.dataclass(frozen=True, slots=True)
class SpliceWarning:
    """A route-sensitive value that did not start with the expected prefix.

    Attributes
    ----------
    field : str
        Name of the rewritten field (``link``, ``activeMatch``, ``sidebar``).
    value : str
        The original, unspliced value (a sidebar route key for ``sidebar``).
    expected_prefix : str
        Prefix the value was assumed to start with.
    path : str
        Dotted location of the field within the transformed document.
    """

    field: str
    value: str
    expected_prefix: str
    path: str = ""

    def __str__(self) -> str:
        location = f" at '{self.path}'" if self.path else ""
        return (
            f"{self.field} value {self.value!r}{location} does not start with "
            f"{self.expected_prefix!r}; the relocated path is likely broken"
        )


@dc.dataclass(frozen=True, slots=True)
class FieldRule:
    """Rewrite applied to a mapping entry whose key is ``key``.

    ``accepts`` restricts the rule to values of a given shape; values it
    rejects fall through to the generic recursive transform.
    """

    key: str
    accepts: cabc.Callable[[object], bool]
    rewrite: Rewrite

    def matches(self, key: object, value: object) -> bool:
        """Return True when this rule handles ``value`` stored under ``key``."""
        return key == self.key and self.accepts(value)


class PathTransformer:
    """Splice ``prefix`` after ``old_prefix`` throughout a locale document.

    The transformer is cheap to build; create one per ``(prefix, old_prefix)``
    pair. Warnings accumulate on :attr:`warnings` across calls to
    :meth:`transform`.
    """

    def __init__(
        self,
        prefix: str,
        old_prefix: str,
        *,
        rules: cabc.Sequence[FieldRule] | None = None,
    ) -> None:
        self.prefix = prefix
        self.old_prefix = old_prefix
        self.rules: tuple[FieldRule, ...] = tuple(
            DEFAULT_RULES if rules is None else rules
        )
        self.warnings: list[SpliceWarning] = []

    @property
    def anchor(self) -> str:
        """Return the relocated root, ``old_prefix + prefix``."""
        return self.old_prefix + self.prefix

    def transform(self, source: ConfigTree, *, path: str = "") -> ConfigTree:
        """Return a relocated copy of ``source``; the input is left untouched."""
        match tree_kind(source, path=path):
            case TreeKind.SCALAR:
                return source
            case TreeKind.SEQUENCE:
                return [
                    self.transform(item, path=child_path(path, index))
                    for index, item in enumerate(source)  # type: ignore[arg-type]
                ]
            case TreeKind.MAPPING:
                return self._transform_mapping(source, path=path)  # type: ignore[arg-type]

    def splice(self, value: str, *, field: str, path: str = "") -> str:
        """Insert ``prefix`` right after the ``old_prefix`` portion of ``value``."""
        if not self._starts_with_old_prefix(value):
            warning = SpliceWarning(
                field=field, value=value, expected_prefix=self.old_prefix, path=path
            )
            self.warnings.append(warning)
            logger.warning("%s", warning)
        return self.anchor + value[len(self.old_prefix) :]

    def _transform_mapping(
        self, source: cabc.Mapping[str, ConfigTree], *, path: str
    ) -> dict[str, ConfigTree]:
        result: dict[str, ConfigTree] = {}
        for key, value in source.items():
            location = child_path(path, key)
            rule = next((r for r in self.rules if r.matches(key, value)), None)
            if rule is None:
                result[key] = self.transform(value, path=location)
            else:
                result[key] = rule.rewrite(self, value, location)
        return result

    def _starts_with_old_prefix(self, value: str) -> bool:
        if not self.old_prefix:
            return True
        if not value.startswith(self.old_prefix):
            return False
        rest = value[len(self.old_prefix) :]
        return not rest or not _continues_segment(rest[0])


def _continues_segment(char: str) -> bool:
    """Return True when ``char`` could extend the last path segment."""
    return char.isalnum() or char in _SEGMENT_PUNCTUATION


def _is_string(value: object) -> bool:
    return isinstance(value, str)


def _is_composite(value: object) -> bool:
    return isinstance(value, list | tuple | cabc.Mapping)


def _rewrite_link(transformer: PathTransformer, value: str, path: str) -> str:
    if not value.startswith("/"):
        return value
    return transformer.splice(value, field="link", path=path)


def _rewrite_active_match(
    transformer: PathTransformer, value: str, path: str
) -> str:
    return "^" + transformer.splice(value, field="activeMatch", path=path)


def _rewrite_sidebar(
    transformer: PathTransformer, value: ConfigTree, path: str
) -> dict[str, ConfigTree]:
    if tree_kind(value, path=path) is TreeKind.SEQUENCE:
        return {transformer.anchor + "/": transformer.transform(value, path=path)}
    mapping = typ.cast("cabc.Mapping[str, ConfigTree]", value)
    result: dict[str, ConfigTree] = {}
    for route, items in mapping.items():
        location = child_path(path, route)
        key = transformer.splice(str(route), field="sidebar", path=location)
        result[key] = transformer.transform(items, path=location)
    return result


DEFAULT_RULES: tuple[FieldRule, ...] = (
    FieldRule("link", _is_string, _rewrite_link),
    FieldRule("activeMatch", _is_string, _rewrite_active_match),
    FieldRule("sidebar", _is_composite, _rewrite_sidebar),
)


def transform(prefix: str, source: ConfigTree, old_prefix: str) -> ConfigTree:
    """Relocate ``source`` from ``old_prefix`` to ``old_prefix + prefix``.

    Parameters
    ----------
    prefix : str
        Segment spliced in after ``old_prefix`` (for example ``/plugin-b``).
    source : ConfigTree
        Locale document authored relative to ``old_prefix``.
    old_prefix : str
        Prefix the authored paths already start with (``""`` for documents
        authored relative to the site root).

    Returns
    -------
    ConfigTree
        The relocated document. Precondition violations are logged as
        warnings; use :class:`PathTransformer` directly to collect them.
    """
    return PathTransformer(prefix, old_prefix).transform(source)


__all__ = [
    "DEFAULT_RULES",
    "FieldRule",
    "PathTransformer",
    "SpliceWarning",
    "transform",
]
