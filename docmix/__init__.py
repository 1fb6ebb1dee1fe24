"""Compose the configuration of multi-project, multi-locale documentation sites.

This package merges a site's own per-locale content, the sub-sites ("mixins")
mounted under URL prefixes, and the locale-default templates into one composed
document per locale, re-anchoring links, route patterns, and sidebar keys as
content moves under its new prefix.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``deep_merge``, ``transform``, ``compose``: the composition primitives.

Examples
--------
>>> from docmix import deep_merge, transform
>>> deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
{'a': 1, 'b': 3, 'c': 4}
>>> transform("/guide", {"link": "/en-US/foo"}, "/en-US")
{'link': '/en-US/guide/foo'}
"""

from __future__ import annotations

import importlib
import typing as typ

from .compose import compose
from .merge import deep_merge
from .transform import transform

if typ.TYPE_CHECKING:
    from .cli import app, main


def __getattr__(name: str) -> typ.Any:
    # The CLI pulls in the YAML and TOML loaders; import it on first use.
    if name in {"app", "main"}:
        return getattr(importlib.import_module(".cli", __name__), name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = ["app", "compose", "deep_merge", "main", "transform"]
