"""Load site configuration YAML and locale-default templates."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .._constants import DEFAULT_FALLBACK_LOCALE, LOCALE_DEFAULTS_DIR
from .helpers import _first_set, _optional_str
from .models import Mixin, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML file describing a site, its locales, and its mixins.

    Parameters
    ----------
    path : Path
        Filesystem path to the site configuration (for example ``site.yaml``).
        Locale documents given as strings are read from YAML files resolved
        relative to this file's directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with authored locale documents and mixins in
        declaration order.

    Raises
    ------
    FileNotFoundError
        If the configuration file, or a locale file it references, does not
        exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required sections are missing or a mixin is malformed (empty
        prefix, prefix without a leading ``/``, non-mapping payload).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docmix.config import load_site_config
    >>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
    >>> list(site.mixins)  # doctest: +SKIP
    ['/plugin-b']
    """
    loaded = _load_yaml(path)
    if not isinstance(loaded, cabc.Mapping):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent

    title = _optional_str(raw.get("title"))
    if title is None:
        msg = f"Site configuration '{path}' is missing 'title'."
        raise SiteConfigError(msg)

    locales_raw = raw.get("locales")
    if not isinstance(locales_raw, cabc.Mapping) or not locales_raw:
        msg = "No locales defined in site configuration."
        raise SiteConfigError(msg)
    locales = {
        str(locale): _resolve_document(document, base_dir, name=f"locales.{locale}")
        for locale, document in locales_raw.items()
    }

    mixins_raw = raw.get("mixins") or {}
    if not isinstance(mixins_raw, cabc.Mapping):
        msg = "'mixins' must map URL prefixes to mixin definitions."
        raise SiteConfigError(msg)
    mixins: dict[str, Mixin] = {}
    for prefix, payload in mixins_raw.items():
        mixin = _build_mixin(str(prefix), payload, base_dir)
        mixins[mixin.prefix] = mixin

    theme = raw.get("theme") or {}
    if not isinstance(theme, cabc.Mapping):
        msg = "'theme' must be a mapping."
        raise SiteConfigError(msg)

    return SiteConfig(
        title=title,
        locales=locales,
        mixins=mixins,
        fallback_locale=_optional_str(raw.get("fallback_locale"))
        or DEFAULT_FALLBACK_LOCALE,
        theme=dict(theme),
    )


def load_locale_defaults(directory: Path | None = None) -> dict[str, typ.Any]:
    """Load ``<locale>.yaml`` templates from ``directory``.

    When ``directory`` is ``None`` the templates bundled with docmix are used.
    Empty files load as empty documents.
    """
    root = directory or LOCALE_DEFAULTS_DIR
    if not root.is_dir():
        msg = f"Locale defaults directory '{root}' not found."
        raise FileNotFoundError(msg)
    defaults: dict[str, typ.Any] = {}
    for template in sorted(root.glob("*.yaml")):
        document = _load_yaml(template)
        if document is not None and not isinstance(document, cabc.Mapping):
            msg = f"Locale template '{template}' must contain a mapping."
            raise SiteConfigError(msg)
        defaults[template.stem] = dict(document or {})
    return defaults


def _load_yaml(path: Path) -> typ.Any:
    """Parse a YAML 1.2 file with the safe loader."""
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        return loader.load(handle)


def _resolve_document(value: object, base_dir: Path, *, name: str) -> typ.Any:
    """Return an inline locale document or load one referenced by path."""
    match value:
        case None:
            return None
        case str() as reference:
            return _load_yaml(base_dir / reference)
        case cabc.Mapping():
            return dict(value)
        case _:
            msg = f"'{name}' must be a mapping or a path to a YAML file."
            raise SiteConfigError(msg)


def _build_mixin(prefix: str, payload: object, base_dir: Path) -> Mixin:
    """Build a Mixin from its YAML entry, validating the mount prefix."""
    if not prefix:
        msg = "Mixin prefixes must be non-empty."
        raise SiteConfigError(msg)
    if not prefix.startswith("/"):
        msg = f"Mixin prefix '{prefix}' must start with '/'."
        raise SiteConfigError(msg)
    if not isinstance(payload, cabc.Mapping):
        msg = f"Mixin '{prefix}' must be a mapping."
        raise SiteConfigError(msg)

    locales_raw = payload.get("locales") or {}
    if not isinstance(locales_raw, cabc.Mapping):
        msg = f"Mixin '{prefix}' locales must be a mapping."
        raise SiteConfigError(msg)
    locales = {
        str(locale): _resolve_document(
            document, base_dir, name=f"mixins.{prefix}.locales.{locale}"
        )
        for locale, document in locales_raw.items()
    }
    return Mixin(
        prefix=prefix,
        title=_optional_str(payload.get("title")),
        locales=locales,
        title_template=_first_set(
            payload.get("title_template"), payload.get("titleTemplate")
        ),
        description=_optional_str(payload.get("description")),
    )


__all__ = ["load_locale_defaults", "load_site_config"]
