"""Back-fill page metadata from the mixin that owns a page.

Pages mounted under a mixin prefix inherit that mixin's title template and
description unless they set their own. A mixin's metadata for a locale is its
base ``title``/``titleTemplate``/``description`` overlaid with the same keys
from its document for that locale; the result is cached on the mixin per
locale, so repeated lookups are cheap and always agree.

Examples
--------
>>> from docmix.config import Mixin, SiteConfig
>>> from docmix.metadata import MixinMetadataPropagator, PageMetadata
>>> site = SiteConfig(
...     title="koishi",
...     locales={"en-US": {}},
...     mixins={
...         "/b": Mixin("/b", title="B", locales={"en-US": {"title": "Plugin B"}}),
...     },
... )
>>> propagator = MixinMetadataPropagator(site)
>>> propagator.resolve("en-US/b/index.md", "en-US")
PageMetadata(title_template='Plugin B', description=None)
>>> propagator.resolve("en-US/b/index.md", "en-US", page=PageMetadata("Own"))
PageMetadata(title_template='Own', description=None)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .config.models import MixinMetadata, SiteConfig
from .merge import deep_merge

if typ.TYPE_CHECKING:
    from .config.models import Mixin

_METADATA_KEYS = {
    "title": "title",
    "titleTemplate": "title_template",
    "description": "description",
}


@dc.dataclass(frozen=True, slots=True)
class PageMetadata:
    """Title template and description of a rendered page."""

    title_template: str | None = None
    description: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return the set fields keyed by their page-data names."""
        payload: dict[str, str] = {}
        if self.title_template:
            payload["titleTemplate"] = self.title_template
        if self.description:
            payload["description"] = self.description
        return payload


def detect_locale(file_path: str, locales: cabc.Iterable[str]) -> str | None:
    """Return the first declared locale whose directory holds ``file_path``.

    Examples
    --------
    >>> detect_locale("de-DE/guide/index.md", ["zh-CN", "de-DE"])
    'de-DE'
    >>> detect_locale("index.md", ["zh-CN"]) is None
    True
    """
    normalized = file_path.lstrip("/")
    for locale in locales:
        if normalized.startswith(locale + "/"):
            return locale
    return None


class MixinMetadataPropagator:
    """Resolve inherited page metadata against a site's mixins."""

    def __init__(self, site: SiteConfig) -> None:
        self.site = site

    def match_mixin(self, path: str, locale: str | None) -> Mixin | None:
        """Return the mixin mounted at the longest prefix of ``path``.

        Prefixes are the keys of ``site.mixins``; the ``prefix`` stored on each
        :class:`Mixin` is not consulted.

        ``path`` is a page path relative to the site root, optionally starting
        with its locale segment, which is stripped before matching. Pages with
        no known locale never match.
        """
        if locale is None:
            return None
        normalized = path.lstrip("/")
        if normalized.startswith(locale + "/"):
            normalized = normalized[len(locale) + 1 :]
        route = "/" + normalized
        best: Mixin | None = None
        best_prefix = ""
        for prefix, mixin in self.site.mixins.items():
            if not route.startswith(prefix):
                continue
            if best is None or len(prefix) > len(best_prefix):
                best, best_prefix = mixin, prefix
        return best

    def mixin_metadata(self, mixin: Mixin, locale: str) -> MixinMetadata:
        """Return ``mixin``'s metadata for ``locale``, computing it at most once."""
        cached = mixin.metadata_cache.get(locale)
        if cached is not None:
            return cached
        with mixin.cache_lock:
            cached = mixin.metadata_cache.get(locale)
            if cached is None:
                cached = _merge_locale_metadata(mixin, locale)
                mixin.metadata_cache[locale] = cached
        return cached

    def resolve(
        self,
        path: str,
        locale: str | None,
        *,
        page: PageMetadata | None = None,
    ) -> PageMetadata:
        """Fill the fields ``page`` leaves unset from the owning mixin.

        Parameters
        ----------
        path : str
            Page file path, for example ``en-US/plugin-b/index.md``.
        locale : str or None
            Locale the page belongs to; ``None`` disables inheritance.
        page : PageMetadata, optional
            Metadata authored on the page itself; always takes precedence.

        Returns
        -------
        PageMetadata
            The page's own values, with gaps filled from the matching mixin
            (its title template, else its title; its description). Pages under
            no mixin get their own metadata back unchanged.
        """
        own = page or PageMetadata()
        mixin = self.match_mixin(path, locale)
        if mixin is None or locale is None:
            return own
        inherited = self.mixin_metadata(mixin, locale)
        return PageMetadata(
            title_template=own.title_template
            or inherited.title_template
            or inherited.title,
            description=own.description or inherited.description,
        )

    def page_data_hook(
        self,
    ) -> cabc.Callable[[cabc.MutableMapping[str, typ.Any]], None]:
        """Return a callback that fills framework page data in place.

        The callback reads ``filePath``, ``titleTemplate``, and
        ``description`` from the page-data mapping, detects the locale from the
        file path, and writes back any inherited values.
        """
        locales = list(self.site.locales)

        def hook(page_data: cabc.MutableMapping[str, typ.Any]) -> None:
            file_path = str(page_data.get("filePath") or "")
            own = PageMetadata(
                title_template=_text_or_none(page_data.get("titleTemplate")),
                description=_text_or_none(page_data.get("description")),
            )
            resolved = self.resolve(
                file_path, detect_locale(file_path, locales), page=own
            )
            for key, value in resolved.as_dict().items():
                page_data[key] = value

        return hook


def resolve_page_metadata(
    path: str,
    locale: str | None,
    mixins: cabc.Mapping[str, Mixin],
    *,
    page: PageMetadata | None = None,
) -> PageMetadata:
    """Resolve ``path``'s metadata against ``mixins`` without a full site."""
    site = SiteConfig(
        title="", locales={locale: None} if locale else {}, mixins=dict(mixins)
    )
    return MixinMetadataPropagator(site).resolve(path, locale, page=page)


def _merge_locale_metadata(mixin: Mixin, locale: str) -> MixinMetadata:
    base = mixin.base_metadata
    base_payload = {
        "title": base.title,
        "titleTemplate": base.title_template,
        "description": base.description,
    }
    document = mixin.locale_document(locale)
    override: dict[str, object] = {}
    if isinstance(document, cabc.Mapping):
        override = {
            key: text
            for key in _METADATA_KEYS
            if (text := _text_or_none(document.get(key))) is not None
        }
    merged = deep_merge(base_payload, override)
    fields = typ.cast("dict[str, str | None]", merged)
    return MixinMetadata(
        **{field: fields.get(key) for key, field in _METADATA_KEYS.items()}
    )


def _text_or_none(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


__all__ = [
    "MixinMetadataPropagator",
    "PageMetadata",
    "detect_locale",
    "resolve_page_metadata",
]
