"""Typed dataclasses describing a multi-locale documentation site."""

from __future__ import annotations

import dataclasses as dc
import threading
import typing as typ

from .._constants import DEFAULT_FALLBACK_LOCALE
from ..errors import SiteConfigError


@dc.dataclass(frozen=True, slots=True)
class MixinMetadata:
    """Display metadata a mixin lends to the pages mounted under its prefix."""

    title: str | None = None
    title_template: str | None = None
    description: str | None = None


@dc.dataclass(slots=True)
class Mixin:
    """A sub-site embedded in the parent site under ``prefix``.

    ``metadata_cache`` holds the per-locale metadata resolved by
    :class:`docmix.metadata.MixinMetadataPropagator`; it is filled lazily and
    never invalidated.
    """

    prefix: str
    title: str | None = None
    locales: dict[str, typ.Any] = dc.field(default_factory=dict)
    title_template: str | None = None
    description: str | None = None
    metadata_cache: dict[str, MixinMetadata] = dc.field(
        default_factory=dict, repr=False, compare=False
    )
    cache_lock: threading.Lock = dc.field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def locale_document(self, locale: str) -> typ.Any:
        """Return the authored document for ``locale``, or None."""
        return self.locales.get(locale)

    @property
    def base_metadata(self) -> MixinMetadata:
        """Return the locale-independent metadata declared on the mixin."""
        return MixinMetadata(
            title=self.title,
            title_template=self.title_template,
            description=self.description,
        )


@dc.dataclass(slots=True)
class SearchSettings:
    """Connection details for the optional search index integration."""

    host: str | None = None
    read_key: str | None = None
    write_key: str | None = None
    index_name: str | None = None

    @property
    def enabled(self) -> bool:
        """Search is enabled only when a host is configured."""
        return bool(self.host)


@dc.dataclass(slots=True)
class TranslationSettings:
    """Credentials for the optional translation-service integration."""

    token: str | None = None
    project_id: int | None = None
    branch_id: int | None = None

    @property
    def enabled(self) -> bool:
        """Translation sync is enabled only when a token is configured."""
        return bool(self.token)


@dc.dataclass(slots=True)
class IntegrationSettings:
    """Optional integrations; anything unset is treated as disabled."""

    search: SearchSettings = dc.field(default_factory=SearchSettings)
    translation: TranslationSettings = dc.field(default_factory=TranslationSettings)


@dc.dataclass(frozen=True, slots=True)
class GitRef:
    """Branch and commit the site is being built from."""

    branch: str = "main"
    sha: str = ""


@dc.dataclass(slots=True)
class SiteConfig:
    """Root configuration: own locale documents, mixins, and shared theme.

    ``locales`` maps locale codes to the site's authored documents in
    declaration order; a locale mapped to ``None`` is supported but has no
    authored content of its own. ``mixins`` maps URL prefixes to
    :class:`Mixin` instances, also in declaration order.
    """

    title: str
    locales: dict[str, typ.Any]
    mixins: dict[str, Mixin] = dc.field(default_factory=dict)
    fallback_locale: str = DEFAULT_FALLBACK_LOCALE
    theme: dict[str, typ.Any] = dc.field(default_factory=dict)

    def get_mixin(self, prefix: str) -> Mixin:
        """Return the mixin mounted at ``prefix``."""
        try:
            return self.mixins[prefix]
        except KeyError as exc:
            available = ", ".join(self.mixins) or "none"
            msg = f"Unknown mixin prefix '{prefix}'. Known prefixes: {available}"
            raise KeyError(msg) from exc


__all__ = [
    "GitRef",
    "IntegrationSettings",
    "Mixin",
    "MixinMetadata",
    "SearchSettings",
    "SiteConfig",
    "SiteConfigError",
    "TranslationSettings",
]
