"""Compose one locale document per supported locale.

For every locale the site declares, the composed document is the left-to-right
deep merge of:

1. the platform's default template for that locale;
2. each mixin's document for that locale, relocated from ``/<locale>`` to
   ``/<locale><prefix>``, in mixin declaration order;
3. the site's own document, relocated from the root to ``/<locale>``.

Later layers win on collisions, so the site's own content always has the
final say. Missing templates, mixin locales, or own documents are simply
skipped.

Examples
--------
>>> from docmix.compose import compose
>>> from docmix.config import Mixin, SiteConfig
>>> site = SiteConfig(
...     title="koishi",
...     locales={"en-US": {"nav": [{"text": "Guide", "link": "/guide"}]}},
...     mixins={"/b": Mixin("/b", locales={"en-US": {"title": "B"}})},
... )
>>> composed = compose(site, {"en-US": {"title": "Default"}})
>>> composed["en-US"].document
{'title': 'B', 'nav': [{'text': 'Guide', 'link': '/en-US/guide'}]}
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import logging
import typing as typ

from .errors import SiteConfigError
from .merge import merge_layers
from .transform import PathTransformer, SpliceWarning

if typ.TYPE_CHECKING:
    from .config.models import SiteConfig
    from .tree import ConfigTree

logger = logging.getLogger(__name__)

OWN_SOURCE = "site"


@dc.dataclass(frozen=True, slots=True)
class ComposedLocaleDocument:
    """The merged document for one locale, ready for the theme layer.

    The document is detached from every input tree; treat it as read-only.
    """

    locale: str
    document: dict[str, typ.Any]


@dc.dataclass(frozen=True, slots=True)
class CompositionWarning:
    """A splice warning raised while composing ``locale`` from ``source``."""

    locale: str
    source: str
    warning: SpliceWarning

    def __str__(self) -> str:
        return f"[{self.locale}] {self.source}: {self.warning}"


class LocaleComposer:
    """Fold defaults, mixins, and own content into per-locale documents."""

    def __init__(
        self, fallback_defaults: cabc.Mapping[str, typ.Any] | None = None
    ) -> None:
        """Initialize the composer.

        Parameters
        ----------
        fallback_defaults : Mapping[str, Any] or None, optional
            Locale-default templates keyed by locale code. Locales without a
            template start from an empty document.
        """
        self.fallback_defaults = fallback_defaults or {}
        self.warnings: list[CompositionWarning] = []

    def compose(self, site: SiteConfig) -> dict[str, ComposedLocaleDocument]:
        """Return the composed document for every locale ``site`` declares."""
        return {locale: self.compose_locale(site, locale) for locale in site.locales}

    def compose_locale(self, site: SiteConfig, locale: str) -> ComposedLocaleDocument:
        """Compose the document for a single ``locale``.

        Raises
        ------
        ConfigShapeError
            If any input tree holds a value that is not a scalar, sequence, or
            mapping.
        SiteConfigError
            If the layers merge into something other than a mapping.
        """
        locale_root = f"/{locale}"
        layers: list[ConfigTree] = [self.fallback_defaults.get(locale)]
        for prefix, mixin in site.mixins.items():
            document = mixin.locale_document(locale)
            if document is None:
                continue
            layers.append(
                self._relocate(
                    prefix, document, locale_root, locale=locale, source=prefix
                )
            )
        own = site.locales.get(locale)
        if own is not None:
            layers.append(
                self._relocate(locale_root, own, "", locale=locale, source=OWN_SOURCE)
            )

        result = merge_layers(*layers)
        if result is None:
            result = {}
        if not isinstance(result, cabc.Mapping):
            msg = (
                f"Locale '{locale}' composed to a {type(result).__name__}; "
                "locale documents must be mappings."
            )
            raise SiteConfigError(msg)
        return ComposedLocaleDocument(
            locale=locale, document=copy.deepcopy(dict(result))
        )

    def _relocate(
        self,
        prefix: str,
        document: ConfigTree,
        old_prefix: str,
        *,
        locale: str,
        source: str,
    ) -> ConfigTree:
        transformer = PathTransformer(prefix, old_prefix)
        relocated = transformer.transform(document)
        self.warnings.extend(
            CompositionWarning(locale=locale, source=source, warning=warning)
            for warning in transformer.warnings
        )
        if transformer.warnings:
            logger.debug(
                "%d splice warning(s) relocating %s for %s",
                len(transformer.warnings),
                source,
                locale,
            )
        return relocated


def compose(
    site: SiteConfig, fallback_defaults: cabc.Mapping[str, typ.Any] | None = None
) -> dict[str, ComposedLocaleDocument]:
    """Compose every declared locale of ``site``; see :class:`LocaleComposer`."""
    return LocaleComposer(fallback_defaults).compose(site)


__all__ = [
    "OWN_SOURCE",
    "ComposedLocaleDocument",
    "CompositionWarning",
    "LocaleComposer",
    "compose",
]
