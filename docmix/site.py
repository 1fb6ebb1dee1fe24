"""Assemble the framework-facing configuration of a documentation site.

:class:`SiteBuilder` ties the pieces together: it composes every declared
locale, derives the shared theme configuration (outline depth, fallback-locale
strings, mixin titles, social links, and the optional search and translation
integrations), and exposes the page-data hook that back-fills mixin metadata
while pages render. ``run`` serializes the result to JSON so the static-site
framework can load it.

Typical usage mirrors the ``docmix compose`` command:

>>> from pathlib import Path
>>> from docmix.config import load_locale_defaults, load_site_config
>>> from docmix.site import SiteBuilder
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> builder = SiteBuilder(site, defaults=load_locale_defaults())  # doctest: +SKIP
>>> builder.run(Path(".docmix/config.json"))  # doctest: +SKIP
PosixPath('.docmix/config.json')
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import typing as typ

import msgspec.json

from ._constants import DEFAULT_OUTLINE
from .compose import ComposedLocaleDocument, CompositionWarning, LocaleComposer
from .config.helpers import build_social_links, get_index_name
from .config.models import GitRef, IntegrationSettings, SiteConfigError
from .metadata import MixinMetadataPropagator

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config.models import SiteConfig

PageDataHook = cabc.Callable[[cabc.MutableMapping[str, typ.Any]], None]


@dc.dataclass(slots=True)
class BuiltSite:
    """Everything the rendering framework needs from docmix.

    Attributes
    ----------
    title : str
        Site title, also used to derive repository and index names.
    locales : dict[str, ComposedLocaleDocument]
        Composed document per declared locale.
    theme_config : dict[str, Any]
        Shared theme configuration.
    git : GitRef
        Branch and commit the build came from.
    warnings : list[CompositionWarning]
        Splice warnings raised while composing locales.
    transform_page_data : PageDataHook
        Callback the framework invokes once per rendered page.
    """

    title: str
    locales: dict[str, ComposedLocaleDocument]
    theme_config: dict[str, typ.Any]
    git: GitRef
    warnings: list[CompositionWarning]
    transform_page_data: PageDataHook

    def to_payload(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable view of the build (without the hook)."""
        return {
            "title": self.title,
            "locales": {
                locale: composed.document for locale, composed in self.locales.items()
            },
            "themeConfig": self.theme_config,
            "git": {"branch": self.git.branch, "sha": self.git.sha},
            "warnings": [str(warning) for warning in self.warnings],
        }


class SiteBuilder:
    """Compose locales and derive the theme configuration for one site."""

    def __init__(
        self,
        site: SiteConfig,
        *,
        defaults: cabc.Mapping[str, typ.Any] | None = None,
        integrations: IntegrationSettings | None = None,
        git: GitRef | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        site : SiteConfig
            Parsed site configuration (see :func:`docmix.config.load_site_config`).
        defaults : Mapping[str, Any], optional
            Locale-default templates keyed by locale code; ``None`` means no
            templates.
        integrations : IntegrationSettings, optional
            Optional integration settings; disabled when omitted.
        git : GitRef, optional
            Build provenance; defaults to ``main`` with no commit.
        """
        self.site = site
        self.defaults = defaults or {}
        self.integrations = integrations or IntegrationSettings()
        self.git = git or GitRef()

    def build(self) -> BuiltSite:
        """Compose every locale and assemble the theme configuration."""
        composer = LocaleComposer(self.defaults)
        locales = composer.compose(self.site)
        propagator = MixinMetadataPropagator(self.site)
        return BuiltSite(
            title=self.site.title,
            locales=locales,
            theme_config=self._build_theme_config(),
            git=self.git,
            warnings=list(composer.warnings),
            transform_page_data=propagator.page_data_hook(),
        )

    def run(self, output: Path) -> Path:
        """Build the site and write its JSON payload to ``output``.

        Parent directories are created as needed; the file is UTF-8 JSON with
        a trailing newline.
        """
        built = self.build()
        encoded = msgspec.json.format(
            msgspec.json.encode(built.to_payload()), indent=2
        )
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(encoded + b"\n")
        return output

    def _build_theme_config(self) -> dict[str, typ.Any]:
        site = self.site
        fallback = self.defaults.get(site.fallback_locale) or {}
        theme: dict[str, typ.Any] = {
            "outline": list(DEFAULT_OUTLINE),
            **copy.deepcopy(fallback),
            **copy.deepcopy(site.theme),
        }
        theme["mixins"] = {
            prefix: {"title": mixin.title} if mixin.title else {}
            for prefix, mixin in site.mixins.items()
        }
        social = site.theme.get("socialLinks")
        if social is not None and not isinstance(social, cabc.Mapping):
            msg = "'theme.socialLinks' must map icon names to links."
            raise SiteConfigError(msg)
        theme["socialLinks"] = build_social_links(site.title, social)
        theme["search"] = self._search_options()
        theme["crowdin"] = self._translation_options()
        return theme

    def _search_options(self) -> dict[str, typ.Any] | None:
        search = self.integrations.search
        if not search.enabled:
            return None
        index_name = (
            self.site.theme.get("indexName")
            or search.index_name
            or get_index_name(self.site.title)
        )
        return {
            "host": search.host,
            "readKey": search.read_key,
            "indexName": index_name,
        }

    def _translation_options(self) -> dict[str, typ.Any] | None:
        translation = self.integrations.translation
        if not translation.enabled:
            return None
        return {
            "project": translation.project_id,
            "branch": translation.branch_id,
        }


__all__ = ["BuiltSite", "PageDataHook", "SiteBuilder"]
