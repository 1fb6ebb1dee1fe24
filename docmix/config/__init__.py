"""Load and validate the configuration of a multi-locale documentation site.

This subpackage parses the site's YAML file (authored locale documents and the
mixins mounted under URL prefixes), loads the locale-default templates, and
resolves the optional integration settings. It produces typed dataclasses
(:class:`SiteConfig`, :class:`Mixin`, :class:`IntegrationSettings`) that the
composer and the site builder consume.

Examples
--------
>>> from pathlib import Path
>>> from docmix.config import load_locale_defaults, load_site_config
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> defaults = load_locale_defaults()
>>> sorted(defaults)[:2]
['de-DE', 'en-US']
"""

from .integrations import resolve_git_ref, resolve_integrations
from .loader import load_locale_defaults, load_site_config
from .models import (
    GitRef,
    IntegrationSettings,
    Mixin,
    MixinMetadata,
    SearchSettings,
    SiteConfig,
    SiteConfigError,
    TranslationSettings,
)

__all__ = [
    "GitRef",
    "IntegrationSettings",
    "Mixin",
    "MixinMetadata",
    "SearchSettings",
    "SiteConfig",
    "SiteConfigError",
    "TranslationSettings",
    "load_locale_defaults",
    "load_site_config",
    "resolve_git_ref",
    "resolve_integrations",
]
