"""Cyclopts CLI entrypoint for composing multi-locale documentation configs.

The ``docmix`` console script composes a site's locale documents with its
mixins and the locale-default templates, writes the framework-facing JSON, and
can resolve the inherited metadata of a single page for debugging. Options can
also be supplied through ``DOCMIX_*`` environment variables, which keeps CI
invocations short.

Examples
--------
Compose the site described by ``site.yaml``:

>>> from docmix.cli import main
>>> main()  # doctest: +SKIP

Resolve the metadata a mixin page inherits:

>>> from docmix.cli import app
>>> app(["resolve", "en-US/plugin-b/index.md", "--config", "site.yaml"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json
from cyclopts import App, Parameter

from ._constants import DEFAULT_OUTPUT
from .config import (
    load_locale_defaults,
    load_site_config,
    resolve_git_ref,
    resolve_integrations,
)
from .metadata import MixinMetadataPropagator, PageMetadata, detect_locale
from .site import SiteBuilder

DEFAULT_CONFIG = Path("site.yaml")

app = App(name="docmix", config=cyclopts.config.Env("DOCMIX_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Compose locale documents and write the site configuration.")
def compose(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the site config YAML")
    ] = DEFAULT_CONFIG,
    defaults: typ.Annotated[
        Path | None,
        Parameter(help="Directory of <locale>.yaml default templates"),
    ] = None,
    output: typ.Annotated[
        Path, Parameter(help="Where to write the composed JSON")
    ] = DEFAULT_OUTPUT,
    integrations: typ.Annotated[
        Path | None,
        Parameter(help="Optional TOML file with [search]/[translation] tables"),
    ] = None,
    search_host: typ.Annotated[
        str | None, Parameter(help="Search host (falls back to MEILISEARCH_HOST)")
    ] = None,
    search_index: typ.Annotated[
        str | None, Parameter(help="Override the search index name")
    ] = None,
) -> None:
    """Compose every declared locale and write the framework-facing JSON.

    Parameters
    ----------
    config : Path, optional
        Path to the site configuration YAML (``site.yaml`` by default).
    defaults : Path or None, optional
        Directory of locale-default templates; the bundled templates are used
        when ``None``.
    output : Path, optional
        Destination of the composed JSON payload.
    integrations : Path or None, optional
        TOML file holding integration settings.
    search_host : str or None, optional
        Search host override; the search integration stays disabled when no
        host is found anywhere.
    search_index : str or None, optional
        Search index name override.

    Returns
    -------
    None
        Writes the payload and prints the written path. Splice warnings are
        logged and recorded in the payload's ``warnings`` list.
    """
    site = load_site_config(config)
    settings = resolve_integrations(
        env=os.environ,
        config_path=integrations,
        search_host=search_host,
        search_index=search_index,
    )
    builder = SiteBuilder(
        site,
        defaults=load_locale_defaults(defaults),
        integrations=settings,
        git=resolve_git_ref(os.environ),
    )
    written = builder.run(output)
    print(f"wrote {_format_path(written)}")


@app.command(help="Show the metadata a page inherits from its mixin.")
def resolve(
    path: str,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the site config YAML")
    ] = DEFAULT_CONFIG,
    locale: typ.Annotated[
        str | None, Parameter(help="Locale of the page (detected when omitted)")
    ] = None,
    title_template: typ.Annotated[
        str | None, Parameter(help="Title template authored on the page")
    ] = None,
    description: typ.Annotated[
        str | None, Parameter(help="Description authored on the page")
    ] = None,
) -> None:
    """Print the resolved ``titleTemplate``/``description`` of a page as JSON."""
    site = load_site_config(config)
    page_locale = locale or detect_locale(path, site.locales)
    resolved = MixinMetadataPropagator(site).resolve(
        path,
        page_locale,
        page=PageMetadata(title_template=title_template, description=description),
    )
    print(msgspec.json.encode(resolved.as_dict()).decode("utf-8"))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docmix`` command.

    Splice warnings raised while composing are logged to stderr.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
