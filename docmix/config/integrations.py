"""Resolve optional integration settings and build provenance.

Integrations (the search index and the translation service) are configured
through an explicit :class:`IntegrationSettings` value rather than looked up
from the process environment wherever they happen to be needed. Values are
resolved with the following precedence:

1. Explicit overrides (typically CLI options).
2. The ``env`` mapping handed in by the caller (the CLI passes
   ``os.environ``; tests pass plain dicts).
3. The ``[search]`` and ``[translation]`` tables of an optional TOML file.

Anything left unset disables the corresponding integration.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

import tomlkit

from .helpers import _first_set, _optional_int
from .models import (
    GitRef,
    IntegrationSettings,
    SearchSettings,
    SiteConfigError,
    TranslationSettings,
)

SEARCH_ENV = {
    "host": "MEILISEARCH_HOST",
    "read_key": "MEILISEARCH_READ_KEY",
    "write_key": "MEILISEARCH_WRITE_KEY",
    "index_name": "MEILISEARCH_INDEX",
}
TRANSLATION_ENV = {
    "token": "CROWDIN_TOKEN",
    "project_id": "CROWDIN_PROJECT",
    "branch_id": "CROWDIN_BRANCH",
}


def resolve_integrations(
    *,
    env: cabc.Mapping[str, str] | None = None,
    config_path: Path | None = None,
    search_host: str | None = None,
    search_read_key: str | None = None,
    search_write_key: str | None = None,
    search_index: str | None = None,
    translation_token: str | None = None,
) -> IntegrationSettings:
    """Merge CLI overrides, the given environment, and an optional TOML file.

    Parameters
    ----------
    env : Mapping[str, str] or None, optional
        Environment variables to consult. ``None`` means no environment; the
        process environment is never read implicitly.
    config_path : Path or None, optional
        TOML file holding ``[search]`` and ``[translation]`` tables.
    search_host, search_read_key, search_write_key, search_index : str, optional
        Explicit search overrides.
    translation_token : str, optional
        Explicit translation-service token override.

    Returns
    -------
    IntegrationSettings
        Resolved settings; unset hosts or tokens mean the feature is disabled.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` is given but does not exist.
    SiteConfigError
        If the TOML file cannot be parsed or a numeric identifier is invalid.
    """
    environ = env or {}
    stored = _load_integrations_file(config_path) if config_path else {}
    search_table = _as_dict(stored.get("search"))
    translation_table = _as_dict(stored.get("translation"))

    search = SearchSettings(
        host=_first_set(
            search_host, environ.get(SEARCH_ENV["host"]), search_table.get("host")
        ),
        read_key=_first_set(
            search_read_key,
            environ.get(SEARCH_ENV["read_key"]),
            search_table.get("read_key"),
        ),
        write_key=_first_set(
            search_write_key,
            environ.get(SEARCH_ENV["write_key"]),
            search_table.get("write_key"),
        ),
        index_name=_first_set(
            search_index,
            environ.get(SEARCH_ENV["index_name"]),
            search_table.get("index_name"),
        ),
    )
    translation = TranslationSettings(
        token=_first_set(
            translation_token,
            environ.get(TRANSLATION_ENV["token"]),
            translation_table.get("token"),
        ),
        project_id=_optional_int(
            _first_set(
                environ.get(TRANSLATION_ENV["project_id"]),
                translation_table.get("project_id"),
            ),
            name="translation.project_id",
        ),
        branch_id=_optional_int(
            _first_set(
                environ.get(TRANSLATION_ENV["branch_id"]),
                translation_table.get("branch_id"),
            ),
            name="translation.branch_id",
        ),
    )
    return IntegrationSettings(search=search, translation=translation)


def resolve_git_ref(env: cabc.Mapping[str, str] | None = None) -> GitRef:
    """Return the branch and commit reported by the CI provider, if any.

    Examples
    --------
    >>> resolve_git_ref({"GITHUB_REF_NAME": "dev", "GITHUB_SHA": "abc123"})
    GitRef(branch='dev', sha='abc123')
    >>> resolve_git_ref({})
    GitRef(branch='main', sha='')
    """
    environ = env or {}
    branch = _first_set(
        environ.get("VERCEL_GIT_COMMIT_REF"), environ.get("GITHUB_REF_NAME")
    )
    sha = _first_set(environ.get("VERCEL_GIT_COMMIT_SHA"), environ.get("GITHUB_SHA"))
    return GitRef(branch=branch or "main", sha=sha or "")


def _load_integrations_file(path: Path) -> dict[str, typ.Any]:
    if not path.exists():
        msg = f"Integrations file '{path}' not found."
        raise FileNotFoundError(msg)
    try:
        document = tomlkit.parse(path.read_text(encoding="utf-8"))
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse integrations TOML at {path}"
        raise SiteConfigError(msg) from exc
    return document.unwrap()


def _as_dict(table: typ.Any) -> dict[str, typ.Any]:
    return dict(table) if isinstance(table, cabc.Mapping) else {}


__all__ = [
    "SEARCH_ENV",
    "TRANSLATION_ENV",
    "resolve_git_ref",
    "resolve_integrations",
]
