"""Utility helpers shared by the docmix configuration loader and site builder."""

from __future__ import annotations

import typing as typ

from .._constants import DEFAULT_REPO_OWNER, INDEX_NAME_PREFIXES
from .models import SiteConfigError


def get_repo_name(title: str, *, owner: str = DEFAULT_REPO_OWNER) -> str:
    """Return the ``owner/name`` GitHub repository for a package title.

    Scoped titles (``@scope/name``) already name their repository; anything
    else is assumed to live under ``owner``.

    Examples
    --------
    >>> get_repo_name("@satorijs/satori")
    'satorijs/satori'
    >>> get_repo_name("koishi")
    'koishijs/koishi'
    """
    if title.startswith("@"):
        return title[1:]
    return f"{owner}/{title}"


def get_index_name(title: str) -> str | None:
    """Derive a search index name from a package title, if it has a known prefix.

    Examples
    --------
    >>> get_index_name("koishi-plugin-market")
    'market'
    >>> get_index_name("@koishijs/console")
    'console'
    >>> get_index_name("koishi") is None
    True
    """
    for prefix in INDEX_NAME_PREFIXES:
        if title.startswith(prefix):
            return title[len(prefix) :]
    return None


def build_social_links(
    title: str, overrides: typ.Mapping[str, str] | None = None
) -> list[dict[str, str]]:
    """Return ordered ``{icon, link}`` entries, defaulting to the GitHub repo."""
    links: dict[str, str] = {"github": f"https://github.com/{get_repo_name(title)}"}
    if overrides:
        links.update({str(icon): str(link) for icon, link in overrides.items()})
    return [{"icon": icon, "link": link} for icon, link in links.items()]


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: object | None, *, name: str) -> int | None:
    """Return ``value`` as an int, or None when empty."""
    text = _optional_str(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError as exc:
        msg = f"Expected an integer for '{name}', got {text!r}."
        raise SiteConfigError(msg) from exc


def _first_set(*values: object | None) -> str | None:
    """Return the first value that normalizes to a non-empty string."""
    for value in values:
        text = _optional_str(value)
        if text is not None:
            return text
    return None


__all__ = [
    "_first_set",
    "_optional_int",
    "_optional_str",
    "build_social_links",
    "get_index_name",
    "get_repo_name",
]
