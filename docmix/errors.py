"""Exception types shared by the composition engine and the config loader."""

from __future__ import annotations


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


__all__ = ["SiteConfigError"]
