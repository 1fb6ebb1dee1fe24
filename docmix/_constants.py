"""Common literal values used across docmix.

These constants keep locale codes, default owners, and output locations
centralized so the loader, the site builder, and tests can import the same
values without drifting. Intended for internal use within the docmix package.

Examples
--------
>>> from docmix import _constants
>>> _constants.DEFAULT_FALLBACK_LOCALE
'zh-CN'
>>> "en-US" in _constants.BUILTIN_LOCALES
True
"""

from pathlib import Path

DEFAULT_FALLBACK_LOCALE = "zh-CN"
BUILTIN_LOCALES = ("de-DE", "en-US", "fr-FR", "ja-JP", "ru-RU", "zh-CN")
LOCALE_DEFAULTS_DIR = Path(__file__).parent / "locales"

DEFAULT_OUTLINE = (2, 3)
DEFAULT_REPO_OWNER = "koishijs"
INDEX_NAME_PREFIXES = ("@koishijs/", "koishi-plugin-")

DEFAULT_OUTPUT = Path(".docmix/config.json")
