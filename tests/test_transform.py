"""Unit tests for relocating locale documents under a new URL prefix.

The transformer rewrites ``link``, ``activeMatch``, and ``sidebar`` fields and
recurses into everything else. These tests cover each rule in isolation, the
generic recursion, and the warnings raised when a value does not start with
the prefix it is assumed to start with.
"""

from __future__ import annotations

import copy
import logging
import typing as typ

import pytest

from docmix.transform import (
    DEFAULT_RULES,
    FieldRule,
    PathTransformer,
    SpliceWarning,
    transform,
)
from docmix.tree import ConfigShapeError

if typ.TYPE_CHECKING:
    from _pytest.logging import LogCaptureFixture


def test_link_is_spliced_after_old_prefix() -> None:
    """Internal links gain the new prefix right after the old one."""
    actual = transform("/guide", {"link": "/en-US/foo"}, "/en-US")
    assert actual == {"link": "/en-US/guide/foo"}, f"unexpected link {actual!r}"


def test_external_link_passes_through() -> None:
    """Links without a leading slash are left alone."""
    source = {"link": "https://github.com/koishijs/koishi"}
    actual = transform("/en-US", source, "")
    assert actual == source, f"expected external link untouched, got {actual!r}"


def test_active_match_is_anchored() -> None:
    """Route patterns are spliced and anchored with a caret."""
    actual = transform("/en-US", {"activeMatch": "/bar"}, "")
    assert actual == {"activeMatch": "^/en-US/bar"}, f"unexpected pattern {actual!r}"


def test_sidebar_list_is_wrapped_under_relocated_root() -> None:
    """A flat sidebar becomes a single-entry mapping; inner links move too."""
    source = {"sidebar": [{"text": "x", "link": "/x"}]}
    actual = transform("/en-US", source, "")
    assert actual == {"sidebar": {"/en-US/": [{"text": "x", "link": "/en-US/x"}]}}, (
        f"unexpected sidebar {actual!r}"
    )


def test_sidebar_mapping_keys_are_spliced() -> None:
    """Route-keyed sidebars have every key relocated and values transformed."""
    source = {
        "sidebar": {
            "/de-DE/guide/": [{"text": "Start", "link": "/de-DE/guide/start"}],
            "/de-DE/api/": [],
        }
    }
    actual = transform("/plugin-b", source, "/de-DE")
    assert actual == {
        "sidebar": {
            "/de-DE/plugin-b/guide/": [
                {"text": "Start", "link": "/de-DE/plugin-b/guide/start"}
            ],
            "/de-DE/plugin-b/api/": [],
        }
    }, f"unexpected sidebar {actual!r}"


def test_scalar_sidebar_passes_through() -> None:
    """Disabling the sidebar with ``false`` survives relocation."""
    actual = transform("/en-US", {"sidebar": False}, "")
    assert actual == {"sidebar": False}, f"expected sidebar to stay False, got {actual!r}"


def test_other_keys_are_recursed_into() -> None:
    """Nested navigation items are rewritten wherever they appear."""
    source = {
        "nav": [
            {
                "text": "Guide",
                "activeMatch": "/guide/",
                "items": [{"text": "Intro", "link": "/guide/intro"}],
            }
        ],
        "title": "Koishi",
    }
    actual = transform("/zh-CN", source, "")
    assert actual == {
        "nav": [
            {
                "text": "Guide",
                "activeMatch": "^/zh-CN/guide/",
                "items": [{"text": "Intro", "link": "/zh-CN/guide/intro"}],
            }
        ],
        "title": "Koishi",
    }, f"unexpected nav {actual!r}"


def test_non_string_link_is_not_rewritten() -> None:
    """Only string values are spliced; other shapes recurse unchanged."""
    actual = transform("/en-US", {"link": {"href": "/x"}, "activeMatch": None}, "")
    assert actual == {"link": {"href": "/x"}, "activeMatch": None}, (
        f"unexpected result {actual!r}"
    )


def test_source_is_not_mutated() -> None:
    """Transforming returns a new tree."""
    source = {"sidebar": [{"link": "/a"}], "nav": [{"link": "/b"}]}
    before = copy.deepcopy(source)
    transform("/en-US", source, "")
    assert source == before, "expected the source document to be unchanged"


def test_splice_violation_is_recorded_and_logged(caplog: LogCaptureFixture) -> None:
    """Values outside the old prefix still splice but raise a warning."""
    transformer = PathTransformer("/plugin-b", "/de-DE")
    with caplog.at_level(logging.WARNING, logger="docmix.transform"):
        actual = transformer.transform({"nav": [{"link": "/guide/intro"}]})

    assert actual == {"nav": [{"link": "/de-DE/plugin-b/intro"}]}, (
        f"expected the splice to run regardless, got {actual!r}"
    )
    assert transformer.warnings == [
        SpliceWarning(
            field="link",
            value="/guide/intro",
            expected_prefix="/de-DE",
            path="nav.0.link",
        )
    ], f"unexpected warnings {transformer.warnings!r}"
    assert "/guide/intro" in caplog.text, "expected the offending value to be logged"


def test_prefix_must_end_on_a_segment_boundary() -> None:
    """``/de-DEX`` does not count as starting with ``/de-DE``."""
    transformer = PathTransformer("/b", "/de-DE")
    transformer.transform({"activeMatch": "/de-DEX/foo", "link": "/de-DE"})
    assert [w.value for w in transformer.warnings] == ["/de-DEX/foo"], (
        f"expected only the mismatched pattern to warn, got {transformer.warnings!r}"
    )


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ({"link": "/de-DE#top"}, {"link": "/de-DE/b#top"}),
        ({"link": "/de-DE?tab=api"}, {"link": "/de-DE/b?tab=api"}),
        ({"activeMatch": "/de-DE(/|$)"}, {"activeMatch": "^/de-DE/b(/|$)"}),
        ({"activeMatch": "/de-DE$"}, {"activeMatch": "^/de-DE/b$"}),
    ],
)
def test_fragment_query_and_pattern_suffixes_do_not_warn(
    source: dict[str, str], expected: dict[str, str]
) -> None:
    """A suffix that cannot continue the locale segment still counts as a match."""
    transformer = PathTransformer("/b", "/de-DE")
    actual = transformer.transform(source)
    assert actual == expected, f"unexpected splice result {actual!r}"
    assert transformer.warnings == [], (
        f"expected no warnings for {source!r}, got {transformer.warnings!r}"
    )


@pytest.mark.parametrize("value", ["/de-DE-old/x", "/de-DE.md", "/de-DE_v2"])
def test_segment_characters_after_prefix_still_warn(value: str) -> None:
    """Letters, digits, and segment punctuation extend the segment."""
    transformer = PathTransformer("/b", "/de-DE")
    transformer.transform({"link": value})
    assert [w.value for w in transformer.warnings] == [value], (
        f"expected a warning for {value!r}, got {transformer.warnings!r}"
    )


def test_empty_old_prefix_never_warns() -> None:
    """Root-relative documents always satisfy the precondition."""
    transformer = PathTransformer("/en-US", "")
    transformer.transform({"sidebar": {"/guide/": []}, "link": "/x"})
    assert transformer.warnings == [], "expected no warnings for an empty old prefix"


def test_sidebar_key_violation_warns_with_field_name() -> None:
    """Sidebar keys are checked like links."""
    transformer = PathTransformer("/b", "/en-US")
    transformer.transform({"sidebar": {"/guide/": []}})
    assert [w.field for w in transformer.warnings] == ["sidebar"], (
        f"expected a sidebar warning, got {transformer.warnings!r}"
    )


def test_custom_rules_replace_the_defaults() -> None:
    """Callers can supply their own ordered rule table."""
    rules = [
        *DEFAULT_RULES,
        FieldRule(
            "href",
            lambda value: isinstance(value, str),
            lambda transformer, value, path: transformer.splice(
                value, field="href", path=path
            ),
        ),
    ]
    transformer = PathTransformer("/en-US", "", rules=rules)
    actual = transformer.transform({"href": "/x", "link": "/y"})
    assert actual == {"href": "/en-US/x", "link": "/en-US/y"}, (
        f"expected both rules to apply, got {actual!r}"
    )


def test_malformed_value_is_a_config_error() -> None:
    """Unsupported node types abort with their location."""
    with pytest.raises(ConfigShapeError, match="nav.0"):
        transform("/en-US", {"nav": [object()]}, "")
