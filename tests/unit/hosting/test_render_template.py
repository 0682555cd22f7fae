"""Tests for title/body template rendering."""

import pytest

from cherrypicker.hosting.templates import render_template

VALUES = {
    "old_title": "Fix crash",
    "old_pull_request_id": 42,
    "target_branch": "release/1.1.0",
}


def test_empty_template_returns_fallback():
    assert render_template("", "Fix crash", **VALUES) == "Fix crash"


def test_empty_template_keeps_none_fallback():
    assert render_template("", None, **VALUES) is None


@pytest.mark.parametrize("template,expected", [
    ("{old_title}", "Fix crash"),
    ("[{target_branch}] {old_title}", "[release/1.1.0] Fix crash"),
    ("Cherry-pick of #{old_pull_request_id}", "Cherry-pick of #42"),
    ("{old_title} / {old_title}", "Fix crash / Fix crash"),
    ("No placeholders", "No placeholders"),
])
def test_placeholders_are_replaced(template, expected):
    assert render_template(template, "unused", **VALUES) == expected


def test_unknown_braces_are_left_alone():
    assert render_template(
        "{old_title} {unknown} {}", "unused", **VALUES
    ) == "Fix crash {unknown} {}"


def test_placeholder_without_value_is_left_alone():
    assert render_template(
        "{old_title} on {target_branch}", "unused", old_title="Fix"
    ) == "Fix on {target_branch}"
