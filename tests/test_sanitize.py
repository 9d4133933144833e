from __future__ import annotations

import re

import pytest

from core.sanitize import sanitize_excerpt


def test_mentions_are_wrapped_once() -> None:
    cleaned = sanitize_excerpt("<p>Thanks @alice and @bob_2</p>")
    assert cleaned == "<p>Thanks <code>@alice</code> and <code>@bob_2</code></p>"
    assert sanitize_excerpt(cleaned).count("<code>@alice</code>") == 1


def test_emails_and_code_are_left_alone() -> None:
    cleaned = sanitize_excerpt("<p>mail foo@example.org</p><p><code>@carol</code></p>")
    assert "foo@example.org" in cleaned
    assert "<code>foo" not in cleaned
    assert cleaned.count("@carol") == 1
    assert "<code><code>" not in cleaned


def test_scripts_and_event_handlers_are_removed() -> None:
    cleaned = sanitize_excerpt('<p onclick="steal()">ok</p><script>alert(1)</script>')
    assert cleaned == "<p>ok</p>"


def test_empty_input() -> None:
    assert sanitize_excerpt("") == ""


@pytest.mark.parametrize(
    "html",
    [
        "<p>Hi @alice</p>",
        '<h2 id="x">Topic</h2><p>a &amp; b &lt; c</p>',
        "<p>line<br>break</p><ul><li>@dave</li></ul>",
        '<p><a href="https://github.com/acme/widgets/issues/5">#5</a> by @erin</p>',
        "<div><span>nested <b>bold @frank</b></span></div><style>p {}</style>",
        "<p>@alice@bob</p>",
        "<p>cc @alice@bob@carol, and @dave@</p>",
    ],
)
def test_sanitize_is_idempotent(html: str) -> None:
    once = sanitize_excerpt(html)
    assert sanitize_excerpt(once) == once


@pytest.mark.parametrize("html", ["<p>@alice@bob</p>", "<p><b>x</b>@alice@bob@carol done</p>"])
def test_chained_mentions_leave_nothing_live(html: str) -> None:
    cleaned = sanitize_excerpt(html)
    assert re.search(r"</code>@\w", cleaned) is None
    assert "<code>@alice@bob" in cleaned
