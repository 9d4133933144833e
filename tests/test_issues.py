from __future__ import annotations

import pytest

from core.issues import parse_issue_reference


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://github.com/acme/widgets/issues/42", ("acme", "widgets", 42)),
        ("https://github.com/acme/widgets/pull/7", ("acme", "widgets", 7)),
        ("https://github.com/acme/widgets/#/13", ("acme", "widgets", 13)),
        ("http://github.com/w3c/wot-thing-description/issues/1234", ("w3c", "wot-thing-description", 1234)),
    ],
)
def test_parses_all_issue_spellings(url: str, expected: tuple[str, str, int]) -> None:
    reference = parse_issue_reference(url)
    assert reference is not None
    assert (reference.owner, reference.repo, reference.id) == expected
    assert reference.source_url == url


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "/relative/path",
        "https://github.com/acme/widgets",
        "https://github.com/acme/widgets/issues",
        "https://github.com/acme/widgets/issues/42#issuecomment-1",
        "https://github.com/acme/widgets/Issues/42",
        "https://github.com/acme/widgets/commit/42",
        "https://github.com/acme/widgets/issues/0",
        "https://gitlab.com/acme/widgets/issues/42",
        "https://github.com/acme/widgets/issues/5\n",
    ],
)
def test_rejects_non_issue_links(url: str) -> None:
    assert parse_issue_reference(url) is None


def test_reference_display() -> None:
    reference = parse_issue_reference("https://github.com/acme/widgets/pull/7")
    assert str(reference) == "acme/widgets#7"
