"""GitHub issue reference parsing (core domain)."""

from __future__ import annotations

import re
from typing import Optional

from core.models import IssueReference

# GitHub renders links to issue N as .../issues/N, .../pull/N or .../#/N
ISSUE_URL_RE = re.compile(r"//github\.com/([^/]+)/([^/]+)/(issues|pull|#)/([0-9]+)\Z")


def parse_issue_reference(url: str) -> Optional[IssueReference]:
    """Return the issue referenced by ``url``, or None if it is not an issue link."""

    match = ISSUE_URL_RE.search(url)
    if match is None:
        return None
    number = int(match.group(4))
    if number == 0:
        return None
    return IssueReference(
        source_url=url,
        owner=match.group(1),
        repo=match.group(2),
        id=number,
    )
