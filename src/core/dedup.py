"""Duplicate comment detection (core domain)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.models import IssueComment, IssueReference
from core.ports import TrackerPort

# Single page only: callers must pick ``since`` recent enough that fewer
# comments than this were posted after it.
COMMENT_PAGE_SIZE = 200


async def find_existing_comment(
    tracker: TrackerPort,
    reference: IssueReference,
    link: str,
    since: datetime,
) -> Optional[IssueComment]:
    """Return the first comment posted since ``since`` whose body contains ``link``."""

    comments = await tracker.list_comments(
        reference.owner,
        reference.repo,
        reference.id,
        since=since,
        per_page=COMMENT_PAGE_SIZE,
    )
    for comment in comments:
        if comment.body and link in comment.body:
            return comment
    return None
