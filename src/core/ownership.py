"""Repository ownership filtering (core domain)."""

from __future__ import annotations

from typing import Iterable, Optional

from core.models import IssueReference, Repository


def owns(reference: IssueReference, repositories: Optional[Iterable[Repository]]) -> bool:
    """Return True if ``reference`` lives in one of ``repositories``.

    ``None`` means ownership filtering is disabled. Comparison is exact and
    case-sensitive.
    """

    if repositories is None:
        return True
    return any(
        repository.owner_login == reference.owner and repository.name == reference.repo
        for repository in repositories
    )
