"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the issue tracker and the data sources
so that the core can be reused with different backends and faked in tests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from core.models import IssueComment, Repository


class TrackerPort(Protocol):
    """Issue tracker operations required by the engine."""

    async def list_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        since: datetime,
        per_page: int,
    ) -> list[IssueComment]:
        ...

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> IssueComment:
        ...

    async def aclose(self) -> None:
        ...


class MinutesSourcePort(Protocol):
    """Loads the raw HTML of the minutes."""

    async def load(self, url: str, file: Optional[str]) -> str:
        ...


class RepositorySourcePort(Protocol):
    """Loads the repositories owned by a group (e.g. ``wg/wot``)."""

    async def repositories_for(self, group: str) -> list[Repository]:
        ...
