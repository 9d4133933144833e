"""Builds a ready-to-run engine from real adapters."""

from __future__ import annotations

from typing import Optional

import httpx

from adapters.github_tracker import HTTP_TIMEOUT, GitHubTracker
from adapters.minutes_loader import MinutesLoader
from adapters.repositories import W3cGroupRepositories
from core.config import EngineArgs
from core.engine import LinkingEngine


async def build_engine(
    token: str,
    args: EngineArgs,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LinkingEngine:
    """Load minutes and ownership data and return an engine owning a GitHub client.

    The data client is separate from the GitHub one so the token is never sent
    to the minutes or groups hosts.
    """

    tracker = GitHubTracker(token, transport=transport)
    try:
        async with httpx.AsyncClient(
            timeout=HTTP_TIMEOUT,
            follow_redirects=True,
            transport=transport,
        ) as client:
            return await LinkingEngine.create(
                args,
                tracker=tracker,
                minutes_source=MinutesLoader(client),
                repository_source=W3cGroupRepositories(client),
            )
    except Exception:
        await tracker.aclose()
        raise
