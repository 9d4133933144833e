"""GitHub REST API adapter.

Implements the core TrackerPort with an ``httpx.AsyncClient``. Any transport
or HTTP status failure surfaces as ``TrackerError`` so the engine can fold it
into a per-issue outcome.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from core.errors import TrackerError
from core.models import IssueComment

LOGGER = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
HTTP_TIMEOUT = 30.0
USER_AGENT = "minutes2gh"


def _format_since(since: datetime) -> str:
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return since.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _comment_from_json(payload: Any) -> IssueComment:
    if not isinstance(payload, dict) or "html_url" not in payload:
        raise TrackerError(f"Unexpected comment payload: {payload!r}")
    return IssueComment(html_url=payload["html_url"], body=payload.get("body"))


class GitHubTracker:
    """Thin GitHub issues client that satisfies the TrackerPort contract."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": USER_AGENT,
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=HTTP_TIMEOUT,
            transport=transport,
        )

    @staticmethod
    def _comments_path(owner: str, repo: str, number: int) -> str:
        return f"/repos/{owner}/{repo}/issues/{number}/comments"

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        LOGGER.debug("GitHub %s %s", method, path)
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as err:
            raise TrackerError(f"GitHub API error on {method} {path}: {err}") from err
        except ValueError as err:
            raise TrackerError(f"Invalid JSON from GitHub on {method} {path}") from err

    async def list_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        since: datetime,
        per_page: int,
    ) -> list[IssueComment]:
        """Return the first page of comments created or updated since ``since``."""

        payload = await self._request(
            "GET",
            self._comments_path(owner, repo, number),
            params={"since": _format_since(since), "per_page": per_page},
        )
        if not isinstance(payload, list):
            raise TrackerError(f"Unexpected comment list for {owner}/{repo}#{number}")
        return [_comment_from_json(item) for item in payload]

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> IssueComment:
        payload = await self._request(
            "POST",
            self._comments_path(owner, repo, number),
            json={"body": body},
        )
        return _comment_from_json(payload)

    async def aclose(self) -> None:
        await self._client.aclose()
