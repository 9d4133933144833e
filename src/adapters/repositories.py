"""Repository ownership lists published by W3C groups.

Each group (``wg/wot``, ``cg/credentials``...) publishes a repositories.json
file: a JSON array of ``{"name": ..., "owner": {"login": ...}}`` records.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.errors import OwnershipListError
from core.models import Repository

LOGGER = logging.getLogger(__name__)

GROUP_REPOSITORIES_URL = "https://w3c.github.io/groups/{group}/repositories.json"


def parse_repositories(payload: Any, source: str) -> list[Repository]:
    """Validate a decoded repositories.json document."""

    if not isinstance(payload, list):
        raise OwnershipListError(f"Expected a JSON array in {source}")
    repositories: list[Repository] = []
    for entry in payload:
        try:
            name = entry["name"]
            login = entry["owner"]["login"]
        except (KeyError, TypeError) as err:
            raise OwnershipListError(f"Malformed repository entry in {source}: {entry!r}") from err
        if not isinstance(name, str) or not isinstance(login, str) or not name or not login:
            raise OwnershipListError(f"Malformed repository entry in {source}: {entry!r}")
        repositories.append(Repository(owner_login=login, name=name))
    return repositories


class W3cGroupRepositories:
    """Satisfies RepositorySourcePort by fetching each group's repositories.json."""

    def __init__(self, client: httpx.AsyncClient, url_template: str = GROUP_REPOSITORIES_URL) -> None:
        self._client = client
        self._url_template = url_template

    async def repositories_for(self, group: str) -> list[Repository]:
        url = self._url_template.format(group=group)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as err:
            raise OwnershipListError(f"Could not fetch repositories of {group} <{url}>: {err}") from err
        except ValueError as err:
            raise OwnershipListError(f"Invalid JSON in repositories of {group} <{url}>") from err
        return parse_repositories(payload, url)
