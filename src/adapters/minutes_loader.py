"""Minutes loading adapter (local file or HTTP)."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from core.errors import MinutesFileError, MinutesHttpError, MinutesNotFound

LOGGER = logging.getLogger(__name__)


class MinutesLoader:
    """Satisfies MinutesSourcePort using a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def load(self, url: str, file: Optional[str] = None) -> str:
        """Return the minutes HTML, from ``file`` when given, else from ``url``."""

        if file:
            try:
                with open(file, "r", encoding="utf-8") as handle:
                    return handle.read()
            except OSError as err:
                raise MinutesFileError(file, str(err)) from err

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as err:
            raise MinutesHttpError(url, str(err)) from err
        if response.status_code == 404:
            raise MinutesNotFound(url)
        if not response.is_success:
            raise MinutesHttpError(url, f"HTTP {response.status_code}")
        LOGGER.debug("Loaded %s bytes of minutes from %s", len(response.content), url)
        return response.text
