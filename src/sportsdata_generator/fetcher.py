"""Schema fragment fetcher."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .logging import redact_url


logger = logging.getLogger(__name__)


class FetchError(Exception):
    pass


class SchemaFetcher:
    def __init__(
        self,
        timeout_seconds: float = 30,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.verify_ssl = verify_ssl
        self.transport = transport

    async def fetch(self, url: str) -> Dict[str, Any]:
        safe_url = redact_url(url)
        logger.debug("Fetching schema fragment: %s", safe_url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                verify=self.verify_ssl,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch schema fragment {safe_url}: {exc}") from exc

        if response.status_code != 200:
            raise FetchError(
                f"Failed to fetch schema fragment {safe_url} ({response.status_code})"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError(f"Schema fragment is not valid JSON: {safe_url}") from exc

        if not isinstance(data, dict):
            raise FetchError(f"Schema fragment is not a JSON object: {safe_url}")
        return data
