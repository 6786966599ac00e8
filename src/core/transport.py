# src/core/transport.py
from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol

import requests

from src.config import settings
from src.core.coin_errors import MalformedResponseError, TransportError


def join_url(base: str, *parts: str) -> str:
    """Join a base URL and path segments with single slashes."""
    url = base.rstrip("/")
    for part in parts:
        part = str(part).strip("/")
        if part:
            url = f"{url}/{part}"
    return url


class JsonTransport(Protocol):
    async def get_json(self, url: str) -> Any:
        ...


class RequestsTransport:
    """
    Fetch JSON with `requests`.

    The blocking call runs in a worker thread so several coins can be
    refreshed from one event loop; the caller only sees the decoded payload.
    """

    def __init__(
        self,
        timeout: Optional[float] = settings.LIVE_DATA_REQUEST_TIMEOUT_S,
        user_agent: str = settings.LIVE_DATA_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent

    def _get(self, url: str) -> Any:
        try:
            resp = requests.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"URL failed to load: {url} ({exc})") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Response from {url} is not JSON") from exc

    async def get_json(self, url: str) -> Any:
        return await asyncio.to_thread(self._get, url)
