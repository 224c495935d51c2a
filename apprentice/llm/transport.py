"""
Request/response transport used by the provider adapters.

Adapters only depend on the ``Transport`` contract; ``HttpxTransport`` is the
production implementation.

Dependencies: ``httpx`` (async HTTP client).
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

import httpx

from apprentice.errors import TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Sends one JSON request and returns the decoded JSON response."""

    @abstractmethod
    async def send(
        self,
        url: str,
        payload: dict,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict:
        """
        POST *payload* to *url*.

        Raises ``TransportError`` on network failure or a non-JSON body.
        HTTP error statuses are *not* errors here: vendors describe them in
        the JSON body, which the adapter inspects.
        """
        ...


class HttpxTransport(Transport):
    """
    Transport backed by ``httpx.AsyncClient``.

    Parameters
    ----------
    timeout:
        HTTP timeout in seconds.  ``None`` waits indefinitely.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def send(
        self,
        url: str,
        payload: dict,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    url,
                    json=payload,
                    headers=headers or {},
                    params=params or {},
                )
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        logger.debug("RESPONSE: status=%d bytes=%d", resp.status_code, len(resp.content))
        try:
            data = resp.json()
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"HTTP {resp.status_code}: response body is not valid JSON"
            ) from exc
        if not isinstance(data, dict):
            raise TransportError(f"HTTP {resp.status_code}: expected a JSON object")
        return data
