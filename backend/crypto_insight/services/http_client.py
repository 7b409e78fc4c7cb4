"""JSON-over-HTTP helper shared by the external API clients."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Transport, status or decoding failure talking to an external API."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class HttpClient:
    """Thin wrapper around a shared ``aiohttp.ClientSession``.

    Every call applies the configured total timeout, raises ``UpstreamError``
    on non-2xx statuses, timeouts and undecodable bodies, and returns the
    decoded JSON document. Callers decide how to contain the error.
    """

    def __init__(self, timeout_seconds: float = 30.0, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body."""
        return await self._request("GET", url, params=params, headers=headers)

    async def post_json(
        self,
        url: str,
        payload: Any,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """POST ``payload`` as JSON to ``url`` and decode the JSON body."""
        return await self._request("POST", url, params=params, headers=headers, json=payload)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        session = await self._get_session()
        logger.debug(f"Making {method} request to {url}")

        try:
            async with session.request(method, url, timeout=self.timeout, **kwargs) as resp:
                body = await resp.text()
                if resp.status >= 400:
                    raise UpstreamError(
                        f"{method} {url} returned {resp.status}",
                        status=resp.status,
                    )
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout for {method} {url}")
            raise UpstreamError(f"{method} {url} timed out") from e
        except UnicodeDecodeError as e:
            logger.error(f"Undecodable body for {method} {url}: {e}")
            raise UpstreamError(f"{method} {url} returned an undecodable body") from e
        except aiohttp.ClientError as e:
            logger.error(f"HTTP request error for {method} {url}: {e}")
            raise UpstreamError(f"{method} {url} failed: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            logger.error(f"JSON decoding error for {method} {url}: {e}")
            raise UpstreamError(f"{method} {url} returned invalid JSON") from e
