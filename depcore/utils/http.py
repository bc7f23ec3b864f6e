"""
Async HTTP access to the package index.

One :class:`HTTPClient` is shared by all lookups of a run. It bounds the
number of requests in flight, backs off exponentially on transient
failures and honours ``Retry-After`` when the index rate limits us.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Dict, Optional, cast

import httpx

from depcore.__version__ import __version__
from depcore.constants import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, USER_AGENT_TEMPLATE
from depcore.exceptions import NetworkError, PyPIError
from depcore.utils.logger import get_logger

logger = get_logger("http")

#: Consecutive ``429`` replies tolerated before giving up.
MAX_429_RETRIES = 5


class HTTPClient:
    """HTTP/2 client for JSON lookups with bounded retries.

    The underlying :class:`httpx.AsyncClient` is created lazily, so an
    instance can be built outside an event loop and used later with
    ``async with``.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Extra attempts after a timeout, a connection failure
            or a 5xx reply.
        verify_ssl: Verify TLS certificates.
        user_agent: ``User-Agent`` header; defaults to ``depcore/<version>``.
        max_concurrency: Requests allowed in flight at once.

    Example:
        >>> async with HTTPClient(timeout=5) as client:
        ...     payload = await client.get_json("https://pypi.org/pypi/saturn/json")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = 10,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)

        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HTTPClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        self._client = httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(self.timeout),
            verify=self.verify_ssl,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
        )
        return self._client

    async def close(self) -> None:
        """Release pooled connections. Safe to call more than once."""
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url``, retrying timeouts, connection failures and 5xx replies.

        A ``429`` reply waits for ``Retry-After`` and then tries again without
        counting against ``max_retries``.

        Raises:
            PyPIError: The index has no such resource (``404``).
            NetworkError: A different 4xx reply, persistent rate limiting,
                or no attempt succeeded.
        """
        client = self._ensure_client()
        attempts = self.max_retries + 1
        rate_limited = 0
        last_exc: Optional[Exception] = None

        attempt = 0
        while attempt < attempts:
            try:
                async with self._semaphore:
                    response = await client.get(url, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exc = exc
                logger.warning(
                    "%s on attempt %d/%d for %s",
                    type(exc).__name__,
                    attempt + 1,
                    attempts,
                    url,
                )
            else:
                if response.status_code == 429:
                    rate_limited += 1
                    await self._wait_out_rate_limit(url, response, rate_limited)
                    continue
                if response.status_code < 500:
                    return self._accept(url, response)

                last_exc = NetworkError(
                    f"HTTP {response.status_code} error for {url}",
                    url=url,
                    status_code=response.status_code,
                )
                logger.warning(
                    "Server error %d on attempt %d/%d for %s",
                    response.status_code,
                    attempt + 1,
                    attempts,
                    url,
                )

            if attempt + 1 < attempts:
                delay = 2**attempt + random.uniform(0.0, 0.3)
                logger.debug("Backing off for %.2fs", delay)
                await asyncio.sleep(delay)
            attempt += 1

        raise NetworkError(
            f"Request failed after {attempts} attempts: {url}", url=url
        ) from last_exc

    @staticmethod
    async def _wait_out_rate_limit(
        url: str, response: httpx.Response, count: int
    ) -> None:
        if count > MAX_429_RETRIES:
            raise NetworkError(
                f"Rate limit exceeded after {MAX_429_RETRIES} retries",
                url=url,
                status_code=429,
            )
        wait = int(response.headers.get("Retry-After", "1"))
        logger.warning(
            "Rate limited by %s, waiting %ds (%d/%d)", url, wait, count, MAX_429_RETRIES
        )
        await asyncio.sleep(wait)

    @staticmethod
    def _accept(url: str, response: httpx.Response) -> httpx.Response:
        """Pass through anything below 400; turn client errors into exceptions."""
        status = response.status_code
        if status == 404:
            raise PyPIError(f"Resource not found: {url}", url=url, status_code=404)
        if status >= 400:
            raise NetworkError(
                f"HTTP {status} error for {url}",
                url=url,
                status_code=status,
                response_body=response.text,
            )
        return response

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Like :meth:`get`, but decode the body and require a JSON object."""
        response = await self.get(url, **kwargs)

        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if isinstance(payload, dict):
            return cast(Dict[str, Any], payload)
        raise NetworkError(
            f"Expected JSON object from {url}",
            url=url,
            response_body=response.text,
        )
