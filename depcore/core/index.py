"""Package index lookups for depcore.

:class:`PyPIIndex` reads the PyPI JSON API through the shared
:class:`~depcore.utils.http.HTTPClient`, fetching each package at most once.
:class:`SyncVersionSource` wraps it for blocking callers such as
:meth:`Requirement.to_cfg_string`.

Typical usage::

    from depcore.utils.http import HTTPClient
    from depcore.core.index import PyPIIndex

    async with HTTPClient() as client:
        index = PyPIIndex(client)
        info = await index.get_version_info("Saturn")
        print(info.name, info.version)       # e.g. "saturn 0.3.4"
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from depcore.constants import DEFAULT_TIMEOUT, PYPI_JSON_API
from depcore.exceptions import DependencyError, DepcoreError, ParseError, PyPIError
from depcore.models.requirement import VersionInfo
from depcore.models.version import Version
from depcore.utils.http import HTTPClient
from depcore.utils.logger import get_logger
from depcore.utils.names import normalize_name

logger = get_logger("index")

__all__ = ["PyPIIndex", "SyncVersionSource"]


class PyPIIndex:
    """Async, per-instance cache of package index metadata.

    Each canonical package name triggers at most one request. The
    semaphore limits concurrent fetches, and a second cache check inside
    it keeps coroutines asking for the same package from fetching twice.

    Args:
        http_client: Client used for every request.
        index_url: JSON API URL template with a ``{package}`` placeholder.
        concurrent_limit: Maximum number of fetches in flight at once.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        index_url: str = PYPI_JSON_API,
        concurrent_limit: int = 10,
    ) -> None:
        self.http_client = http_client
        self.index_url = index_url
        self._semaphore = asyncio.Semaphore(concurrent_limit)
        self._package_data: Dict[str, Dict[str, Any]] = {}

    async def _get_package_data(self, name: str) -> Dict[str, Any]:
        normalized = normalize_name(name)

        if normalized in self._package_data:
            return self._package_data[normalized]

        async with self._semaphore:
            if normalized in self._package_data:
                return self._package_data[normalized]

            url = self.index_url.format(package=name)
            try:
                data = await self.http_client.get_json(url)
            except PyPIError as exc:
                raise PyPIError(
                    f"Package '{name}' not found on the package index",
                    package_name=name,
                    url=url,
                    status_code=exc.status_code,
                ) from exc

            logger.debug("Fetched index data for %s", normalized)
            self._package_data[normalized] = data
            return data

    async def get_version_info(self, name: str) -> VersionInfo:
        """Return the canonical name, latest version and metadata of *name*.

        Raises:
            PyPIError: The package doesn't exist or the response lacks the
                ``info`` fields.
            NetworkError: The request failed.
            ParseError: The latest version isn't in a supported format.
        """
        data = await self._get_package_data(name)
        info = data.get("info")
        if not isinstance(info, dict) or not info.get("version"):
            raise PyPIError(f"Missing version info for '{name}'", package_name=name)

        version = Version.from_str(info["version"])
        return VersionInfo(info.get("name") or name, version, info)

    async def get_available_versions(self, name: str) -> List[Version]:
        """Return every released version of *name*, oldest first.

        Releases without uploaded files and version text outside the
        supported grammar are skipped.
        """
        data = await self._get_package_data(name)
        releases = data.get("releases") or {}

        versions: List[Version] = []
        for version_text, files in releases.items():
            if not files:
                continue
            try:
                versions.append(Version.from_str(version_text))
            except ParseError:
                logger.debug("Skipping unsupported version %s of %s", version_text, name)
        return sorted(versions)

    def get_cached_names(self) -> List[str]:
        """Return the canonical names fetched so far."""
        return list(self._package_data)


class SyncVersionSource:
    """Blocking package index lookup for code outside an event loop.

    Each call runs a fresh client on its own event loop.

    Args:
        index_url: JSON API URL template with a ``{package}`` placeholder.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        index_url: str = PYPI_JSON_API,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.index_url = index_url
        self.timeout = timeout

    async def _lookup(self, name: str) -> VersionInfo:
        async with HTTPClient(timeout=self.timeout) as client:
            return await PyPIIndex(client, self.index_url).get_version_info(name)

    def get_version_info(self, name: str) -> VersionInfo:
        """Look up *name* on the package index.

        Raises:
            DependencyError: The lookup failed for any reason.
        """
        try:
            return asyncio.run(self._lookup(name))
        except DependencyError:
            raise
        except DepcoreError as exc:
            raise DependencyError(
                f"Unable to find version info for {name!r}: {exc}",
                package_name=name,
            ) from exc
