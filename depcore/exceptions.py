"""
Errors raised by depcore.

Everything derives from :class:`DepcoreError`, which carries a plain message
plus a small ``details`` mapping that is appended to ``str(error)`` and
logged by the CLI.

Version, constraint, requirement and marker problems surface as
:class:`DependencyError` (malformed text as its subclass
:class:`ParseError`). The package index client raises :class:`NetworkError`
and :class:`PyPIError`; callers in the core convert those into
:class:`DependencyError` at the boundary.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

#: Longest response body kept in ``details``; the full body stays on the error.
RESPONSE_PREVIEW_LENGTH = 200


def _details(**fields: Any) -> Dict[str, Any]:
    """Keep only the fields that were actually supplied."""
    return {key: value for key, value in fields.items() if value is not None}


def _preview(body: Optional[str]) -> Optional[str]:
    if body is None or len(body) <= RESPONSE_PREVIEW_LENGTH:
        return body
    return body[:RESPONSE_PREVIEW_LENGTH] + "..."


class DepcoreError(Exception):
    """Root of the depcore error hierarchy.

    Args:
        message: What went wrong, phrased for the user.
        details: Extra key/value context shown after the message.
    """

    __slots__ = ("message", "details")

    def __init__(
        self, message: str, details: Optional[Mapping[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.details: Dict[str, Any] = {} if details is None else dict(details)

    def __str__(self) -> str:
        if self.details:
            context = ", ".join(f"{key}={value}" for key, value in self.details.items())
            return f"{self.message} ({context})"
        return self.message

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(message={self.message!r}, details={self.details!r})"


class DependencyError(DepcoreError):
    """A version, constraint or requirement that cannot be used.

    ``package_name`` is recorded when the failure concerns a specific
    package, e.g. when the index has no release for it.
    """

    __slots__ = ("package_name",)

    def __init__(self, message: str, *, package_name: Optional[str] = None) -> None:
        super().__init__(message, _details(package=package_name))
        self.package_name = package_name


class ParseError(DependencyError):
    """Malformed version, constraint, requirement or marker text.

    The message quotes the input already, so ``text`` is only an attribute.
    """

    __slots__ = ("text",)

    def __init__(self, message: str, *, text: Optional[str] = None) -> None:
        super().__init__(message)
        self.text = text


class NetworkError(DepcoreError):
    """An HTTP request that failed or returned an unusable response.

    Args:
        message: Error description.
        url: Requested URL.
        status_code: HTTP status, when a response was received.
        response_body: Response text; only a short preview goes into ``details``.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details = _details(
            url=url, status_code=status_code, response=_preview(response_body)
        )
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class PyPIError(NetworkError):
    """The package index answered, but not with the package asked for."""

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.package_name = package_name
        self.details.update(_details(package=package_name))


class ConfigError(DepcoreError):
    """A configuration file that is missing, unreadable or holds a bad option."""

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message, _details(path=config_path, option=option))
        self.config_path = config_path
        self.option = option
