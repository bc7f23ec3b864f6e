"""
Target platform identifiers for ``sys_platform`` requirement markers.
"""

from __future__ import annotations

from enum import Enum

from depcore.constants import SYS_PLATFORM_ALIASES
from depcore.exceptions import ParseError


class Os(Enum):
    """Operating system a requirement or environment targets."""

    LINUX32 = "linux32"
    LINUX = "linux"
    WINDOWS32 = "windows32"
    WINDOWS = "windows"
    MAC = "mac"
    ANY = "any"

    @classmethod
    def from_str(cls, text: str) -> "Os":
        """Parse a ``sys_platform`` marker value such as ``"win32"``.

        Raises:
            ParseError: The value names no known platform.
        """
        alias = SYS_PLATFORM_ALIASES.get(text.strip().lower())
        if alias is None:
            raise ParseError(f"Problem parsing Os: {text}", text=text)
        return cls(alias)

    def matches(self, other: "Os") -> bool:
        """Return True if the two platforms are interchangeable.

        ``ANY`` matches everything.
        """
        return Os.ANY in (self, other) or self is other
