"""
Version data model for depcore.

A :class:`Version` is an exact release: ``major.minor.patch``, an optional
fourth numeric component (``4.2.3.1``) and an optional pre-release or
vendor modifier (``1.3.5rc0``, ``19.3b0``, ``1.3.32.dep1``).

Versions are immutable and totally ordered. A final release ranks above
every modified build sharing its numbers, so ``1.0 > 1.0rc1 > 1.0b1 >
1.0a1 > 1.0dep1``.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import total_ordering
from dataclasses import dataclass
from typing import Optional, Tuple

from depcore.constants import MAX_COMPONENT, MAX_VER, VERSION_PATTERN
from depcore.exceptions import ParseError

_VERSION_RE = re.compile(VERSION_PATTERN)


class VersionModifier(Enum):
    """Pre-release or vendor tag attached to a version number.

    ``NULL`` stands for "no modifier" and exists only so that versions with
    and without modifiers can be compared. It is never stored on a
    :class:`Version` and has no text form.
    """

    ALPHA = "a"
    BETA = "b"
    RELEASE_CANDIDATE = "rc"
    DEP = "dep"
    NULL = ""

    @classmethod
    def from_str(cls, text: str) -> "VersionModifier":
        """Parse a modifier tag such as ``"rc"``.

        Raises:
            ParseError: The tag is not one of ``a``, ``b``, ``rc``, ``dep``.
        """
        if text:
            try:
                return cls(text)
            except ValueError:
                pass
        raise ParseError("Problem parsing version modifier", text=text)

    @property
    def rank(self) -> int:
        return _MODIFIER_RANKS[self]

    def __str__(self) -> str:
        if self is VersionModifier.NULL:
            raise ValueError("Can't convert Null to string; misused")
        return self.value


_MODIFIER_RANKS = {
    VersionModifier.NULL: 4,
    VersionModifier.RELEASE_CANDIDATE: 3,
    VersionModifier.BETA: 2,
    VersionModifier.ALPHA: 1,
    VersionModifier.DEP: 0,
}


@total_ordering
@dataclass(frozen=True)
class Version:
    """An exact, semver-like version with optional extras.

    Attributes:
        major: Major component.
        minor: Minor component.
        patch: Patch component.
        extra_num: Optional fourth component, eg the ``1`` in ``4.2.3.1``.
        modifier: Optional ``(modifier, number)`` pair, eg ``(BETA, 3)``.
    """

    major: int
    minor: int = 0
    patch: int = 0
    extra_num: Optional[int] = None
    modifier: Optional[Tuple[VersionModifier, int]] = None

    def __post_init__(self) -> None:
        if self.modifier is not None and self.modifier[0] is VersionModifier.NULL:
            raise ParseError("A stored version modifier can't be Null")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, major: int, minor: int, patch: int) -> "Version":
        return cls(major, minor, patch)

    @classmethod
    def new_short(cls, major: int, minor: int) -> "Version":
        """No patch specified."""
        return cls(major, minor, 0)

    @classmethod
    def max(cls) -> "Version":
        """Conventional open upper bound, ``MAX_VER.0.0``."""
        return cls(MAX_VER, 0, 0)

    @classmethod
    def min(cls) -> "Version":
        return cls(0, 0, 0)

    @classmethod
    def from_str(cls, text: str) -> "Version":
        """Parse version text such as ``"3.7"``, ``"1.*"`` or ``"5.2.5.11b3"``.

        Wildcards are treated as ``0``; omitted minor and patch default to
        ``0``.

        Raises:
            ParseError: The text doesn't match the version grammar, or a
                component doesn't fit in an unsigned 32-bit integer.
        """
        cleaned = text.replace("*", "0")
        match = _VERSION_RE.match(cleaned)
        if match is None:
            raise ParseError(f"Problem parsing version: {cleaned}", text=text)

        major, minor, patch, extra, tag, tag_num = match.groups()

        modifier = None
        if tag is not None:
            # The grammar captures tag and number separately, but one
            # never appears without the other.
            if tag_num is None:
                raise ParseError(
                    f"Problem parsing version modifier: {cleaned}", text=text
                )
            modifier = (VersionModifier.from_str(tag), _parse_int(tag_num, text))

        return cls(
            major=_parse_int(major, text),
            minor=_parse_int(minor, text) if minor is not None else 0,
            patch=_parse_int(patch, text) if patch is not None else 0,
            extra_num=_parse_int(extra, text) if extra is not None else None,
            modifier=modifier,
        )

    # ------------------------------------------------------------------
    # Range helpers
    # ------------------------------------------------------------------

    def bump_patch(self) -> "Version":
        """Return ``major.minor.(patch+1)``, dropping extras and modifier."""
        return Version(self.major, self.minor, self.patch + 1)

    def safe_decrement(self) -> "Version":
        """Return the highest plain version strictly below this one.

        Rolls over through lower components instead of going negative:
        ``3.0.0`` becomes ``2.MAX_VER.MAX_VER``, ``2.9.0`` becomes
        ``2.8.MAX_VER`` and ``0.0.0`` stays ``0.0.0``.
        """
        major, minor, patch = self.major, self.minor, self.patch
        if major == 0 and minor == 0 and patch == 0:
            pass
        elif minor == 0 and patch == 0:
            major, minor, patch = major - 1, MAX_VER, MAX_VER
        elif patch == 0:
            minor, patch = minor - 1, MAX_VER
        else:
            patch -= 1
        return Version(major, minor, patch)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def _suffix(self) -> str:
        suffix = ""
        if self.extra_num is not None:
            suffix += f".{self.extra_num}"
        if self.modifier is not None:
            modifier, num = self.modifier
            suffix += f"{modifier}{num}"
        return suffix

    def to_string_short(self) -> str:
        return f"{self.major}{self._suffix()}"

    def to_string_med(self) -> str:
        return f"{self.major}.{self.minor}{self._suffix()}"

    def to_string(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}{self._suffix()}"

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _sort_key(self) -> Tuple[int, int, int, int, int, int, bool]:
        modifier, num = self.modifier or (VersionModifier.NULL, 0)
        return (
            self.major,
            self.minor,
            self.patch,
            self.extra_num or 0,
            modifier.rank,
            num,
            # Keeps 1.0.0.0 and 1.0.0 distinct so the order stays total.
            self.extra_num is not None,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Version({self.to_string()!r})"


def _parse_int(digits: str, text: str) -> int:
    value = int(digits)
    if value > MAX_COMPONENT:
        raise ParseError(f"Version component out of range: {digits}", text=text)
    return value
