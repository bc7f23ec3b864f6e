"""
Constraint data model for depcore.

A :class:`Constraint` is one operator applied to one :class:`Version`, eg
``>=2.7`` or ``^0.3.1``. Operators follow Cargo's semantics for caret and
tilde requirements:
https://doc.rust-lang.org/cargo/reference/specifying-dependencies.html
"""

from __future__ import annotations

import re
from enum import Enum
from dataclasses import dataclass
from typing import List, Tuple

from depcore.constants import CONSTRAINT_PATTERN, WHEEL_PY_VERSION_PATTERN
from depcore.exceptions import ParseError
from depcore.models.version import Version

_CONSTRAINT_RE = re.compile(CONSTRAINT_PATTERN)
_WHEEL_PY_RE = re.compile(WHEEL_PY_VERSION_PATTERN)

#: Inclusive ``(min, max)`` bounds.
VersionRange = Tuple[Version, Version]


class ReqType(Enum):
    """Kind of version requirement. Values are the operator text."""

    EXACT = "=="
    GTE = ">="
    LTE = "<="
    GT = ">"
    LT = "<"
    NE = "!="
    CARET = "^"
    TILDE = "~"

    @classmethod
    def from_str(cls, text: str) -> "ReqType":
        try:
            return cls(text)
        except ValueError:
            raise ParseError(f"Problem parsing ReqType: {text}", text=text) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Constraint:
    """A single version requirement. Chain several for AND semantics.

    Attributes:
        req_type: The operator.
        version: The version the operator is applied to.
    """

    req_type: ReqType
    version: Version

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def from_str(cls, text: str) -> "Constraint":
        """Parse ``"!=2.3b3"``, ``"^1.3.32"``, ``"3.1.4"`` or ``"*"``.

        A missing operator means an exact match; a bare ``*`` means any
        version.

        Raises:
            ParseError: The version part is malformed.
        """
        if text == "*":
            return cls(ReqType.GTE, Version.min())

        match = _CONSTRAINT_RE.match(text)
        if match is None:
            raise ParseError(f"Problem parsing constraint: {text}", text=text)

        operator, version_text = match.groups()
        req_type = ReqType.from_str(operator) if operator else ReqType.EXACT
        return cls(req_type, Version.from_str(version_text))

    @classmethod
    def from_str_multiple(cls, text: str) -> List["Constraint"]:
        """Parse a comma-separated list, eg ``">=2.7, !=3.0.0, <=3.5"``."""
        return [cls.from_str(part) for part in text.replace(" ", "").split(",")]

    @classmethod
    def from_wh_py_vers(cls, text: str) -> List["Constraint"]:
        """Parse the ``python_version`` field of a warehouse release file.

        Handles values like ``"py3"``, ``"cp35.cp36.cp37"``, ``"py2.py3"``,
        ``"pp36"``, ``"any"`` and ``"2.7"``. This is the tag field, not
        ``requires_python``, which overstates compatibility too often.

        The result is meant to be read with OR logic: ``"cp35.cp36"``
        matches either Python 3.5 or 3.6.
        """
        if text == "any":
            return [cls(ReqType.GTE, Version.new(2, 0, 0))]

        try:
            return [cls(ReqType.EXACT, Version.from_str(text))]
        except ParseError:
            pass

        result: List[Constraint] = []
        for part in text.split("."):
            match = _WHEEL_PY_RE.match(part)
            if match is None:
                continue
            major, minor = match.groups()
            if minor is not None:
                result.append(
                    cls(ReqType.EXACT, Version.new_short(int(major), int(minor)))
                )
            # eg py2.py3 adds <=2.10 and >=3.0
            elif major == "2":
                result.append(cls(ReqType.LTE, Version.new_short(2, 10)))
            else:
                result.append(cls(ReqType.GTE, Version.new_short(3, 0)))
        return result

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def to_string(self, omit_equals: bool = False, pip_style: bool = False) -> str:
        """Render the constraint.

        Args:
            omit_equals: Drop the operator of exact constraints, as config
                files do.
            pip_style: Render ``^`` as ``^=`` and ``~`` as ``~=``.
        """
        if omit_equals and self.req_type is ReqType.EXACT:
            operator = ""
        else:
            operator = self.req_type.value
        if pip_style and self.req_type in (ReqType.CARET, ReqType.TILDE):
            operator += "="
        return f"{operator}{self.version}"

    def __str__(self) -> str:
        return self.to_string()

    # ------------------------------------------------------------------
    # Compatibility
    # ------------------------------------------------------------------

    def _next_breaking(self) -> Version:
        """Exclusive upper bound for caret and tilde constraints."""
        v = self.version
        if self.req_type is ReqType.CARET:
            if v.major > 0:
                return Version.new(v.major + 1, 0, 0)
            if v.minor > 0:
                return Version.new(0, v.minor + 1, 0)
            # 0.0.x admits x and x+1.
            return Version.new(0, 0, v.patch + 2)
        # Tilde: with a minor, only the patch may move; otherwise the minor may.
        if v.minor > 0:
            return Version.new(v.major, v.minor + 1, 0)
        return Version.new(v.major + 1, 0, 0)

    def compatible_range(self) -> List[VersionRange]:
        """Return the lowest and highest compatible versions.

        Every operator yields a single range except ``!=``, which yields two
        ranges joined with OR logic. Strict bounds step a whole patch release:
        ``>1.2.3`` starts at ``1.2.4`` and ``<2.0`` ends at
        ``1.999999.999999``. A range whose low end lies above its high end
        admits nothing and is left out, so ``>=1000000`` yields ``[]``.
        """
        lowest = Version.min()
        highest = Version.max()
        v = self.version
        req_type = self.req_type

        if req_type is ReqType.EXACT:
            ranges = [(v, v)]
        elif req_type is ReqType.GTE:
            ranges = [(v, highest)]
        elif req_type is ReqType.LTE:
            ranges = [(lowest, v)]
        elif req_type is ReqType.GT:
            ranges = [(v.bump_patch(), highest)]
        elif req_type is ReqType.LT:
            ranges = [(lowest, v.safe_decrement())]
        elif req_type is ReqType.NE:
            ranges = [(lowest, v.safe_decrement()), (v.bump_patch(), highest)]
        else:
            # Caret and tilde use Lt logic for their upper bound.
            ranges = [(v, self._next_breaking().safe_decrement())]
        return [(low, high) for low, high in ranges if low <= high]

    def is_compatible(self, version: Version) -> bool:
        """Return True if *version* satisfies this constraint.

        Bounds are the same as :meth:`compatible_range`, so pre-releases and
        four-part builds of a strict bound fall outside it (``<2.0`` rejects
        ``2.0rc1``, ``>1.0`` rejects ``1.0.0.5``), and open-ended operators
        stop at ``Version.max()``.
        """
        v = self.version
        lowest = Version.min()
        highest = Version.max()
        req_type = self.req_type

        if req_type is ReqType.EXACT:
            return version == v
        if req_type is ReqType.GTE:
            return v <= version <= highest
        if req_type is ReqType.LTE:
            return lowest <= version <= v
        if req_type is ReqType.GT:
            return v.bump_patch() <= version <= highest
        if req_type is ReqType.LT:
            return lowest <= version <= v.safe_decrement()
        if req_type is ReqType.NE:
            return (
                lowest <= version <= v.safe_decrement()
                or v.bump_patch() <= version <= highest
            )
        return v <= version <= self._next_breaking().safe_decrement()
