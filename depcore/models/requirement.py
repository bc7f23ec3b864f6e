"""
Requirement data model for depcore.

A :class:`Requirement` names a package, the constraints its version must
meet (AND logic), and the conditions under which it applies. Text is turned
into requirements by :mod:`depcore.core.parser`.

A requirement without constraints means "the latest version"; it is
written back to a manifest as a caret constraint on whatever the package
index reports as latest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Protocol, Tuple

from depcore.exceptions import DependencyError, DepcoreError
from depcore.models.constraint import Constraint, ReqType, VersionRange
from depcore.models.platform import Os
from depcore.models.version import Version
from depcore.utils.logger import get_logger
from depcore.utils.names import compare_names

logger = get_logger("requirement")


class VersionInfo(NamedTuple):
    """What the package index knows about a package.

    Attributes:
        name: Canonical (display) name reported by the index.
        version: Latest released version.
        metadata: Raw index metadata for the latest release.
    """

    name: str
    version: Version
    metadata: Dict[str, Any]


class VersionInfoSource(Protocol):
    """The one lookup this package needs from a package index."""

    def get_version_info(self, name: str) -> VersionInfo:
        """Return canonical name, latest version and metadata for *name*."""
        ...


@dataclass(frozen=True)
class Requirement:
    """
    A named package requirement.

    Attributes:
        name: Package name as written.
        constraints: Version constraints, all of which must hold.
        extra: Extra this requirement belongs to (``extra == '...'``).
        sys_platform: Platform gate as ``(operator, Os)``.
        python_version: Python version gate.
        install_with_extras: Extras to install along with the package.
    """

    name: str
    constraints: Tuple[Constraint, ...] = ()
    extra: Optional[str] = None
    sys_platform: Optional[Tuple[ReqType, Os]] = None
    python_version: Optional[Constraint] = None
    install_with_extras: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", tuple(self.constraints))
        if self.install_with_extras is not None:
            object.__setattr__(
                self, "install_with_extras", tuple(self.install_with_extras)
            )

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def from_str(cls, text: str, pypi_fmt: bool = False) -> "Requirement":
        """Parse manifest style (``saturn = ">=0.3.4"``) or, with
        *pypi_fmt*, index metadata style (``saturn (>=0.3.4)``).

        See :func:`depcore.core.parser.parse_requirement`.
        """
        # depcore.core imports this module
        from depcore.core.parser import parse_requirement

        return parse_requirement(text, pypi_fmt=pypi_fmt)

    @classmethod
    def from_pip_str(cls, text: str) -> "Requirement":
        """Parse one line of a flat requirements list, eg ``requests>=2.0``."""
        from depcore.core.parser import parse_pip_requirement

        return parse_pip_requirement(text)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def to_cfg_string(self, index: Optional[VersionInfoSource] = None) -> str:
        """Render the requirement in manifest style, eg ``saturn = "^0.3.1"``.

        With no constraints, the latest version is looked up through
        *index* and rendered as a caret constraint under the index's
        canonical name. This is the only formatting path with a side
        effect.

        Args:
            index: Package index used when there are no constraints.

        Raises:
            DependencyError: There are no constraints and the index is
                missing or the lookup failed.
        """
        if self.constraints:
            rendered = ", ".join(
                constraint.to_string(omit_equals=True) for constraint in self.constraints
            )
            return f'{self.name} = "{rendered}"'

        if index is None:
            raise DependencyError(
                f"Unable to find version info for {self.name!r}: no package index",
                package_name=self.name,
            )

        try:
            info = index.get_version_info(self.name)
        except DepcoreError as exc:
            raise DependencyError(
                f"Unable to find version info for {self.name!r}",
                package_name=self.name,
            ) from exc

        latest = Constraint(ReqType.CARET, info.version)
        logger.debug("Pinning %s to %s from the package index", info.name, latest)
        return f'{info.name} = "{latest.to_string(omit_equals=True)}"'

    def to_pip_string(self) -> str:
        """Render the requirement pip style, eg ``requests[socks]>=2.0,!=2.1``."""
        result = self.name
        if self.install_with_extras:
            result += f"[{','.join(self.install_with_extras)}]"
        result += ",".join(
            constraint.to_string(pip_style=True) for constraint in self.constraints
        )
        return result

    def __str__(self) -> str:
        return f"{self.name} {', '.join(str(c) for c in self.constraints)}".rstrip()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def matches_name(self, name: str) -> bool:
        """Return True if *name* refers to the same package."""
        return compare_names(self.name, name)

    def is_compatible(self, version: Version) -> bool:
        """Return True if *version* satisfies every constraint."""
        return all(constraint.is_compatible(version) for constraint in self.constraints)

    def compatible_range(self, strict_not_equal: bool = False) -> List[VersionRange]:
        """Return the ranges admitted by all constraints together."""
        from depcore.core.ranges import intersection_many

        return intersection_many(self.constraints, strict_not_equal=strict_not_equal)

    def applies_to(
        self,
        os: Optional[Os] = None,
        python_version: Optional[Version] = None,
        extras: Iterable[str] = (),
    ) -> bool:
        """Evaluate the requirement's conditions against an environment.

        A requirement tied to an extra applies only when that extra is
        requested. A ``None`` target skips the corresponding gate. Platform
        gates understand ``==`` and ``!=``; other operators pass.

        Args:
            os: Target platform.
            python_version: Target Python version.
            extras: Extras requested for the parent package.
        """
        if self.extra is not None and self.extra not in set(extras):
            return False

        if self.sys_platform is not None and os is not None:
            req_type, platform = self.sys_platform
            if req_type is ReqType.EXACT and not platform.matches(os):
                return False
            if req_type is ReqType.NE and platform is os and os is not Os.ANY:
                return False

        if self.python_version is not None and python_version is not None:
            return self.python_version.is_compatible(python_version)

        return True
