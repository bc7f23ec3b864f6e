"""
Unified data model exports for depcore.

Example:
    >>> from depcore.models import Version, Constraint, Requirement
"""

from __future__ import annotations

from depcore.models.version import Version, VersionModifier
from depcore.models.constraint import Constraint, ReqType, VersionRange
from depcore.models.platform import Os
from depcore.models.requirement import Requirement, VersionInfo, VersionInfoSource
from depcore.models.package import Dependency, Package, Rename, rename_alias
from depcore.models.conflict import Conflict, ConflictSet
from depcore.models.lock import Lock, LockPackage

__all__ = [
    "Version",
    "VersionModifier",
    "Constraint",
    "ReqType",
    "VersionRange",
    "Os",
    "Requirement",
    "VersionInfo",
    "VersionInfoSource",
    "Dependency",
    "Package",
    "Rename",
    "rename_alias",
    "Conflict",
    "ConflictSet",
    "Lock",
    "LockPackage",
]
