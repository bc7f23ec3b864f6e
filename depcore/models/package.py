"""
Dependency-graph node models for depcore.

A resolver produces one :class:`Dependency` per chosen package version,
linked to the node that required it through ``parent``. Once the tree is
complete it is frozen into :class:`Package` nodes, each carrying a
:class:`Rename` that says whether it must be installed under an alias
because another version of the same package is already present.

Nodes required directly by the project have ``parent == ROOT_ID``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from depcore.constants import RENAME_TEMPLATE, ROOT_ID
from depcore.models.version import Version
from depcore.utils.names import normalize_name, standardize_name

if TYPE_CHECKING:
    from depcore.models.requirement import Requirement

#: ``(id, name, version)`` of a direct dependency.
DepRef = Tuple[int, str, Version]


def rename_alias(name: str, self_id: int) -> str:
    """Return the import-safe alias for a renamed node.

    Example::

        >>> rename_alias("Zope.Interface", 7)
        'zope_interface_renamed_7'
    """
    return RENAME_TEMPLATE.format(name=standardize_name(name), id=self_id)


@dataclass(frozen=True)
class Rename:
    """Whether a node is installed under an alias.

    Build instances with :meth:`no` or :meth:`yes`; ``renamed`` is the tag,
    the remaining fields are only set when it is True.
    """

    renamed: bool = False
    parent_id: Optional[int] = None
    self_id: Optional[int] = None
    name: Optional[str] = None

    @classmethod
    def no(cls) -> "Rename":
        return cls()

    @classmethod
    def yes(cls, parent_id: int, self_id: int, name: str) -> "Rename":
        return cls(True, parent_id, self_id, name)

    @property
    def is_renamed(self) -> bool:
        return self.renamed

    @property
    def alias(self) -> Optional[str]:
        return self.name if self.renamed else None

    def __str__(self) -> str:
        if not self.renamed:
            return "Rename.no()"
        return f"Rename.yes({self.parent_id}, {self.self_id}, {self.name!r})"


@dataclass(frozen=True)
class Dependency:
    """A package version chosen during resolution.

    Attributes:
        id: Graph-unique node id, starting at 1.
        parent: Id of the node that required this one.
        name: Package name as reported by the index.
        version: Chosen version.
        reqs: This package's own requirements.
    """

    id: int
    parent: int
    name: str
    version: Version
    reqs: Tuple["Requirement", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "reqs", tuple(self.reqs))

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def is_root_level(self) -> bool:
        return self.parent == ROOT_ID

    def __str__(self) -> str:
        return f"{self.name} {self.version} (#{self.id})"


@dataclass(frozen=True)
class Package:
    """A resolved node ready to be locked and installed.

    Attributes:
        id: Node id, shared with the :class:`Dependency` it came from.
        parent: Id of the requiring node.
        name: Package name.
        version: Resolved version.
        deps: Direct dependencies as ``(id, name, version)``.
        rename: Alias assignment, if any.
    """

    id: int
    parent: int
    name: str
    version: Version
    deps: Tuple[DepRef, ...] = ()
    rename: Rename = Rename.no()

    def __post_init__(self) -> None:
        object.__setattr__(self, "deps", tuple(self.deps))

    @property
    def install_name(self) -> str:
        """Name the package is installed under."""
        return self.rename.alias or self.name

    def __str__(self) -> str:
        suffix = f" as {self.rename.alias}" if self.rename.is_renamed else ""
        return f"{self.name} {self.version}{suffix}"
