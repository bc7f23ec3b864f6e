"""
Version collision data models for depcore.

A :class:`Conflict` records that two graph nodes share a package name but
were resolved to versions that no single version could replace. A
:class:`ConflictSet` groups the conflicts reported for one package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from depcore.models.constraint import Constraint
from depcore.models.version import Version
from depcore.utils.names import normalize_name


@dataclass(frozen=True)
class Conflict:
    """Two nodes of the same package at incompatible versions.

    Args:
        name: Package name.
        existing_id: Node seen first.
        existing_version: Version of the node seen first.
        conflicting_id: Node that collides with it.
        conflicting_version: Version of the colliding node.
        required: Constraints that drove both nodes.
    """

    name: str
    existing_id: int
    existing_version: Version
    conflicting_id: int
    conflicting_version: Version
    required: Tuple[Constraint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_name(self.name))
        object.__setattr__(self, "required", tuple(self.required))

    @property
    def required_spec(self) -> str:
        return ", ".join(str(constraint) for constraint in self.required)

    def to_display_string(self) -> str:
        """Return a human-readable description of the conflict."""
        message = (
            f"{self.name} {self.conflicting_version} (#{self.conflicting_id}) "
            f"conflicts with {self.existing_version} (#{self.existing_id})"
        )
        if self.required:
            message += f"; required {self.required_spec}"
        return message

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "existing_id": self.existing_id,
            "existing_version": str(self.existing_version),
            "conflicting_id": self.conflicting_id,
            "conflicting_version": str(self.conflicting_version),
            "required": [str(constraint) for constraint in self.required],
        }

    def __str__(self) -> str:
        return self.to_display_string()


@dataclass
class ConflictSet:
    """Collection of conflicts affecting a single package.

    Args:
        package_name: Name of the affected package.
        conflicts: Conflicts associated with this package.
    """

    package_name: str
    conflicts: List[Conflict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.package_name = normalize_name(self.package_name)

    def add_conflict(self, conflict: Conflict) -> None:
        """Add a conflict to the set."""
        self.conflicts.append(conflict)

    def has_conflicts(self) -> bool:
        """Return True if any conflicts exist."""
        return bool(self.conflicts)

    @property
    def conflicting_ids(self) -> List[int]:
        return [conflict.conflicting_id for conflict in self.conflicts]

    def __len__(self) -> int:
        return len(self.conflicts)

    def __iter__(self) -> Iterator[Conflict]:
        return iter(self.conflicts)
