"""
Lock snapshot data models for depcore.

A :class:`Lock` lists the exact packages to install, modelled after
``Cargo.lock``::

    [[package]]
    id = 3
    name = "saturn"
    version = "0.3.4"
    source = "pypi+https://pypi.org/pypi/saturn/0.3.4/json"
    dependencies = ["numpy 1.17.2"]

    [metadata]
    "checksum saturn" = "..."

Fields hold plain strings so a snapshot serializes without custom types.
Reading and writing lock *files* is the caller's business; this module
only converts between objects, plain mappings and TOML text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import tomli as tomllib

from depcore.exceptions import ParseError
from depcore.models.package import Package
from depcore.utils.names import compare_names


@dataclass(frozen=True)
class LockPackage:
    """One exact package in a lock snapshot.

    Attributes:
        id: Graph node id, used to track renames.
        name: Package name.
        version: Full version text, eg ``"0.3.4"``.
        source: Where the package comes from.
        dependencies: Direct dependencies as ``"name version"`` strings.
        rename: Alias the package is installed under.
    """

    id: int
    name: str
    version: str
    source: Optional[str] = None
    dependencies: Optional[Tuple[str, ...]] = None
    rename: Optional[str] = None

    def __post_init__(self) -> None:
        if self.dependencies is not None:
            object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @classmethod
    def from_package(
        cls, package: Package, source: Optional[str] = None
    ) -> "LockPackage":
        """Snapshot a resolved :class:`Package`."""
        dependencies = tuple(f"{name} {version}" for _, name, version in package.deps)
        return cls(
            id=package.id,
            name=package.name,
            version=package.version.to_string(),
            source=source,
            dependencies=dependencies or None,
            rename=package.rename.alias,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain mapping, leaving out unset optional fields."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "version": self.version,
        }
        if self.source is not None:
            data["source"] = self.source
        if self.dependencies is not None:
            data["dependencies"] = list(self.dependencies)
        if self.rename is not None:
            data["rename"] = self.rename
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LockPackage":
        """Build from a mapping such as a ``[[package]]`` table.

        Raises:
            ParseError: A field is missing or has the wrong type.
        """
        try:
            node_id = data["id"]
            name = data["name"]
            version = data["version"]
        except KeyError as exc:
            raise ParseError(f"Lock package is missing field {exc.args[0]!r}") from None

        if not isinstance(node_id, int) or isinstance(node_id, bool):
            raise ParseError(f"Lock package id must be an integer: {node_id!r}")
        for key, value in (("name", name), ("version", version)):
            if not isinstance(value, str):
                raise ParseError(f"Lock package {key} must be a string: {value!r}")

        source = data.get("source")
        if source is not None and not isinstance(source, str):
            raise ParseError(f"Lock package source must be a string: {source!r}")

        rename = data.get("rename")
        if rename is not None and not isinstance(rename, str):
            raise ParseError(f"Lock package rename must be a string: {rename!r}")

        dependencies = data.get("dependencies")
        if dependencies is not None and (
            not isinstance(dependencies, list)
            or not all(isinstance(dep, str) for dep in dependencies)
        ):
            raise ParseError(
                f"Lock package dependencies must be strings: {dependencies!r}"
            )

        return cls(node_id, name, version, source, dependencies, rename)


@dataclass(frozen=True)
class Lock:
    """A complete lock snapshot.

    Attributes:
        package: Locked packages, or None for an empty lock.
        metadata: Free-form text entries, eg checksums.
    """

    package: Optional[Tuple[LockPackage, ...]] = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.package is not None:
            object.__setattr__(self, "package", tuple(self.package))
        object.__setattr__(self, "metadata", dict(self.metadata))

    @classmethod
    def from_packages(
        cls,
        packages: Iterable[Package],
        metadata: Optional[Mapping[str, str]] = None,
        source: Optional[str] = None,
    ) -> "Lock":
        """Snapshot resolved packages in one go."""
        locked = tuple(LockPackage.from_package(package, source) for package in packages)
        return cls(locked or None, dict(metadata or {}))

    @property
    def packages(self) -> Tuple[LockPackage, ...]:
        return self.package or ()

    def find(self, name: str) -> List[LockPackage]:
        """Return the locked packages named *name*, renamed ones included."""
        return [package for package in self.packages if compare_names(package.name, name)]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"metadata": dict(self.metadata)}
        if self.package is not None:
            data["package"] = [package.to_dict() for package in self.package]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Lock":
        """Build from a mapping shaped like :meth:`to_dict` output.

        Raises:
            ParseError: The mapping doesn't have the lock shape.
        """
        raw_packages = data.get("package")
        if raw_packages is not None and not isinstance(raw_packages, list):
            raise ParseError("Lock 'package' must be a list of tables")

        metadata = data.get("metadata", {})
        if not isinstance(metadata, Mapping) or not all(
            isinstance(key, str) and isinstance(value, str)
            for key, value in metadata.items()
        ):
            raise ParseError("Lock 'metadata' must map strings to strings")

        packages = None
        if raw_packages is not None:
            for raw in raw_packages:
                if not isinstance(raw, Mapping):
                    raise ParseError(f"Lock package must be a table: {raw!r}")
            packages = tuple(LockPackage.from_dict(raw) for raw in raw_packages)

        return cls(packages, metadata)

    @classmethod
    def from_toml(cls, text: str) -> "Lock":
        """Parse lock TOML text.

        Raises:
            ParseError: The text isn't valid TOML or doesn't have the lock
                shape.
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ParseError(f"Invalid lock TOML: {exc}", text=text) from exc
        return cls.from_dict(data)
