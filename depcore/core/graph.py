"""Dependency graph arena.

:class:`DependencyGraph` stores the nodes a resolver chose, indexed by id,
and answers the questions needed before installing them: which nodes of the
same package collide, and which must be installed under an alias.

Ids are assigned per graph, starting at 1; ``ROOT_ID`` (0) stands for the
project itself. Parents are always added before their children, so the
parent links form a tree.

Typical usage::

    graph = DependencyGraph(root_reqs=[Requirement.from_str('a = "^1.0"')])
    a = graph.add("a", Version.new(1, 2, 0), reqs=a_reqs)
    graph.add("b", Version.new(0, 3, 1), parent=a)

    for conflict_set in graph.find_conflicts():
        print(conflict_set.package_name, len(conflict_set))

    packages = graph.to_packages()
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from depcore.constants import ROOT_ID
from depcore.core.ranges import intersection_many
from depcore.exceptions import DependencyError
from depcore.models.conflict import Conflict, ConflictSet
from depcore.models.constraint import Constraint
from depcore.models.package import Dependency, Package, Rename, rename_alias
from depcore.models.requirement import Requirement
from depcore.models.version import Version
from depcore.utils.logger import get_logger
from depcore.utils.names import normalize_name

logger = get_logger("graph")

__all__ = ["DependencyGraph"]


class DependencyGraph:
    """Id-indexed store of resolved dependency nodes.

    Args:
        root_reqs: The project's own requirements; they drive root-level
            nodes.
        strict_not_equal: Subtract ``!=`` points when checking whether two
            nodes could share a version.
    """

    def __init__(
        self,
        root_reqs: Iterable[Requirement] = (),
        *,
        strict_not_equal: bool = False,
    ) -> None:
        self.root_reqs = tuple(root_reqs)
        self.strict_not_equal = strict_not_equal
        self._nodes: Dict[int, Dependency] = {}
        self._next_id = ROOT_ID + 1

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        version: Version,
        parent: int = ROOT_ID,
        reqs: Iterable[Requirement] = (),
    ) -> int:
        """Add a node and return its id.

        Raises:
            DependencyError: *parent* is neither ``ROOT_ID`` nor a known
                node.
        """
        if parent != ROOT_ID and parent not in self._nodes:
            raise DependencyError(
                f"Unknown parent id {parent} for {name}", package_name=name
            )

        node_id = self._next_id
        self._next_id += 1
        self._nodes[node_id] = Dependency(node_id, parent, name, version, tuple(reqs))
        logger.debug("Added %s %s as #%d (parent #%d)", name, version, node_id, parent)
        return node_id

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def get(self, node_id: int) -> Dependency:
        """Return the node with *node_id*.

        Raises:
            DependencyError: No such node.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise DependencyError(f"Unknown dependency id {node_id}") from None

    def children(self, node_id: int) -> List[Dependency]:
        """Return the nodes *node_id* requires directly, in id order."""
        return [node for node in self._nodes.values() if node.parent == node_id]

    def ancestors(self, node_id: int) -> List[Dependency]:
        """Return the chain of requiring nodes, nearest first."""
        chain: List[Dependency] = []
        parent = self.get(node_id).parent
        while parent != ROOT_ID:
            node = self._nodes[parent]
            chain.append(node)
            parent = node.parent
        return chain

    def by_name(self, name: str) -> List[Dependency]:
        """Return every node for package *name*, in id order."""
        wanted = normalize_name(name)
        return [node for node in self._nodes.values() if node.normalized_name == wanted]

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # ------------------------------------------------------------------
    # Constraints and conflicts
    # ------------------------------------------------------------------

    def driving_constraints(self, node_id: int) -> List[Constraint]:
        """Return the constraints that led to the node's version.

        These come from the parent's requirements naming the node's
        package, or from the graph's root requirements for root-level nodes.
        """
        node = self.get(node_id)
        if node.parent == ROOT_ID:
            reqs: Iterable[Requirement] = self.root_reqs
        else:
            reqs = self._nodes[node.parent].reqs
        return [
            constraint
            for req in reqs
            if req.matches_name(node.name)
            for constraint in req.constraints
        ]

    def find_conflicts(self) -> List[ConflictSet]:
        """Group incompatible same-name nodes into conflict sets.

        The first node of each package is kept. A later node conflicts with
        it when the two were resolved to different versions and no single
        version satisfies the constraints that drove both. This is a report
        for the resolver; renaming in :meth:`to_packages` does not depend on
        it.

        Returns:
            One :class:`ConflictSet` per package with conflicts, ordered by
            the id of the first node.
        """
        groups: Dict[str, List[Dependency]] = {}
        for node in self._nodes.values():
            groups.setdefault(node.normalized_name, []).append(node)

        result: List[ConflictSet] = []
        for name, nodes in groups.items():
            existing = nodes[0]
            conflict_set = ConflictSet(name)
            for other in nodes[1:]:
                if other.version == existing.version:
                    continue
                required = self.driving_constraints(existing.id)
                required += self.driving_constraints(other.id)
                if intersection_many(required, strict_not_equal=self.strict_not_equal):
                    continue
                conflict_set.add_conflict(
                    Conflict(
                        name=name,
                        existing_id=existing.id,
                        existing_version=existing.version,
                        conflicting_id=other.id,
                        conflicting_version=other.version,
                        required=tuple(required),
                    )
                )
            if conflict_set.has_conflicts():
                logger.debug("Found %d conflict(s) for %s", len(conflict_set), name)
                result.append(conflict_set)
        return result

    # ------------------------------------------------------------------
    # Freezing
    # ------------------------------------------------------------------

    def to_packages(self) -> List[Package]:
        """Freeze the graph into :class:`Package` nodes, in id order.

        The first node of each package keeps its bare name. Every later node
        resolved to a different version is renamed to an alias derived from
        its name and id, whether or not :meth:`find_conflicts` reports it, so
        no two versions of a package ever share an install name.
        """
        first_version: Dict[str, Version] = {}
        packages: List[Package] = []
        for node in self._nodes.values():
            kept = first_version.setdefault(node.normalized_name, node.version)
            if node.version != kept:
                alias = rename_alias(node.name, node.id)
                rename = Rename.yes(node.parent, node.id, alias)
                logger.debug("Renaming %s #%d to %s", node.name, node.id, alias)
            else:
                rename = Rename.no()
            deps = tuple(
                (child.id, child.name, child.version) for child in self.children(node.id)
            )
            packages.append(
                Package(node.id, node.parent, node.name, node.version, deps, rename)
            )
        return packages
