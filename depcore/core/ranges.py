"""Range algebra over version constraints.

Constraints are combined with AND logic by intersecting their compatible
ranges. Results are lists of inclusive ``(min, max)`` pairs joined with OR
logic; an empty list means no version satisfies every constraint.

A ``!=`` constraint is two ranges joined with OR. When several constraints
are intersected, ``!=`` is folded in as "any version" by default, so the
excluded point is not subtracted. Pass ``strict_not_equal=True`` to
subtract it. A lone ``!=`` always yields its two ranges.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from depcore.models.constraint import Constraint, ReqType, VersionRange
from depcore.models.version import Version
from depcore.utils.logger import get_logger

logger = get_logger("ranges")

__all__ = [
    "intersection",
    "intersection_many",
    "is_satisfiable",
    "best_match",
]


def _full_range() -> VersionRange:
    return (Version.min(), Version.max())


def intersection(
    ranges1: Sequence[VersionRange],
    ranges2: Sequence[VersionRange],
) -> List[VersionRange]:
    """Intersect two sets of ranges. Uses AND logic for everything.

    Every pair is compared; ``(a, b)`` and ``(c, d)`` overlap when
    ``d >= a`` and ``b >= c``, and the overlap is ``(max(a, c), min(b, d))``.

    Example::

        >>> intersection(
        ...     [(Version.new(3, 0, 0), Version.new(3, 9, 0))],
        ...     [(Version.new(3, 3, 6), Version.new(3, 3, 6))],
        ... )
        [(Version('3.3.6'), Version('3.3.6'))]
    """
    result: List[VersionRange] = []
    for low1, high1 in ranges1:
        for low2, high2 in ranges2:
            if high2 >= low1 and high1 >= low2:
                result.append((max(low1, low2), min(high1, high2)))
    return result


def intersection_many(
    constraints: Sequence[Constraint],
    *,
    strict_not_equal: bool = False,
) -> List[VersionRange]:
    """Intersect any number of constraints.

    Args:
        constraints: Constraints combined with AND logic.
        strict_not_equal: Subtract the versions excluded by ``!=``
            constraints instead of treating them as "any version".

    Returns:
        Sorted, de-duplicated ranges joined with OR logic.

    Example::

        >>> intersection_many([
        ...     Constraint(ReqType.GTE, Version.new(4, 9, 2)),
        ...     Constraint(ReqType.LT, Version.new(5, 5, 5)),
        ... ])
        [(Version('4.9.2'), Version('5.5.4'))]
    """
    if not constraints:
        return [_full_range()]

    if len(constraints) == 1:
        return constraints[0].compatible_range()

    acc: List[VersionRange] = [_full_range()]
    for constraint in constraints:
        if constraint.req_type is ReqType.NE and not strict_not_equal:
            logger.debug("Not subtracting %s from the intersection", constraint)
            continue
        acc = intersection(constraint.compatible_range(), acc)
        if not acc:
            break

    return sorted(set(acc))


def is_satisfiable(
    constraints: Sequence[Constraint],
    *,
    strict_not_equal: bool = False,
) -> bool:
    """Return True if at least one version can satisfy every constraint."""
    return bool(intersection_many(constraints, strict_not_equal=strict_not_equal))


def best_match(
    constraints: Sequence[Constraint],
    candidates: Iterable[Version],
) -> Optional[Version]:
    """Return the highest candidate that satisfies every constraint.

    Uses :meth:`Constraint.is_compatible` directly, so ``!=`` constraints
    always exclude their version here.
    """
    compatible = [
        candidate
        for candidate in candidates
        if all(constraint.is_compatible(candidate) for constraint in constraints)
    ]
    return max(compatible, default=None)
