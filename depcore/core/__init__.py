"""
Core functionality exports for depcore.

    from depcore.core import intersection_many, DependencyGraph
"""

from __future__ import annotations

from depcore.core.ranges import (
    best_match,
    intersection,
    intersection_many,
    is_satisfiable,
)
from depcore.core.markers import Markers, parse_markers
from depcore.core.parser import (
    parse_pip_lines,
    parse_pip_requirement,
    parse_requirement,
)
from depcore.core.graph import DependencyGraph
from depcore.core.index import PyPIIndex, SyncVersionSource

__all__ = [
    "intersection",
    "intersection_many",
    "is_satisfiable",
    "best_match",
    "Markers",
    "parse_markers",
    "parse_requirement",
    "parse_pip_requirement",
    "parse_pip_lines",
    "DependencyGraph",
    "PyPIIndex",
    "SyncVersionSource",
]
