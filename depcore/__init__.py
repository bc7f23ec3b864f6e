"""
depcore: dependency-version reasoning for Python packages.

depcore parses versions, constraints and requirements in the dialects used
by manifests, package index metadata and flat requirement lists, computes
which versions a set of constraints admits, and models the resolved
dependency graph: conflicting versions of the same package, the aliases
they get installed under, and the lock snapshot built from it.

Resolving a graph and installing packages are left to the caller.
"""

from __future__ import annotations

from depcore.__version__ import __version__

__author__ = "depcore Contributors"
__license__ = "Apache-2.0"
__description__ = "Version, constraint and requirement reasoning for Python packages."

__all__ = [
    "__version__",
]
