"""
Package name helpers for depcore.

Index naming is not consistent about capitalization or ``-`` vs ``_``, so
names are compared in their PEP 503 canonical form.
"""

from __future__ import annotations

from packaging.utils import canonicalize_name


def normalize_name(name: str) -> str:
    """Return the PEP 503 canonical form of *name*.

    Example::

        >>> normalize_name("Flask_Login")
        'flask-login'
    """
    return str(canonicalize_name(name))


def standardize_name(name: str) -> str:
    """Return *name* lower-cased with ``_`` separators.

    This is the spelling used for import-safe aliases such as rename
    targets.

    Example::

        >>> standardize_name("Zope.Interface")
        'zope_interface'
    """
    return normalize_name(name).replace("-", "_")


def compare_names(name1: str, name2: str) -> bool:
    """Return True if two package names refer to the same project."""
    return normalize_name(name1) == normalize_name(name2)
