"""
depcore version information.

Single source of truth for the package version, used by packaging metadata,
the HTTP User-Agent and ``depcore --version``.
"""

from __future__ import annotations

__version__ = "0.2.0"
