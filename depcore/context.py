"""
Shared context object for depcore CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from depcore.config import DepcoreConfig


class DepcoreContext:
    """Per-invocation state shared by depcore CLI commands.

    Attributes:
        config_path: Path to the configuration file in use, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: DepcoreConfig = DepcoreConfig()


#: Click decorator for injecting :class:`DepcoreContext` into commands.
pass_context = click.make_pass_decorator(DepcoreContext, ensure=True)
