"""Req command implementation for depcore.

Parses a single requirement and shows what depcore understood, or writes
it back in manifest style.

Typical usage::

    $ depcore req 'saturn = ">=0.3.4, <0.4"'
    $ depcore req --format metadata 'pathlib2 (>=2.3) ; python_version < "3.5"'
    $ depcore req --format pip 'requests[socks]>=2.0'

    # Manifest line; looks up the latest version when unconstrained
    $ depcore req --cfg --format pip requests
"""

from __future__ import annotations

import sys
from typing import Dict, List

import click

from depcore.context import DepcoreContext, pass_context
from depcore.core.index import SyncVersionSource
from depcore.exceptions import DepcoreError
from depcore.models.requirement import Requirement
from depcore.utils.console import print_error, print_table
from depcore.utils.logger import get_logger

logger = get_logger("commands.req")


@click.command()
@click.argument("text")
@click.option(
    "--format",
    "-f",
    "dialect",
    type=click.Choice(["manifest", "metadata", "pip"], case_sensitive=False),
    default="manifest",
    help="Dialect TEXT is written in.",
)
@click.option(
    "--cfg",
    is_flag=True,
    help="Print the requirement as a manifest line instead.",
)
@pass_context
def req(ctx: DepcoreContext, text: str, dialect: str, cfg: bool) -> None:
    """Parse the requirement TEXT and show its fields."""
    try:
        requirement = _parse(text, dialect)
        if cfg:
            index = SyncVersionSource(ctx.config.index_url, ctx.config.timeout)
            click.echo(requirement.to_cfg_string(index))
            return
    except DepcoreError as exc:
        print_error(str(exc))
        logger.debug("Requirement failed: %r", text, exc_info=True)
        sys.exit(1)

    _display_table(requirement)


def _parse(text: str, dialect: str) -> Requirement:
    if dialect == "pip":
        return Requirement.from_pip_str(text)
    return Requirement.from_str(text, pypi_fmt=dialect == "metadata")


def _display_table(requirement: Requirement) -> None:
    platform = None
    if requirement.sys_platform is not None:
        req_type, os = requirement.sys_platform
        platform = f"{req_type}{os.value}"

    fields = [
        ("Name", requirement.name),
        ("Constraints", ", ".join(str(c) for c in requirement.constraints) or "any"),
        ("Extra", requirement.extra),
        ("Platform", platform),
        ("Python", requirement.python_version),
        ("Install extras", ", ".join(requirement.install_with_extras or ()) or None),
    ]
    rows: List[Dict[str, str]] = [
        {"Field": name, "Value": "-" if value is None else str(value)}
        for name, value in fields
    ]
    print_table(rows, title="Requirement", column_styles={"Field": {"style": "bold"}})
