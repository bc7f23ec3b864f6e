"""Check command implementation for depcore.

Shows which versions a set of constraints admits and, optionally, whether
particular versions satisfy them.

Typical usage::

    # Admissible ranges of a constraint set
    $ depcore check ">=2.7, !=3.0.0, <3.5"

    # Test candidate versions against it
    $ depcore check "^0.3.1" 0.3.4 0.4.0

    # Subtract != versions from the ranges
    $ depcore check --strict-ne ">=1.0, !=1.5.0" 1.5.0

    # Machine-readable output
    $ depcore check --format json "~1.2" 1.2.9
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional, Tuple

import click

from depcore.context import DepcoreContext, pass_context
from depcore.core.ranges import best_match, intersection_many
from depcore.exceptions import DepcoreError
from depcore.models.constraint import Constraint, VersionRange
from depcore.models.version import Version
from depcore.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)
from depcore.utils.logger import get_logger

logger = get_logger("commands.check")


@click.command()
@click.argument("constraints")
@click.argument("versions", nargs=-1)
@click.option(
    "--strict-ne/--lenient-ne",
    default=None,
    help="Subtract != versions from the admissible ranges (default: from config).",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def check(
    ctx: DepcoreContext,
    constraints: str,
    versions: Tuple[str, ...],
    strict_ne: Optional[bool],
    format: str,
) -> None:
    """Show the versions admitted by comma-separated CONSTRAINTS.

    Each VERSION given is tested against every constraint.

    Exits 1 if no version can satisfy the constraints or any VERSION is
    incompatible, 0 otherwise.
    """
    strict = ctx.config.strict_not_equal if strict_ne is None else strict_ne

    try:
        parsed = Constraint.from_str_multiple(constraints)
        candidates = [Version.from_str(text) for text in versions]
    except DepcoreError as exc:
        print_error(str(exc))
        sys.exit(1)

    ranges = intersection_many(parsed, strict_not_equal=strict)
    results = [
        (version, all(c.is_compatible(version) for c in parsed)) for version in candidates
    ]
    best = best_match(parsed, candidates)
    logger.debug("Constraints %s admit %s", constraints, ranges)

    if format == "json":
        _display_json(parsed, ranges, results, best)
    else:
        _display_table(parsed, ranges, results, best)

    ok = bool(ranges) and all(compatible for _, compatible in results)
    sys.exit(0 if ok else 1)


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _format_bound(version: Version) -> str:
    return "*" if version == Version.max() else str(version)


def _display_table(
    parsed: List[Constraint],
    ranges: List[VersionRange],
    results: List[Tuple[Version, bool]],
    best: Optional[Version],
) -> None:
    console = get_raw_console()
    console.print(f"Constraints: {', '.join(str(c) for c in parsed)}")

    if not ranges:
        print_warning("No version satisfies every constraint")
    else:
        for low, high in ranges:
            console.print(f"  {low} - {_format_bound(high)}")

    if not results:
        return

    rows: List[Dict[str, str]] = [
        {
            "Version": str(version),
            "Compatible": "[green]yes[/green]" if compatible else "[red]no[/red]",
        }
        for version, compatible in results
    ]
    print_table(
        rows,
        title="Candidates",
        column_styles={"Version": {"style": "bold cyan", "no_wrap": True}},
    )

    if best is not None:
        print_success(f"Best match: {best}")
    else:
        print_warning("No candidate is compatible")


def _display_json(
    parsed: List[Constraint],
    ranges: List[VersionRange],
    results: List[Tuple[Version, bool]],
    best: Optional[Version],
) -> None:
    data: Dict[str, Any] = {
        "constraints": [str(c) for c in parsed],
        "ranges": [[str(low), str(high)] for low, high in ranges],
        "satisfiable": bool(ranges),
        "versions": {str(version): compatible for version, compatible in results},
        "best_match": str(best) if best is not None else None,
    }
    click.echo(json.dumps(data, indent=2))
