"""
The ``depcore`` command group.

Global options (configuration file, verbosity, color) are resolved here
into a :class:`~depcore.context.DepcoreContext` that subcommands receive.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click

from depcore.__version__ import __version__
from depcore.commands.check import check
from depcore.commands.req import req
from depcore.config import CONFIG_ENV_VAR, load_config
from depcore.context import DepcoreContext
from depcore.exceptions import ConfigError, DepcoreError
from depcore.utils.console import print_error, print_warning, reconfigure_console
from depcore.utils.logger import get_logger, setup_logging

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar=CONFIG_ENV_VAR,
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DEPCORE_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="depcore",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """depcore: reason about package versions and constraints.

    \b
    Available commands:
      depcore check    Show the versions a set of constraints admits
      depcore req      Parse a requirement and show its fields

    \b
    Examples:
      depcore check ">=2.7, <3.5" 3.4.1
      depcore req --format metadata "saturn (>=0.3.4)"
      depcore -v req --cfg requests

    Use ``depcore COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        settings = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    _apply_color_preference(color)

    state = DepcoreContext()
    state.config = settings
    state.config_path = config or settings.source_path
    state.verbose = verbose
    state.color = color
    ctx.obj = state

    logger.debug(
        "depcore %s, config=%s, verbosity=%d, color=%s",
        __version__,
        state.config_path,
        verbose,
        color,
    )


#: Log level for each ``-v`` count; anything beyond the last entry is DEBUG.
_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO)


def _configure_logging(verbose: int) -> None:
    if verbose < len(_VERBOSITY_LEVELS):
        level = _VERBOSITY_LEVELS[max(verbose, 0)]
    else:
        level = logging.DEBUG
    setup_logging(level=level, verbose=level == logging.DEBUG)


def _apply_color_preference(color: bool) -> None:
    """Export the choice through ``NO_COLOR`` so Rich and our logger agree."""
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


cli.add_command(check)
cli.add_command(req)


def main() -> int:
    """Run the CLI and translate the outcome into a process exit code.

    ``0`` on success, ``1`` for depcore or unexpected errors, ``2`` for
    usage errors reported by Click and ``130`` when interrupted.
    """
    try:
        result = cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except (click.exceptions.Abort, KeyboardInterrupt):
        print_warning("\nOperation cancelled by user")
        return 130
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    except DepcoreError as exc:
        print_error(str(exc))
        logger.debug("Error details: %s", exc.details or "<none>", exc_info=True)
        return 1
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1

    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    sys.exit(main())
