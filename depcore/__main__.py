"""
Executable module for depcore.

Running ``python -m depcore`` is equivalent to running ``depcore``.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: BaseException) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from depcore.__version__ import __version__

        sys.stderr.write(f"depcore version: {__version__}\n")
    except Exception:
        sys.stderr.write("depcore version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"{type(exc).__name__}: {exc}\n")


def main() -> int:
    """Run the CLI and return its exit code."""
    try:
        # Imported lazily so the CLI's dependencies load only when used
        from depcore.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
