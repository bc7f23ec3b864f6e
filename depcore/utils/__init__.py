"""
Shared helpers: Rich console output, logging, package-name handling and
the async HTTP client used for index lookups.
"""

from __future__ import annotations

from depcore.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)
from depcore.utils.names import compare_names, normalize_name, standardize_name
from depcore.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)
from depcore.utils.http import HTTPClient

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Names
    "normalize_name",
    "standardize_name",
    "compare_names",
    # HTTP
    "HTTPClient",
]
