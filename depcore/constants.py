"""
Shared constants for depcore.

Version sentinels, the regular expressions behind the text formats for
versions, constraints and requirements, package index defaults and log
formats. Treat everything here as read-only.
"""

from typing import Final, Mapping

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "depcore/{version} (https://github.com/depcore/depcore)"

# ---------------------------------------------------------------------------
# Version sentinels
# ---------------------------------------------------------------------------

#: Stand-in for "infinity" in an open-ended range. No real version component
#: may reach it.
MAX_VER: Final[int] = 999_999

#: Largest value a single numeric version component may hold (unsigned 32 bit).
MAX_COMPONENT: Final[int] = 2**32 - 1

#: Parent id used for nodes required directly by the project.
ROOT_ID: Final[int] = 0

# ---------------------------------------------------------------------------
# Text grammars
# ---------------------------------------------------------------------------

#: ``major(.minor)?(.patch)?(.extra)?(tag num)?``; ``*`` is replaced by ``0`` first.
VERSION_PATTERN: Final[str] = (
    r"^(\d+)\.?(\d+)?\.?(\d+)?\.?(\d+)?(?:(a|b|rc|dep)(\d+))?$"
)

#: Optional operator followed by a version.
CONSTRAINT_PATTERN: Final[str] = r"^(\^|~|==|<=|>=|<|>|!=)?(.*)$"

#: Warehouse ``python_version`` wheel tag segment, eg ``cp37`` or ``py3``.
WHEEL_PY_VERSION_PATTERN: Final[str] = r"^(?:cp|py|pp)?([234])(\d)?$"

#: ``saturn = ">=0.3.4"`` as found in ``pyproject.toml``.
REQ_MANIFEST_PATTERN: Final[str] = r"""^(.*?)\s*=\s*["'](.*)["']$"""

#: ``argon2-cffi (>=16.1.0) ; extra == 'argon2'`` as found in index metadata.
#: The name class excludes ``;`` and the version group is non-greedy so a
#: later set of parentheses inside the markers is never captured.
REQ_METADATA_PATTERN: Final[str] = (
    r"^([a-zA-Z\-0-9._]+)\s+\((.*?)\)(?:(?:\s*;\s*)(.*))?$"
)

#: Metadata style without a version, eg ``pathlib2; extra == "test"``.
REQ_METADATA_NOVERS_PATTERN: Final[str] = r"^([a-zA-Z\-0-9._]+)(?:(?:\s*;\s*)(.*))?$"

#: Manifest style without a version.
REQ_MANIFEST_NOVERS_PATTERN: Final[str] = r"^([a-zA-Z\-0-9._]+)$"

#: Bare name in a flat requirements list.
REQ_PIP_NAME_PATTERN: Final[str] = r"^([a-zA-Z\-0-9]+)$"

#: Name followed by one or more constraints in a flat requirements list.
REQ_PIP_PATTERN: Final[str] = r"^(.*?)((?:\^|~|==|<=|>=|<|>|!=).*)$"

#: Marker keys that become fields on a requirement.
RECOGNIZED_MARKERS: Final[tuple] = ("extra", "sys_platform", "python_version")

#: ``sys_platform`` marker values and the platform each one stands for.
SYS_PLATFORM_ALIASES: Final[Mapping[str, str]] = {
    "linux": "linux",
    "linux2": "linux",
    "linux32": "linux32",
    "win32": "windows32",
    "win": "windows",
    "windows": "windows",
    "cygwin": "windows",
    "darwin": "mac",
    "macos": "mac",
    "any": "any",
}

# ---------------------------------------------------------------------------
# Renames
# ---------------------------------------------------------------------------

#: Alias template for a package installed next to an incompatible version of
#: itself.
RENAME_TEMPLATE: Final[str] = "{name}_renamed_{id}"

# ---------------------------------------------------------------------------
# Package index
# ---------------------------------------------------------------------------

#: Base URL for the PyPI JSON API.
PYPI_JSON_API: Final[str] = "https://pypi.org/pypi/{package}/json"

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Subtract ``!=`` points when intersecting many constraints.
DEFAULT_STRICT_NOT_EQUAL: Final[bool] = False

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
