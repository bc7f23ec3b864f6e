"""Configuration file loader for depcore.

Two formats are supported:

- ``depcore.toml``, settings under a ``[depcore]`` table
- ``pyproject.toml``, settings under a ``[tool.depcore]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DEPCORE_CONFIG``
2. ``depcore.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.depcore]`` section

Example (``depcore.toml``)::

    [depcore]
    strict_not_equal = true
    index_url = "https://pypi.org/pypi/{package}/json"
    timeout = 10
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import tomli as tomllib

from depcore.constants import DEFAULT_STRICT_NOT_EQUAL, DEFAULT_TIMEOUT, PYPI_JSON_API
from depcore.exceptions import ConfigError
from depcore.utils.logger import get_logger

logger = get_logger("config")

#: Environment variable naming an explicit configuration file.
CONFIG_ENV_VAR = "DEPCORE_CONFIG"


@dataclass
class DepcoreConfig:
    """Parsed and validated depcore configuration.

    All fields have defaults, so an empty section is valid.

    Attributes:
        strict_not_equal: Subtract ``!=`` versions when intersecting
            several constraints.
        index_url: Package index JSON API URL with a ``{package}``
            placeholder.
        timeout: Package index request timeout, in seconds.
        source_path: Path of the loaded file, or ``None`` for defaults.
    """

    strict_not_equal: bool = DEFAULT_STRICT_NOT_EQUAL
    index_url: str = PYPI_JSON_API
    timeout: int = DEFAULT_TIMEOUT

    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        return {
            "strict_not_equal": self.strict_not_equal,
            "index_url": self.index_url,
            "timeout": self.timeout,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Locate the configuration file for this run.

    An explicit path wins and must point at an existing file. Otherwise
    ``depcore.toml`` in the working directory is used, then a
    ``pyproject.toml`` that has a ``[tool.depcore]`` table.

    Raises:
        ConfigError: *explicit_path* is not an existing file.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if resolved.is_file():
            logger.debug("Using explicit config: %s", resolved)
            return resolved
        raise ConfigError(
            f"Configuration file not found: {explicit_path}",
            config_path=str(explicit_path),
        )

    here = Path.cwd()
    candidates = (
        (here / "depcore.toml", lambda path: True),
        (here / "pyproject.toml", _pyproject_has_depcore_section),
    )
    for candidate, accepts in candidates:
        if candidate.is_file() and accepts(candidate):
            logger.debug("Found configuration: %s", candidate)
            return candidate

    logger.debug("No configuration file found")
    return None


def _pyproject_has_depcore_section(path: Path) -> bool:
    # A broken pyproject.toml just means "no config here".
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "depcore" in tool


def load_config(config_path: Optional[Path] = None) -> DepcoreConfig:
    """Load and validate depcore configuration.

    Args:
        config_path: Explicit path to a config file. If ``None``, the file
            is discovered (see :func:`discover_config_file`).

    Returns:
        Validated :class:`DepcoreConfig`, with defaults when no file exists.

    Raises:
        ConfigError: The file can't be parsed, has unknown keys or has
            invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return DepcoreConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        tool = raw.get("tool", {})
        section = tool.get("depcore", {}) if isinstance(tool, dict) else {}
    else:
        section = raw.get("depcore", {})

    if not isinstance(section, dict):
        raise ConfigError(
            "The depcore configuration must be a table", config_path=str(resolved)
        )

    if not section:
        logger.debug("Config file found but no depcore section, using defaults")
        return DepcoreConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Parse *path* as TOML, reporting any failure as :class:`ConfigError`."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}", config_path=str(path)
        ) from exc

    try:
        return tomllib.loads(data.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}", config_path=str(path)
        ) from exc


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_index_url(value: Any) -> bool:
    return isinstance(value, str) and "{package}" in value


#: option -> (validator, description used in error messages)
_OPTIONS: Dict[str, Tuple[Callable[[Any], bool], str]] = {
    "strict_not_equal": (_is_bool, "a boolean"),
    "index_url": (_is_index_url, "a string containing '{package}'"),
    "timeout": (_is_positive_int, "a positive integer"),
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> DepcoreConfig:
    """Validate a ``[depcore]`` or ``[tool.depcore]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    unknown = set(section) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = DepcoreConfig()
    for option, value in section.items():
        is_valid, expected = _OPTIONS[option]
        if not is_valid(value):
            raise ConfigError(
                f"{option} must be {expected}, got {value!r}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, value)

    return config
