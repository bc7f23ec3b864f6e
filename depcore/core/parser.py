"""Requirement text parser.

Three dialects are understood:

- Manifest style, as written in ``pyproject.toml``::

      saturn = ">=0.3.4, <0.4"
      matplotlib

- Index metadata style, as found in ``requires_dist``::

      argon2-cffi (>=16.1.0) ; extra == 'argon2'
      pathlib2; extra == "test" and ( python_version == "2.7")

- Flat requirements-list (pip) style::

      requests>=2.25.0,!=2.26.0
      uvicorn[standard]^=0.12

Typical usage::

    from depcore.core.parser import parse_requirement

    req = parse_requirement("saturn (>=0.3.4)", pypi_fmt=True)
    print(req.name, req.constraints)
"""

from __future__ import annotations

import re
from typing import Iterable, List

from depcore.constants import (
    REQ_MANIFEST_NOVERS_PATTERN,
    REQ_MANIFEST_PATTERN,
    REQ_METADATA_NOVERS_PATTERN,
    REQ_METADATA_PATTERN,
    REQ_PIP_NAME_PATTERN,
    REQ_PIP_PATTERN,
)
from depcore.core.markers import parse_markers
from depcore.exceptions import ParseError
from depcore.models.constraint import Constraint
from depcore.models.requirement import Requirement
from depcore.utils.logger import get_logger

logger = get_logger("parser")

__all__ = ["parse_requirement", "parse_pip_requirement", "parse_pip_lines"]

_MANIFEST_RE = re.compile(REQ_MANIFEST_PATTERN)
_MANIFEST_NOVERS_RE = re.compile(REQ_MANIFEST_NOVERS_PATTERN)
_METADATA_RE = re.compile(REQ_METADATA_PATTERN)
_METADATA_NOVERS_RE = re.compile(REQ_METADATA_NOVERS_PATTERN)
_PIP_NAME_RE = re.compile(REQ_PIP_NAME_PATTERN)
_PIP_RE = re.compile(REQ_PIP_PATTERN)
_EXTRAS_RE = re.compile(r"^([^\[\]]+)\[([^\[\]]*)\]$")


def parse_requirement(text: str, pypi_fmt: bool = False) -> Requirement:
    """Parse a manifest-style or index-metadata-style requirement.

    Args:
        text: Requirement text.
        pypi_fmt: Parse index metadata style instead of manifest style.

    Raises:
        ParseError: The text matches neither the versioned nor the
            version-less form, or a constraint or marker is malformed.
    """
    versioned_re = _METADATA_RE if pypi_fmt else _MANIFEST_RE
    match = versioned_re.match(text)
    if match is not None:
        markers = parse_markers(match.group(3) if pypi_fmt else None)
        return Requirement(
            name=match.group(1),
            constraints=Constraint.from_str_multiple(match.group(2)),
            extra=markers.extra,
            sys_platform=markers.sys_platform,
            python_version=markers.python_version,
        )

    novers_re = _METADATA_NOVERS_RE if pypi_fmt else _MANIFEST_NOVERS_RE
    match = novers_re.match(text)
    if match is not None:
        markers = parse_markers(match.group(2) if pypi_fmt else None)
        logger.debug("No version specified for %s", match.group(1))
        return Requirement(
            name=match.group(1),
            extra=markers.extra,
            sys_platform=markers.sys_platform,
            python_version=markers.python_version,
        )

    raise ParseError(f"Problem parsing version requirement: {text}", text=text)


def parse_pip_requirement(text: str) -> Requirement:
    """Parse one line of a flat requirements list.

    A bare name means "any version". Extras in brackets after the name
    become ``install_with_extras``.

    Raises:
        ParseError: The line has neither a bare name nor an operator.
    """
    text = text.strip()
    if _PIP_NAME_RE.match(text):
        return Requirement(text)

    match = _PIP_RE.match(text)
    if match is None:
        extras_match = _EXTRAS_RE.match(text)
        if extras_match is None:
            raise ParseError(f"Problem parsing requirement: {text}", text=text)
        name, extras = _split_extras(extras_match)
        return Requirement(name, install_with_extras=extras)

    name = match.group(1).strip()
    if not name:
        raise ParseError(f"Problem parsing requirement: {text}", text=text)

    extras = None
    extras_match = _EXTRAS_RE.match(name)
    if extras_match is not None:
        name, extras = _split_extras(extras_match)

    # Pip writes caret and tilde as ``^=`` and ``~=``.
    constraints_text = match.group(2).replace("^=", "^").replace("~=", "~")
    return Requirement(
        name,
        Constraint.from_str_multiple(constraints_text),
        install_with_extras=extras,
    )


def parse_pip_lines(lines: Iterable[str]) -> List[Requirement]:
    """Parse a flat requirements list, skipping blank lines and comments."""
    requirements: List[Requirement] = []
    for line in lines:
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        requirements.append(parse_pip_requirement(line))
    return requirements


def _split_extras(match: "re.Match[str]") -> tuple:
    name = match.group(1).strip()
    extras = tuple(e.strip() for e in match.group(2).split(",") if e.strip())
    return name, extras
