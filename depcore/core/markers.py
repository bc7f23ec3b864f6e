"""Environment marker parsing for requirement strings.

Index metadata attaches conditions to a requirement after a ``;``::

    win-unicode-console (>=0.5) ; sys_platform == "win32" and python_version < "3.6"
    pathlib2; extra == "test" and ( python_version == "2.7")

This module parses the marker expression with a small recursive-descent
parser and lifts the three conditions a requirement can carry: ``extra``,
``sys_platform`` and ``python_version``. Boolean structure is not kept; a
later clause for the same key overwrites an earlier one. Clauses for any
other key are logged and ignored.

Grammar::

    expr     := and_expr ("or" and_expr)*
    and_expr := atom ("and" atom)*
    atom     := "(" expr ")" | operand op operand
    operand  := NAME | STRING
    op       := "===" | "~=" | "==" | "!=" | "<=" | ">=" | "<" | ">"
              | "^" | "~" | "in" | "not" "in"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, NamedTuple, NoReturn, Optional, Tuple

from depcore.constants import RECOGNIZED_MARKERS
from depcore.exceptions import ParseError
from depcore.models.constraint import Constraint, ReqType
from depcore.models.platform import Os
from depcore.models.version import Version
from depcore.utils.logger import get_logger

logger = get_logger("markers")

__all__ = ["MarkerClause", "Markers", "parse_marker_clauses", "parse_markers"]

_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<lparen>\()
      | (?P<rparen>\))
      | (?P<string>'[^']*'|"[^"]*")
      | (?P<op>===|~=|==|!=|<=|>=|<|>|\^|~)
      | (?P<name>[A-Za-z_][A-Za-z0-9_.\-]*)
    )
    """,
    re.VERBOSE,
)

# Operators mirrored when the variable is on the right-hand side.
_MIRRORED_OPS = {"<": ">", ">": "<", "<=": ">=", ">=": "<="}


class _Token(NamedTuple):
    kind: str
    value: str
    pos: int


class MarkerClause(NamedTuple):
    """One ``variable op "value"`` comparison, variable on the left."""

    variable: str
    op: str
    value: str


@dataclass(frozen=True)
class Markers:
    """Conditions lifted from a marker expression."""

    extra: Optional[str] = None
    sys_platform: Optional[Tuple[ReqType, Os]] = None
    python_version: Optional[Constraint] = None


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    end = len(text.rstrip())
    while pos < end:
        match = _TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise ParseError(
                f"Problem parsing markers at position {pos}: {text}", text=text
            )
        kind = match.lastgroup or ""
        value = match.group(kind)
        if kind == "string":
            value = value[1:-1]
        tokens.append(_Token(kind, value, match.start(kind)))
        pos = match.end()
    return tokens


class _MarkerParser:
    """Recursive-descent parser producing the comparison clauses in order."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.index = 0
        self.clauses: List[MarkerClause] = []

    def parse(self) -> List[MarkerClause]:
        if self.tokens:
            self._expr()
        if self.index != len(self.tokens):
            self._fail("unexpected trailing input")
        return self.clauses

    def _peek(self) -> Optional[_Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            self._fail("unexpected end of markers")
        self.index += 1
        return token

    def _at_keyword(self, keyword: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == "name" and token.value == keyword

    def _fail(self, reason: str) -> NoReturn:
        raise ParseError(
            f"Problem parsing markers ({reason}): {self.text}", text=self.text
        )

    def _expr(self) -> None:
        self._and_expr()
        while self._at_keyword("or"):
            self.index += 1
            self._and_expr()

    def _and_expr(self) -> None:
        self._atom()
        while self._at_keyword("and"):
            self.index += 1
            self._atom()

    def _atom(self) -> None:
        token = self._peek()
        if token is not None and token.kind == "lparen":
            self.index += 1
            self._expr()
            if self._next().kind != "rparen":
                self._fail("expected ')'")
            return
        self._clause()

    def _operand(self) -> _Token:
        token = self._next()
        if token.kind not in ("name", "string"):
            self._fail(f"expected a name or string, got {token.value!r}")
        return token

    def _operator(self) -> str:
        token = self._next()
        if token.kind == "op":
            return token.value
        if token.kind == "name" and token.value == "in":
            return "in"
        if token.kind == "name" and token.value == "not" and self._at_keyword("in"):
            self.index += 1
            return "not in"
        self._fail(f"expected an operator, got {token.value!r}")

    def _clause(self) -> None:
        left = self._operand()
        op = self._operator()
        right = self._operand()

        if left.kind == "name" and right.kind == "string":
            self.clauses.append(MarkerClause(left.value, op, right.value))
        elif left.kind == "string" and right.kind == "name":
            self.clauses.append(
                MarkerClause(right.value, _MIRRORED_OPS.get(op, op), left.value)
            )
        else:
            self._fail(f"can't compare {left.value!r} with {right.value!r}")


def parse_marker_clauses(text: Optional[str]) -> List[MarkerClause]:
    """Return every comparison in a marker expression, in source order.

    Raises:
        ParseError: The expression is not well formed.
    """
    if not text or not text.strip():
        return []
    return _MarkerParser(text).parse()


def parse_markers(text: Optional[str]) -> Markers:
    """Lift ``extra``, ``sys_platform`` and ``python_version`` from markers.

    Example::

        >>> parse_markers('sys_platform == "win32" and python_version < "3.6"')
        Markers(extra=None, sys_platform=(<ReqType.EXACT: '=='>, <Os.WINDOWS32: 'windows32'>), ...)

    Raises:
        ParseError: The expression is not well formed.
    """
    extra: Optional[str] = None
    sys_platform: Optional[Tuple[ReqType, Os]] = None
    python_version: Optional[Constraint] = None

    for clause in parse_marker_clauses(text):
        if clause.variable not in RECOGNIZED_MARKERS:
            logger.warning("Found unexpected marker: %s", clause.variable)
            continue

        try:
            req_type = ReqType.from_str(clause.op)
        except ParseError:
            logger.warning(
                "Ignoring marker with unsupported operator: %s %s %r",
                clause.variable,
                clause.op,
                clause.value,
            )
            continue

        try:
            if clause.variable == "extra":
                extra = clause.value
            elif clause.variable == "sys_platform":
                sys_platform = (req_type, Os.from_str(clause.value))
            else:
                python_version = Constraint(req_type, Version.from_str(clause.value))
        except ParseError as exc:
            logger.warning("Ignoring marker %s: %s", clause.variable, exc)

    return Markers(extra, sys_platform, python_version)
