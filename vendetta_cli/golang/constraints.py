"""Build constraints of Go files.

Both spellings are understood: ``//go:build <expr>`` with ``!``, ``&&``,
``||`` and parentheses, and the older ``// +build`` lines, where spaces mean
OR, commas mean AND and separate lines are ANDed. A ``//go:build`` line wins
over ``+build`` lines, as in the go tool.

Platform tags are not filtered, so a file counts as excluded only when no
combination of tags can select it while ``ignore`` stays unset.
"""

import itertools
import re

IGNORE_TAG = "ignore"

# Beyond this many distinct tags the file is assumed buildable
_MAX_FREE_TAGS = 12

_GO_BUILD_RE = re.compile(r"^//go:build\s+(.*)$")
_PLUS_BUILD_RE = re.compile(r"^//\s*\+build\s+(.*)$")
_EXPR_TOKEN_RE = re.compile(r"\s*(\(|\)|!|&&|\|\||[A-Za-z0-9_.]+)")

# Expression nodes: ("tag", name), ("not", x), ("and", x, y), ("or", x, y)
Expr = tuple


class BuildConstraints:
    """Collects the constraint comments above a file's package clause."""

    def __init__(self):
        self.go_build: Expr | None = None
        self.plus_build: list[Expr] = []

    def add_comment(self, text: str) -> None:
        """Record ``text`` if it is a constraint line.

        Raises:
            ValueError: Malformed ``//go:build`` expression
        """
        match = _GO_BUILD_RE.match(text)
        if match:
            if self.go_build is None:
                self.go_build = parse_expr(match.group(1))
            return

        match = _PLUS_BUILD_RE.match(text)
        if match:
            self.plus_build.append(_parse_plus_build(match.group(1)))

    @property
    def expr(self) -> Expr | None:
        if self.go_build is not None:
            return self.go_build
        if not self.plus_build:
            return None
        expr = self.plus_build[0]
        for line in self.plus_build[1:]:
            expr = ("and", expr, line)
        return expr

    def excluded(self) -> bool:
        """True if the file can never be part of a build."""
        expr = self.expr
        return expr is not None and not satisfiable(expr)


def parse_expr(text: str) -> Expr:
    """Parse a ``//go:build`` expression.

    Raises:
        ValueError: Malformed expression
    """
    text = text.strip()
    tokens = []
    pos = 0
    while pos < len(text):
        match = _EXPR_TOKEN_RE.match(text, pos)
        if not match:
            raise ValueError(f"invalid //go:build expression: {text}")
        tokens.append(match.group(1))
        pos = match.end()

    def parse_or(i):
        left, i = parse_and(i)
        while i < len(tokens) and tokens[i] == "||":
            right, i = parse_and(i + 1)
            left = ("or", left, right)
        return left, i

    def parse_and(i):
        left, i = parse_not(i)
        while i < len(tokens) and tokens[i] == "&&":
            right, i = parse_not(i + 1)
            left = ("and", left, right)
        return left, i

    def parse_not(i):
        if i >= len(tokens):
            raise ValueError(f"invalid //go:build expression: {text}")
        token = tokens[i]
        if token == "!":
            operand, i = parse_not(i + 1)
            return ("not", operand), i
        if token == "(":
            inner, i = parse_or(i + 1)
            if i >= len(tokens) or tokens[i] != ")":
                raise ValueError(f"invalid //go:build expression: {text}")
            return inner, i + 1
        if token in (")", "&&", "||"):
            raise ValueError(f"invalid //go:build expression: {text}")
        return ("tag", token), i + 1

    expr, end = parse_or(0)
    if end != len(tokens):
        raise ValueError(f"invalid //go:build expression: {text}")
    return expr


def _parse_plus_build(text: str) -> Expr:
    expr = None
    for option in text.split():
        term = None
        for factor in option.split(","):
            node = ("not", ("tag", factor[1:])) if factor.startswith("!") else ("tag", factor)
            term = node if term is None else ("and", term, node)
        expr = term if expr is None else ("or", expr, term)
    return expr


def _tags(expr: Expr) -> set[str]:
    if expr[0] == "tag":
        return {expr[1]}
    return set().union(*(_tags(operand) for operand in expr[1:]))


def evaluate(expr: Expr, tags: dict[str, bool]) -> bool:
    kind = expr[0]
    if kind == "tag":
        return tags.get(expr[1], False)
    if kind == "not":
        return not evaluate(expr[1], tags)
    if kind == "and":
        return evaluate(expr[1], tags) and evaluate(expr[2], tags)
    return evaluate(expr[1], tags) or evaluate(expr[2], tags)


def satisfiable(expr: Expr) -> bool:
    """True if some setting of the tags other than ``ignore`` selects the file."""
    names = sorted(_tags(expr) - {IGNORE_TAG})
    if len(names) > _MAX_FREE_TAGS:
        return True

    for values in itertools.product((False, True), repeat=len(names)):
        if evaluate(expr, {**dict(zip(names, values)), IGNORE_TAG: False}):
            return True
    return False
