"""Timeline condition language — translation, parsing, evaluation.

Users write conditions over tags::

    history/rome AND NOT(draft, archive/old)

:func:`translate_condition` rewrites that into the normalized expression
syntax::

    history_rome and not (draft or archive_old)

which :func:`compile_condition` parses into a :class:`Formula`. Evaluation
assigns ``True`` to every identifier in the note's expanded tag set and
``False`` to everything else, so the result depends only on the set of
tags, never on their order.

Grammar (lowest to highest precedence)::

    expr    := or_expr
    or_expr := and_expr ("or" and_expr)*
    and_expr:= unary ("and" unary)*
    unary   := "not" unary | atom
    atom    := IDENT | "(" expr ")"

IDENT is a run of Unicode word characters, so ``café`` and ``été_x`` are
valid identifiers.
"""

from __future__ import annotations

import functools
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from chronoline.domain.tags import encode_tag, expand_tags

logger = logging.getLogger(__name__)


class ConditionParseError(ValueError):
    """The condition could not be translated or parsed."""


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

_AND_RE = re.compile(r"\bAND\b")
_OR_RE = re.compile(r"\bOR\b")
_NOT_GROUP_RE = re.compile(r"\bNOT\s*\(([^)]*)\)")
_IDENTIFIER_RE = re.compile(r"\b[\w/]+\b")


def _translate_not_group(match: re.Match[str]) -> str:
    group = match.group(1)
    if "(" in group:
        msg = f"Nested groups inside NOT(...) are not supported: {match.group(0)!r}"
        raise ConditionParseError(msg)
    terms = [term.strip() for term in group.split(",")]
    if not all(terms):
        msg = f"Empty term in {match.group(0)!r}"
        raise ConditionParseError(msg)
    return f"not ({' or '.join(encode_tag(term) for term in terms)})"


def translate_condition(query: str) -> str:
    """Rewrite a user condition into the normalized expression syntax.

    Examples:
        >>> translate_condition("A AND B")
        'A and B'
        >>> translate_condition("NOT(a/b, c)")
        'not (a_b or c)'

    Raises:
        ConditionParseError: A ``NOT(...)`` group is nested or has an
            empty term.
    """
    expression = _AND_RE.sub("and", query)
    expression = _OR_RE.sub("or", expression)
    expression = _NOT_GROUP_RE.sub(_translate_not_group, expression)
    expression = _IDENTIFIER_RE.sub(lambda m: encode_tag(m.group(0)), expression)
    logger.debug("Translated condition %r -> %r", query, expression)
    return expression


def legacy_condition(tags_to_find: Sequence[str], not_tags: Sequence[str] = ()) -> str:
    """Build a condition from the older required/excluded tag lists.

    A note matched the old settings when it had at least one tag to find
    and none of the excluded tags.

    Examples:
        >>> legacy_condition(["a", "b/c"], ["d"])
        '(a OR b/c) AND NOT(d)'
    """
    wanted = [tag.strip() for tag in tags_to_find if tag.strip()]
    if not wanted:
        msg = "At least one tag to find is required"
        raise ValueError(msg)
    condition = f"({' OR '.join(wanted)})"
    excluded = [tag.strip() for tag in not_tags if tag.strip()]
    if excluded:
        condition += f" AND NOT({', '.join(excluded)})"
    return condition


# ---------------------------------------------------------------------------
# Formula tree
# ---------------------------------------------------------------------------


class Formula(ABC):
    """A parsed boolean formula over tag identifiers."""

    @abstractmethod
    def variables(self) -> frozenset[str]:
        """Identifiers referenced anywhere in the formula."""

    @abstractmethod
    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        """Truth value under *assignment*; unknown identifiers are false."""


@dataclass(frozen=True)
class Var(Formula):
    name: str

    def variables(self) -> frozenset[str]:
        return frozenset({self.name})

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return assignment.get(self.name, False)


@dataclass(frozen=True)
class Not(Formula):
    operand: Formula

    def variables(self) -> frozenset[str]:
        return self.operand.variables()

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return not self.operand.evaluate(assignment)


@dataclass(frozen=True)
class And(Formula):
    left: Formula
    right: Formula

    def variables(self) -> frozenset[str]:
        return self.left.variables() | self.right.variables()

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return self.left.evaluate(assignment) and self.right.evaluate(assignment)


@dataclass(frozen=True)
class Or(Formula):
    left: Formula
    right: Formula

    def variables(self) -> frozenset[str]:
        return self.left.variables() | self.right.variables()

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return self.left.evaluate(assignment) or self.right.evaluate(assignment)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

_TOKEN_RE = re.compile(r"\s*(?:(\()|(\))|(\w+)|(\S))")
_KEYWORDS = frozenset({"and", "or", "not"})


def _tokenize(expression: str) -> list[str]:
    tokens: list[str] = []
    for match in _TOKEN_RE.finditer(expression):
        lparen, rparen, word, other = match.groups()
        if other is not None:
            msg = f"Unexpected character {other!r} at position {match.start(4)}"
            raise ConditionParseError(msg)
        token = lparen or rparen or word
        if token:
            tokens.append(token)
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _advance(self) -> str:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def parse(self) -> Formula:
        if not self._tokens:
            msg = "Empty condition"
            raise ConditionParseError(msg)
        formula = self._or_expr()
        if self._peek() is not None:
            msg = f"Unexpected token {self._peek()!r}"
            raise ConditionParseError(msg)
        return formula

    def _or_expr(self) -> Formula:
        left = self._and_expr()
        while self._peek() == "or":
            self._advance()
            left = Or(left, self._and_expr())
        return left

    def _and_expr(self) -> Formula:
        left = self._unary()
        while self._peek() == "and":
            self._advance()
            left = And(left, self._unary())
        return left

    def _unary(self) -> Formula:
        if self._peek() == "not":
            self._advance()
            return Not(self._unary())
        return self._atom()

    def _atom(self) -> Formula:
        token = self._peek()
        if token is None:
            msg = "Unexpected end of condition"
            raise ConditionParseError(msg)
        if token == "(":
            self._advance()
            inner = self._or_expr()
            if self._peek() != ")":
                msg = "Missing closing parenthesis"
                raise ConditionParseError(msg)
            self._advance()
            return inner
        if token == ")" or token in _KEYWORDS:
            msg = f"Unexpected token {token!r}"
            raise ConditionParseError(msg)
        self._advance()
        return Var(token)


@functools.lru_cache(maxsize=256)
def compile_condition(expression: str) -> Formula:
    """Parse a normalized expression into a :class:`Formula`.

    Raises:
        ConditionParseError: The expression is empty or malformed.
    """
    return _Parser(_tokenize(expression)).parse()


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def evaluate_condition(expression: str, tags: Iterable[str]) -> bool:
    """Evaluate a normalized expression against a note's tags.

    Tags are raw paths (``a/b``); they are expanded to all their prefixes
    before matching.
    """
    formula = compile_condition(expression)
    true_identifiers = expand_tags(tags)
    assignment = dict.fromkeys(formula.variables(), False)
    assignment.update(dict.fromkeys(true_identifiers, True))
    return formula.evaluate(assignment)


def note_matches(query: str, tags: Iterable[str]) -> bool:
    """Translate a user condition and evaluate it against *tags*."""
    return evaluate_condition(translate_condition(query), tags)
