"""
Formula Evaluator - Restricted arithmetic over character stats.

Players type formulas such as "gold / 2 + strength + agility". The text
is tokenized and parsed by a small recursive-descent parser; it is never
handed to the interpreter.

Supports:
- Numeric literals: 3, 1.5, .5
- Variables from a fixed whitelist (see FORMULA_VARIABLES)
- Operators: + - * / and unary + -, with the usual precedence
- Parentheses

Grammar:
    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := NUMBER | IDENTIFIER | "(" expression ")"

Anything else (unknown names, "=", calls, "**", "%") is a syntax error,
as is a formula longer than MAX_TOKENS or nested deeper than MAX_NESTING.
A formula that parses but yields a non-finite value is a result error.
Results are floored to an int.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Union
import logging
import math
import re

from .errors import FormulaError, FormulaResultError, FormulaSyntaxError

if TYPE_CHECKING:
    from .aggregator import DerivedStats
    from .state import Character

logger = logging.getLogger(__name__)

FORMULA_VARIABLES: tuple[str, ...] = (
    "lifeCurrent",
    "lifeMax",
    "strength",
    "agility",
    "apCurrent",
    "apMax",
    "gold",
    "xp",
    "doubt",
    "corruption",
    "attack",
)

DEFAULT_FORMULA = "gold / 2 + strength + agility"

# Parser limits
MAX_TOKENS = 256
MAX_NESTING = 32

Number = Union[int, float]


# =============================================================================
# Tokenizer
# =============================================================================

@dataclass(frozen=True)
class Token:
    kind: str  # "number", "name", "op", "lparen", "rparen", "end"
    text: str
    position: int


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>[-+*/])
    |(?P<lparen>\()
    |(?P<rparen>\))
    """,
    re.VERBOSE,
)


def tokenize(text: str) -> list[Token]:
    """Split formula text into tokens, ending with an "end" token."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_PATTERN.match(text, pos)
        if not match:
            char = text[pos]
            if char == "=":
                raise FormulaSyntaxError("Assignment is not allowed", pos)
            raise FormulaSyntaxError(f"Unexpected character {char!r}", pos)
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind=kind, text=match.group(), position=pos))
        pos = match.end()
    if len(tokens) > MAX_TOKENS:
        raise FormulaSyntaxError(f"Formula is too long (more than {MAX_TOKENS} tokens)")
    tokens.append(Token(kind="end", text="", position=len(text)))
    return tokens


# =============================================================================
# AST
# =============================================================================

@dataclass(frozen=True)
class NumberNode:
    value: Number

    def evaluate(self, scope: Mapping[str, Number]) -> Number:
        return self.value


@dataclass(frozen=True)
class VariableNode:
    name: str

    def evaluate(self, scope: Mapping[str, Number]) -> Number:
        if self.name not in scope:
            raise FormulaResultError(f"No value for {self.name!r}")
        value = scope[self.name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise FormulaResultError(f"Value of {self.name!r} is not a number")
        return value


@dataclass(frozen=True)
class UnaryNode:
    op: str
    operand: Node

    def evaluate(self, scope: Mapping[str, Number]) -> Number:
        value = self.operand.evaluate(scope)
        return -value if self.op == "-" else value


@dataclass(frozen=True)
class BinaryNode:
    op: str
    left: Node
    right: Node

    def evaluate(self, scope: Mapping[str, Number]) -> Number:
        left = self.left.evaluate(scope)
        right = self.right.evaluate(scope)
        if self.op == "+":
            return left + right
        if self.op == "-":
            return left - right
        if self.op == "*":
            return left * right
        if right == 0:
            raise FormulaResultError("Division by zero")
        return left / right


Node = Union[NumberNode, VariableNode, UnaryNode, BinaryNode]


# =============================================================================
# Parser
# =============================================================================

class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[Token], variables: frozenset[str]):
        self.tokens = tokens
        self.variables = variables
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def parse(self) -> Node:
        if self.current.kind == "end":
            raise FormulaSyntaxError("Formula is empty", 0)
        node = self.expression()
        if self.current.kind != "end":
            raise FormulaSyntaxError(f"Unexpected {self.current.text!r}", self.current.position)
        return node

    def expression(self) -> Node:
        node = self.term()
        while self.current.kind == "op" and self.current.text in "+-":
            op = self.advance().text
            node = BinaryNode(op, node, self.term())
        return node

    def term(self) -> Node:
        node = self.unary()
        while self.current.kind == "op" and self.current.text in "*/":
            op = self.advance().text
            if self.current.kind == "op" and self.current.text in "*/":
                raise FormulaSyntaxError(f"Unexpected {self.current.text!r}", self.current.position)
            node = BinaryNode(op, node, self.unary())
        return node

    def nested(self, parse):
        """Run a sub-parse one nesting level deeper."""
        if self.depth >= MAX_NESTING:
            raise FormulaSyntaxError("Formula is nested too deeply", self.current.position)
        self.depth += 1
        try:
            return parse()
        finally:
            self.depth -= 1

    def unary(self) -> Node:
        if self.current.kind == "op" and self.current.text in "+-":
            op = self.advance().text
            return UnaryNode(op, self.nested(self.unary))
        return self.primary()

    def primary(self) -> Node:
        token = self.advance()
        if token.kind == "number":
            value = float(token.text)
            if value.is_integer() and "." not in token.text and "e" not in token.text.lower():
                return NumberNode(int(token.text))
            return NumberNode(value)
        if token.kind == "name":
            if token.text not in self.variables:
                raise FormulaSyntaxError(f"Unknown variable {token.text!r}", token.position)
            if self.current.kind == "lparen":
                raise FormulaSyntaxError("Function calls are not allowed", self.current.position)
            return VariableNode(token.text)
        if token.kind == "lparen":
            node = self.nested(self.expression)
            if self.current.kind != "rparen":
                raise FormulaSyntaxError("Missing closing parenthesis", self.current.position)
            self.advance()
            return node
        if token.kind == "end":
            raise FormulaSyntaxError("Unexpected end of formula", token.position)
        raise FormulaSyntaxError(f"Unexpected {token.text!r}", token.position)


# =============================================================================
# Public API
# =============================================================================

@dataclass(frozen=True)
class Formula:
    """A parsed formula, ready to evaluate against any scope."""
    text: str
    root: Node

    def evaluate(self, scope: Mapping[str, Number]) -> int:
        """
        Evaluate and floor.

        Raises:
            FormulaResultError: value is not a finite number
        """
        try:
            value = self.root.evaluate(scope)
        except OverflowError:
            raise FormulaResultError("Result is too large") from None
        except RecursionError:
            raise FormulaResultError("Formula is too complex to evaluate") from None
        if isinstance(value, float) and not math.isfinite(value):
            raise FormulaResultError("Result is not a finite number")
        return math.floor(value)


@dataclass
class FormulaResult:
    """
    Outcome of evaluating a formula.

    Exactly one of value / error_kind is set.
    """
    value: int | None = None
    error_kind: str | None = None  # "syntax" or "result"
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def failure(cls, exc: FormulaError) -> FormulaResult:
        return cls(error_kind=exc.error_kind, error=str(exc))


@dataclass
class FormulaEvaluator:
    """
    Parses and evaluates formulas over a fixed variable whitelist.

    Usage:
        evaluator = FormulaEvaluator()
        evaluator.evaluate("gold / 2 + strength", {"gold": 10, "strength": 5})
    """
    variables: frozenset[str] = field(default_factory=lambda: frozenset(FORMULA_VARIABLES))

    def parse(self, text: str) -> Formula:
        """
        Parse formula text.

        Raises:
            FormulaSyntaxError: not restricted arithmetic over the whitelist
        """
        if not isinstance(text, str):
            raise FormulaSyntaxError("Formula must be text")
        tokens = tokenize(text)
        try:
            root = _Parser(tokens, self.variables).parse()
        except RecursionError:
            raise FormulaSyntaxError("Formula is nested too deeply") from None
        return Formula(text=text, root=root)

    def evaluate(self, text: str, scope: Mapping[str, Number]) -> int:
        """Parse and evaluate in one step. Raises FormulaError subclasses."""
        return self.parse(text).evaluate(scope)

    def try_evaluate(self, text: str, scope: Mapping[str, Number]) -> FormulaResult:
        """Like evaluate(), but returns errors as a FormulaResult."""
        try:
            return FormulaResult(value=self.evaluate(text, scope))
        except FormulaError as exc:
            logger.debug("Formula %r failed (%s): %s", text, exc.error_kind, exc)
            return FormulaResult.failure(exc)


def evaluate_formula(text: str, scope: Mapping[str, Number]) -> FormulaResult:
    """Evaluate with the default whitelist."""
    return FormulaEvaluator().try_evaluate(text, scope)


def formula_scope(character: Character, derived: DerivedStats) -> dict[str, Number]:
    """Variables a formula can see, from counters and grand totals."""
    return {
        "lifeCurrent": character.life_current,
        "lifeMax": derived.total.life_max,
        "strength": derived.total.strength,
        "agility": derived.total.agility,
        "apCurrent": character.ap_current,
        "apMax": derived.total.ap_max,
        "gold": character.gold,
        "xp": character.xp,
        "doubt": character.doubt,
        "corruption": character.corruption,
        "attack": derived.total.attack,
    }
