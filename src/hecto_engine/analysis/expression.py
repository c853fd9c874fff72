"""Arithmetic on selected text: ``+ - * /``, parentheses, signed decimals."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, DivisionByZero, InvalidOperation, localcontext
from typing import List, Optional

_TOKEN_RE = re.compile(r"\s*(?:(\d+(?:\.\d*)?|\.\d+)|(.))")
_PRECISION = 28


class ExpressionError(ValueError):
    """Base class for anything that stops an expression from evaluating."""

    kind = "expression_error"

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class ExpressionSyntaxError(ExpressionError):
    kind = "expression_syntax"


class DivisionByZeroError(ExpressionError):
    kind = "expression_division_by_zero"


@dataclass(frozen=True, slots=True)
class Token:
    kind: str  # "number", "op", "end"
    text: str
    offset: int


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        found = _TOKEN_RE.match(stripped, position)
        assert found is not None
        number, other = found.groups()
        if number is not None:
            tokens.append(Token("number", number, found.start(1)))
        elif other in "+-*/()":
            tokens.append(Token("op", other, found.start(2)))
        else:
            raise ExpressionSyntaxError(f"Unexpected character {other!r}", offset=found.start(2))
        position = found.end()
    tokens.append(Token("end", "", len(stripped)))
    return tokens


class _Parser:
    """Recursive descent over::

        expr   := term (("+" | "-") term)*
        term   := unary (("*" | "/") unary)*
        unary  := ("+" | "-") unary | atom
        atom   := NUMBER | "(" expr ")"
    """

    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _accept(self, *ops: str) -> Optional[Token]:
        token = self.current
        if token.kind == "op" and token.text in ops:
            return self._advance()
        return None

    def parse(self) -> Decimal:
        if self.current.kind == "end":
            raise ExpressionSyntaxError("Empty expression", offset=0)
        value = self.expr()
        if self.current.kind != "end":
            raise ExpressionSyntaxError(
                f"Unexpected {self.current.text!r}", offset=self.current.offset
            )
        return value

    def expr(self) -> Decimal:
        value = self.term()
        while True:
            op = self._accept("+", "-")
            if op is None:
                return value
            right = self.term()
            value = value + right if op.text == "+" else value - right

    def term(self) -> Decimal:
        value = self.unary()
        while True:
            op = self._accept("*", "/")
            if op is None:
                return value
            right = self.unary()
            if op.text == "*":
                value = value * right
            elif right == 0:
                raise DivisionByZeroError("Division by zero", offset=op.offset)
            else:
                value = value / right

    def unary(self) -> Decimal:
        op = self._accept("+", "-")
        if op is None:
            return self.atom()
        value = self.unary()
        return -value if op.text == "-" else value

    def atom(self) -> Decimal:
        token = self.current
        if token.kind == "number":
            self._advance()
            return Decimal(token.text)
        if self._accept("("):
            value = self.expr()
            if self._accept(")") is None:
                raise ExpressionSyntaxError("Missing ')'", offset=self.current.offset)
            return value
        if token.kind == "end":
            raise ExpressionSyntaxError("Unexpected end of expression", offset=token.offset)
        raise ExpressionSyntaxError(f"Unexpected {token.text!r}", offset=token.offset)


class ExpressionEvaluator:
    def __init__(self, *, precision: int = _PRECISION) -> None:
        self.precision = precision

    def evaluate(self, text: str) -> Decimal:
        with localcontext() as context:
            context.prec = self.precision
            try:
                return _Parser(tokenize(text)).parse()
            except (DivisionByZero, InvalidOperation) as exc:
                raise ExpressionSyntaxError(str(exc)) from exc

    def format_result(self, value: Decimal) -> str:
        """Integers print bare; decimals drop trailing zeros, never use exponents."""

        if value == value.to_integral_value():
            return str(int(value))
        return format(value.normalize(), "f")

    def evaluate_to_text(self, text: str) -> str:
        return self.format_result(self.evaluate(text))


def evaluate(text: str) -> Decimal:
    return ExpressionEvaluator().evaluate(text)


__all__ = [
    "ExpressionError",
    "ExpressionSyntaxError",
    "DivisionByZeroError",
    "ExpressionEvaluator",
    "evaluate",
    "tokenize",
]
