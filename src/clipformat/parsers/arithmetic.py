"""Arithmetic expression evaluator.

Evaluates copied expressions such as "1,234.5+2", "(3+4)*2^2" or
"$120422.50-$118063.37". Numerals may use either "," or "." as the decimal
mark; dollar signs switch the output to currency formatting.
"""

from __future__ import annotations

import math
import re
from typing import Any

from .base import ValueParser, config_value, normalize_minus
from .currency import format_currency

_OPERATORS = frozenset("+-*/%^")
_PRECEDENCE = {"^": 4, "*": 3, "/": 3, "%": 3, "+": 2, "-": 2}
_RIGHT_ASSOCIATIVE = frozenset("^")

_NUMBER_TOKEN = re.compile(r"[+-]?[\d.,]+")
_FOREIGN_CHARS = re.compile(r"[^\d.()+\-*/%^]")
_WHITESPACE = re.compile(r"\s+")
_PLACEHOLDER = re.compile(r"\$\{(.*?)\}")

Token = float | str


class ArithmeticEvaluator(ValueParser):
    """Evaluate arithmetic with locale-tolerant numerals.

    Supports + - * / % ^ with standard precedence (^ binds tightest and is
    right associative), unary minus, parentheses and implicit
    multiplication ("2(3+4)"). Any failure, including division by zero,
    yields None.

    Example:
        ```python
        evaluator = ArithmeticEvaluator()
        evaluator.evaluate("1.234,5+2")                      # "1236.5"
        evaluator.evaluate("$120422.50-$118063.37")          # "$2,359.13"
        evaluator.evaluate("$10*2", "${input} = ${result}")  # "$10*2 = $20.00"
        evaluator.evaluate("bad")                            # None
        ```
    """

    name: str = "arithmetic"

    def is_candidate(self, text: str, context: Any = None) -> bool:
        """True if text is made only of numbers, operators and parentheses.

        Currency markers and whitespace are ignored. A bare full date such
        as "5/6/23" is not a candidate.
        """
        if not text:
            return False
        trimmed = normalize_minus(text).strip()
        if not trimmed:
            return False

        date_full = self.pattern("date_full", context)
        if date_full and date_full.contains(trimmed):
            return False
        candidate = self.pattern("arithmetic_candidate", context)
        if candidate and not candidate.contains(trimmed):
            return False

        stripped = self._normalize_numbers(_strip_currency(trimmed), context)
        if not stripped or not any(ch.isascii() and ch.isdigit() for ch in stripped):
            return False
        return _FOREIGN_CHARS.search(stripped) is None

    def evaluate(self, text: str, template: str | None = None, context: Any = None) -> str | None:
        """Evaluate an expression and format the result.

        Args:
            text: Expression text.
            template: Optional output template using ${input}, ${result}
                and ${numeric}.
            context: Optional execution context (for injected patterns).

        Returns:
            Formatted result, or None if text is not a valid expression.
        """
        if not self.is_candidate(text, context):
            return None

        normalized = normalize_minus(text)
        cleaned = self._normalize_numbers(_strip_currency(normalized), context)
        try:
            value = _evaluate_tokens(_tokenize(cleaned))
        except (ArithmeticError, ValueError):
            return None
        if value is None or not math.isfinite(value):
            return None

        numeric = _format_plain(value)
        if "$" in text:
            result = format_currency(value)
            if result is None:
                return None
        else:
            result = numeric

        if template:
            replacements = {
                "input": normalized.strip(),
                "result": result,
                "numeric": numeric,
            }
            return _PLACEHOLDER.sub(lambda m: replacements.get(m.group(1), ""), template)
        return result

    def process(self, text: str, context: Any = None) -> str | None:
        """Evaluate text using the configured arithmetic template."""
        template = config_value(context, "templates.arithmetic")
        return self.evaluate(text, template=template, context=context)

    def _normalize_numbers(self, expression: str, context: Any = None) -> str:
        localized = self.pattern("localized_number", context)

        def replace(found: re.Match[str]) -> str:
            token = found.group(0)
            if localized and not localized.contains(token):
                return token
            return normalize_number_token(token) or token

        return _NUMBER_TOKEN.sub(replace, expression)


def normalize_number_token(token: str) -> str:
    """Rewrite one numeral to use "." as the decimal mark and no grouping.

    When both "," and "." appear, whichever comes last is the decimal mark.
    A lone comma followed by exactly three digits groups thousands; any
    other lone comma is a decimal mark.

    Example:
        ```python
        normalize_number_token("1,234.5")  # "1234.5"
        normalize_number_token("1.234,5")  # "1234.5"
        normalize_number_token("3,5")      # "3.5"
        ```
    """
    sign = ""
    body = token
    if body[:1] in ("+", "-"):
        sign, body = body[0], body[1:]
    if not body:
        return token

    last_comma = body.rfind(",")
    last_dot = body.rfind(".")
    if last_comma >= 0 and last_dot >= 0:
        if last_comma > last_dot:
            body = body.replace(".", "").replace(",", ".")
        else:
            body = body.replace(",", "")
    elif last_comma >= 0:
        if len(body) - last_comma - 1 == 3:
            body = body.replace(",", "")
        else:
            body = body.replace(",", ".")
    return sign + body


def _strip_currency(text: str) -> str:
    return _WHITESPACE.sub("", text.replace("$", ""))


def _format_plain(value: float) -> str:
    integral = math.floor(value)
    if abs(value - integral) < 1e-9:
        return str(int(integral))
    return format(value, ".14g")


def _tokenize(expression: str) -> list[Token]:
    tokens: list[Token] = []
    current = ""
    negative = False
    last_was_operator = True

    def flush() -> None:
        nonlocal current, negative
        if current:
            number = float(current)
            tokens.append(-number if negative else number)
            current = ""
            negative = False

    for char in expression:
        if char in "0123456789.":
            if not last_was_operator and tokens and tokens[-1] == ")":
                tokens.append("*")
            current += char
            last_was_operator = False
        elif char == "(":
            if current:
                flush()
                tokens.append("*")
            elif negative:
                tokens.extend([-1.0, "*"])
                negative = False
            elif tokens and tokens[-1] == ")":
                tokens.append("*")
            tokens.append("(")
            last_was_operator = True
        elif char == ")":
            flush()
            tokens.append(")")
            last_was_operator = False
        elif char in _OPERATORS:
            if char == "-" and last_was_operator:
                negative = not negative
            else:
                flush()
                tokens.append(char)
                last_was_operator = True

    flush()
    return tokens


def _to_postfix(tokens: list[Token]) -> list[Token]:
    output: list[Token] = []
    stack: list[str] = []

    for token in tokens:
        if isinstance(token, float):
            output.append(token)
        elif token == "(":
            stack.append(token)
        elif token == ")":
            while stack and stack[-1] != "(":
                output.append(stack.pop())
            if stack:
                stack.pop()
        else:
            while stack and stack[-1] in _OPERATORS:
                top = stack[-1]
                if _PRECEDENCE[token] < _PRECEDENCE[top] or (
                    token not in _RIGHT_ASSOCIATIVE and _PRECEDENCE[token] == _PRECEDENCE[top]
                ):
                    output.append(stack.pop())
                else:
                    break
            stack.append(token)

    while stack:
        output.append(stack.pop())
    return output


def _evaluate_tokens(tokens: list[Token]) -> float | None:
    values: list[float] = []

    for token in _to_postfix(tokens):
        if isinstance(token, float):
            values.append(token)
            continue
        if token not in _OPERATORS or len(values) < 2:
            return None
        b = values.pop()
        a = values.pop()
        if token == "+":
            result = a + b
        elif token == "-":
            result = a - b
        elif token == "*":
            result = a * b
        elif token == "/":
            if b == 0:
                return None
            result = a / b
        elif token == "%":
            if b == 0:
                return None
            result = a % b
        else:
            result = math.pow(a, b)
        values.append(result)

    if len(values) != 1:
        return None
    return values[0]
