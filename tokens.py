"""
Token stream for KeyCalc
Holds the committed tokens of the expression and the pending input buffer
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from errors import InvalidNumberFormat, UnmatchedParenthesis
from number_format import format_number, parse_number


class OperatorKind(Enum):
    ADD = "+"
    SUBTRACT = "−"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @property
    def symbol(self):
        return self.value


class Side(Enum):
    LEFT = "("
    RIGHT = ")"


@dataclass(frozen=True)
class Number:
    value: float

    def render(self):
        return format_number(self.value)


@dataclass(frozen=True)
class Operator:
    kind: OperatorKind

    def render(self):
        return self.kind.symbol


@dataclass(frozen=True)
class Parenthesis:
    side: Side

    def render(self):
        return self.side.value


Token = Union[Number, Operator, Parenthesis]


class TokenStream:
    """Committed tokens plus the not-yet-committed number being typed.

    The buffer and the token list never hold the same value: ``commit`` is
    the only transition that moves the buffer into a ``Number`` token.
    """

    def __init__(self):
        self.tokens: List[Token] = []
        self.buffer = ""
        # Set while the buffer holds a computed value rather than typed text
        self.computed = False

    # ── Buffer editing ────────────────────────────────────────────────────
    def append_digit(self, digit):
        """Append a digit to the pending buffer"""
        digit = str(digit)
        if len(digit) != 1 or not digit.isdigit():
            raise ValueError(f"not a digit: {digit!r}")
        if self.computed:
            self.clear_buffer()
        if self.buffer == "0":
            self.buffer = digit
        elif self.buffer == "-0":
            self.buffer = "-" + digit
        else:
            self.buffer += digit

    def append_decimal_point(self):
        """Append '.' unless the buffer already has one"""
        if self.computed:
            self.clear_buffer()
        if "." in self.buffer:
            return
        if self.buffer in ("", "-"):
            self.buffer += "0"
        self.buffer += "."

    def backspace(self):
        """Drop the last buffer character; committed tokens are never touched"""
        if self.computed:
            # A computed value is not edited digit by digit
            self.clear_buffer()
        else:
            self.buffer = self.buffer[:-1]

    def set_buffer(self, text):
        self.buffer = text
        self.computed = False

    def set_computed(self, value):
        """Put a computed operand in the buffer at full precision"""
        self.buffer = repr(float(value))
        self.computed = True

    def toggle_buffer_sign(self):
        """Flip the sign of the buffer text, keeping its digits exact"""
        if self.buffer.startswith("-"):
            self.buffer = self.buffer[1:]
        else:
            self.buffer = "-" + self.buffer

    def clear_buffer(self):
        self.buffer = ""
        self.computed = False

    def clear(self):
        self.tokens = []
        self.clear_buffer()

    # ── Commit ────────────────────────────────────────────────────────────
    def commit(self):
        """Move the buffer into a Number token.

        Returns False when there was nothing to commit.
        """
        if not self.buffer:
            return False
        try:
            value = parse_number(self.buffer)
        except ValueError:
            raise InvalidNumberFormat(f"Invalid number: {self.buffer}")
        self.tokens.append(Number(value))
        self.clear_buffer()
        return True

    def buffer_value(self):
        """Current buffer as a float, or None when empty"""
        if not self.buffer:
            return None
        try:
            return parse_number(self.buffer)
        except ValueError:
            raise InvalidNumberFormat(f"Invalid number: {self.buffer}")

    # ── Token list ────────────────────────────────────────────────────────
    def append_operator(self, kind):
        """Append an operator, replacing a trailing one"""
        token = Operator(kind)
        if self.tokens and isinstance(self.tokens[-1], Operator):
            self.tokens[-1] = token
        else:
            self.tokens.append(token)

    def append_parenthesis(self, side):
        if side is Side.RIGHT and self.open_count() <= 0:
            raise UnmatchedParenthesis()
        self.tokens.append(Parenthesis(side))

    def open_count(self):
        """Number of '(' not yet closed"""
        count = 0
        for token in self.tokens:
            if isinstance(token, Parenthesis):
                count += 1 if token.side is Side.LEFT else -1
        return count

    def last_number(self) -> Optional[float]:
        """Most recent committed number, scanning the flat list from the end"""
        for token in reversed(self.tokens):
            if isinstance(token, Number):
                return token.value
        return None

    def last_token(self) -> Optional[Token]:
        return self.tokens[-1] if self.tokens else None

    def pop_trailing_number(self) -> Optional[float]:
        """Pop the last token if it is a Number and return its value"""
        if self.tokens and isinstance(self.tokens[-1], Number):
            return self.tokens.pop().value
        return None

    def replace_with_result(self, value):
        """Seed the stream with a single result token"""
        self.tokens = [Number(value)]
        self.clear_buffer()

    # ── Rendering ─────────────────────────────────────────────────────────
    def buffer_text(self):
        """Buffer as shown: typed text verbatim, computed values formatted"""
        if self.computed:
            return format_number(parse_number(self.buffer))
        return self.buffer

    def equation_text(self):
        """Rendered tokens and the buffer, separated by single spaces"""
        parts = [token.render() for token in self.tokens]
        if self.buffer:
            parts.append(self.buffer_text())
        return " ".join(parts)

    def display_text(self, default="0"):
        if self.buffer:
            return self.buffer_text()
        last = self.last_number()
        if last is not None:
            return format_number(last)
        return default
