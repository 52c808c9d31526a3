"""Tests for the token stream and its buffer discipline."""
import pytest

from errors import InvalidNumberFormat, UnmatchedParenthesis
from tokens import Number, Operator, OperatorKind, Parenthesis, Side, TokenStream


class TestBuffer:
    def setup_method(self):
        self.stream = TokenStream()

    def test_digits_accumulate(self):
        self.stream.append_digit("1")
        self.stream.append_digit(2)
        assert self.stream.buffer == "12"

    def test_leading_zero_is_replaced(self):
        self.stream.append_digit("0")
        self.stream.append_digit("5")
        assert self.stream.buffer == "5"

    def test_decimal_point_seeds_zero(self):
        self.stream.append_decimal_point()
        assert self.stream.buffer == "0."

    def test_second_decimal_point_is_ignored(self):
        self.stream.append_digit("3")
        self.stream.append_decimal_point()
        self.stream.append_digit("1")
        self.stream.append_decimal_point()
        assert self.stream.buffer == "3.1"

    def test_rejects_non_digit(self):
        with pytest.raises(ValueError):
            self.stream.append_digit("+")

    def test_backspace_only_touches_buffer(self):
        self.stream.append_digit("7")
        self.stream.commit()
        self.stream.backspace()
        assert self.stream.tokens == [Number(7.0)]


class TestComputedBuffer:
    def setup_method(self):
        self.stream = TokenStream()

    def test_keeps_full_precision(self):
        self.stream.set_computed(1 / 3)
        assert float(self.stream.buffer) == 1 / 3
        assert self.stream.display_text() == "0.33333333"
        self.stream.commit()
        assert self.stream.tokens == [Number(1 / 3)]

    def test_digit_starts_fresh(self):
        self.stream.set_computed(1e32)
        self.stream.append_digit("5")
        assert self.stream.buffer == "5"
        assert self.stream.computed is False

    def test_decimal_point_starts_fresh(self):
        self.stream.set_computed(1e-10)
        self.stream.append_decimal_point()
        assert self.stream.buffer == "0."

    def test_backspace_drops_whole_value(self):
        self.stream.set_computed(0.25)
        self.stream.backspace()
        assert self.stream.buffer == ""

    def test_sign_toggle_stays_exact(self):
        self.stream.set_computed(2 / 3)
        self.stream.toggle_buffer_sign()
        assert self.stream.buffer_value() == -(2 / 3)
        self.stream.toggle_buffer_sign()
        assert self.stream.buffer_value() == 2 / 3
        assert self.stream.computed is True

    def test_equation_text_formats_computed_value(self):
        self.stream.tokens = [Number(2.0), Operator(OperatorKind.ADD)]
        self.stream.set_computed(2 / 3)
        assert self.stream.equation_text() == "2 + 0.66666667"


class TestCommit:
    def setup_method(self):
        self.stream = TokenStream()

    def test_commit_empty_buffer_returns_false(self):
        assert self.stream.commit() is False
        assert self.stream.tokens == []

    def test_commit_moves_buffer_into_token(self):
        self.stream.set_buffer("12.5")
        assert self.stream.commit() is True
        assert self.stream.tokens == [Number(12.5)]
        assert self.stream.buffer == ""

    def test_unparsable_buffer_fails_and_is_kept(self):
        self.stream.set_buffer("-")
        with pytest.raises(InvalidNumberFormat):
            self.stream.commit()
        assert self.stream.buffer == "-"
        assert self.stream.tokens == []


class TestTokens:
    def setup_method(self):
        self.stream = TokenStream()

    def test_new_operator_replaces_trailing_operator(self):
        self.stream.set_buffer("3")
        self.stream.commit()
        self.stream.append_operator(OperatorKind.ADD)
        self.stream.append_operator(OperatorKind.MULTIPLY)
        assert self.stream.tokens == [Number(3.0), Operator(OperatorKind.MULTIPLY)]

    def test_right_parenthesis_needs_open_one(self):
        with pytest.raises(UnmatchedParenthesis):
            self.stream.append_parenthesis(Side.RIGHT)

    def test_open_count(self):
        self.stream.append_parenthesis(Side.LEFT)
        self.stream.append_parenthesis(Side.LEFT)
        self.stream.append_parenthesis(Side.RIGHT)
        assert self.stream.open_count() == 1

    def test_last_number_is_a_flat_scan(self):
        self.stream.tokens = [Number(2.0), Operator(OperatorKind.ADD), Parenthesis(Side.LEFT)]
        assert self.stream.last_number() == 2.0

    def test_pop_trailing_number_only_pops_numbers(self):
        self.stream.tokens = [Number(2.0), Operator(OperatorKind.ADD)]
        assert self.stream.pop_trailing_number() is None
        assert len(self.stream.tokens) == 2

    def test_equation_text_joins_tokens_and_buffer(self):
        self.stream.tokens = [Parenthesis(Side.LEFT), Number(2.0), Operator(OperatorKind.SUBTRACT)]
        self.stream.set_buffer("3.5")
        assert self.stream.equation_text() == "( 2 − 3.5"

    def test_display_text_prefers_buffer_then_last_number(self):
        assert self.stream.display_text() == "0"
        self.stream.tokens = [Number(4.0), Operator(OperatorKind.ADD)]
        assert self.stream.display_text() == "4"
        self.stream.set_buffer("9")
        assert self.stream.display_text() == "9"

    def test_tokens_are_immutable(self):
        token = Number(1.0)
        with pytest.raises(AttributeError):
            token.value = 2.0
