"""
Calculator Engine for KeyCalc
Turns one key press at a time into a token stream and evaluates it
"""
import logging

import config
from errors import (
    CalculatorError,
    DivisionByZero,
    HistoryUnavailable,
    MissingOperand,
    NonFiniteResult,
    UnknownAction,
    UnmatchedParenthesis,
)
from evaluator import evaluate_tokens
from functions import apply_function, resolve_function
from tokens import Number, OperatorKind, Side, TokenStream

logger = logging.getLogger(__name__)

OPERATOR_KEYS = {
    "+": OperatorKind.ADD,
    "−": OperatorKind.SUBTRACT,
    "-": OperatorKind.SUBTRACT,
    "×": OperatorKind.MULTIPLY,
    "*": OperatorKind.MULTIPLY,
    "x": OperatorKind.MULTIPLY,
    "÷": OperatorKind.DIVIDE,
    "/": OperatorKind.DIVIDE,
}

EQUAL_KEYS = ("=", "\r", "\n", "Return")
CLEAR_KEYS = ("C", "AC", "Escape")
BACKSPACE_KEYS = ("⌫", "BackSpace")


class Calculator:
    def __init__(self, history=None, angle_mode=None):
        self.stream = TokenStream()
        self.history = history
        self.memory = None
        self.angle_mode = angle_mode or config.ANGLE_MODE
        self.error = None
        # True while the token list only holds the last result
        self._result_shown = False

    # ── Presentation entry points ─────────────────────────────────────────
    def handle(self, action):
        """Process one key press and return the new state.

        Calculator errors end up in the state; an unknown key raises.
        """
        handler = self._resolve(action)
        return self._run(handler)

    def evaluate(self):
        return self._run(self._evaluate)

    def reuse_history_entry(self, entry_id):
        """Start a new calculation from a stored result"""
        def reuse():
            value = self._require_history().reuse(entry_id)
            self.stream.clear()
            self.stream.set_computed(value)
            self._result_shown = False
        return self._run(reuse)

    def delete_history(self, entry_ids):
        return self._run(lambda: self._require_history().delete(entry_ids))

    def toggle_pin(self, entry_id):
        return self._run(lambda: self._require_history().toggle_pin(entry_id))

    def clear_history(self):
        """Delete every history entry"""
        return self._run(lambda: self._require_history().clear())

    def search_history(self, query):
        if self.history is None:
            return []
        return [e.to_dict() for e in self.history.search(query)]

    def state(self):
        """Observable state for the presentation layer"""
        return {
            'display_text': self.get_display(),
            'equation_text': self.stream.equation_text(),
            'error_message': self.error.message if self.error else None,
            'error_code': self.error.code if self.error else None,
            'history_entries': [e.to_dict() for e in self.history.entries] if self.history else [],
            'memory_value': self.memory,
        }

    def close(self):
        """Final flush of the history before shutdown"""
        if self.history is not None:
            self.history.flush()

    def _run(self, operation):
        self.error = None
        try:
            operation()
        except CalculatorError as e:
            logger.debug("Action failed: %s", e.code)
            self.error = e
        return self.state()

    def _resolve(self, action):
        key = str(action)
        if len(key) == 1 and key.isdigit():
            return lambda: self.add_digit(key)
        if key in OPERATOR_KEYS:
            return lambda: self.add_operator(OPERATOR_KEYS[key])
        name = resolve_function(key)
        if name:
            return lambda: self.apply_function(name)
        if key in EQUAL_KEYS:
            return self._evaluate
        if key in CLEAR_KEYS:
            return self.clear
        if key in BACKSPACE_KEYS:
            return self.backspace
        simple = {
            ".": self.add_decimal_point,
            "CE": self.clear_entry,
            "±": self.toggle_sign,
            "%": self.percent,
            "(": self.open_parenthesis,
            ")": self.close_parenthesis,
            "MC": self.clear_memory,
            "MR": self.recall_memory,
            "M+": self.add_to_memory,
            "M-": self.subtract_from_memory,
        }
        if key in simple:
            return simple[key]
        raise UnknownAction(f"Unknown action: {key!r}")

    # ── Entry ─────────────────────────────────────────────────────────────
    def add_digit(self, digit):
        """Add a digit to the number being typed"""
        self._begin_new_entry()
        self.stream.append_digit(digit)

    def add_decimal_point(self):
        self._begin_new_entry()
        self.stream.append_decimal_point()

    def add_operator(self, kind):
        """Add an operator, replacing a trailing one"""
        self._require_operand()
        self.stream.append_operator(kind)
        self._result_shown = False

    def open_parenthesis(self):
        self._begin_new_entry()
        # A pending number must precede the '(' in the token list
        self.stream.commit()
        self.stream.append_parenthesis(Side.LEFT)

    def close_parenthesis(self):
        if self.stream.open_count() <= 0:
            raise UnmatchedParenthesis()
        self._require_operand()
        self.stream.append_parenthesis(Side.RIGHT)
        self._result_shown = False

    def clear(self):
        """Clear current expression"""
        self.stream.clear()
        self._result_shown = False

    def clear_entry(self):
        """Clear the number being typed"""
        self.stream.clear_buffer()

    def backspace(self):
        """Remove the last typed character"""
        self.stream.backspace()

    # ── Operand transforms ────────────────────────────────────────────────
    def toggle_sign(self):
        if self.stream.buffer:
            self.stream.toggle_buffer_sign()
            return
        value = self.stream.pop_trailing_number()
        if value is not None:
            self.stream.set_computed(-value)
            self._result_shown = False

    def percent(self):
        if self.stream.buffer:
            value = self.stream.buffer_value()
            self.stream.set_computed(value / 100)
            return
        value = self.stream.pop_trailing_number()
        if value is not None:
            self.stream.set_computed(value / 100)
            self._result_shown = False

    def apply_function(self, name):
        """Replace the current operand with name(operand)"""
        if self.stream.buffer:
            value = self.stream.buffer_value()
            from_buffer = True
        else:
            last = self.stream.last_token()
            if not isinstance(last, Number):
                raise MissingOperand()
            value = last.value
            from_buffer = False

        result = apply_function(name, value, self.angle_mode)
        if not from_buffer:
            self.stream.pop_trailing_number()
        self.stream.set_computed(result)
        self._result_shown = False

    # ── Memory ────────────────────────────────────────────────────────────
    def clear_memory(self):
        """Clear memory (MC)"""
        self.memory = None

    def recall_memory(self):
        """Recall memory value (MR)"""
        self._begin_new_entry()
        self.stream.set_computed(self.memory or 0.0)

    def add_to_memory(self):
        """Add the current operand to memory (M+)"""
        self.memory = (self.memory or 0.0) + self._current_operand()

    def subtract_from_memory(self):
        """Subtract the current operand from memory (M-)"""
        self.memory = (self.memory or 0.0) - self._current_operand()

    def _current_operand(self):
        value = self.stream.buffer_value()
        if value is None:
            value = self.stream.last_number()
        return value if value is not None else 0.0

    # ── Evaluation ────────────────────────────────────────────────────────
    def _evaluate(self):
        if self._result_shown and not self.stream.buffer:
            return
        self._require_operand()
        expression = self.stream.equation_text()
        try:
            result = evaluate_tokens(self.stream.tokens)
        except (DivisionByZero, NonFiniteResult):
            self.stream.clear()
            self._result_shown = False
            raise

        logger.debug("%s = %r", expression, result)
        if self.history is not None:
            self.history.record(expression, result)
        self.stream.replace_with_result(result)
        self._result_shown = True

    def _require_operand(self):
        """Commit the buffer; fail if there is still nothing to act on"""
        committed = self.stream.commit()
        if not committed and not self.stream.tokens:
            raise MissingOperand()

    def _begin_new_entry(self):
        if self._result_shown:
            self.stream.clear()
            self._result_shown = False

    def _require_history(self):
        if self.history is None:
            raise HistoryUnavailable()
        return self.history

    # ── Display ───────────────────────────────────────────────────────────
    def get_display(self):
        return self.stream.display_text(default=config.DEFAULT_GLYPH)

