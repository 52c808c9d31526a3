"""
Unary functions for KeyCalc
Applied to the current operand by the function keys
"""
import math

import config
from errors import InvalidFunctionInput

ANGLE_MODES = ("deg", "rad")


def _to_radians(value, angle_mode):
    return math.radians(value) if angle_mode == "deg" else value


def _sqrt(value, angle_mode):
    if value < 0:
        raise InvalidFunctionInput("Cannot take the square root of a negative number")
    return math.sqrt(value)


def _square(value, angle_mode):
    return value * value


def _reciprocal(value, angle_mode):
    if value == 0:
        raise InvalidFunctionInput("Cannot take the reciprocal of zero")
    return 1 / value


def _sin(value, angle_mode):
    if angle_mode == "deg" and value % 180 == 0:
        return 0.0
    return math.sin(_to_radians(value, angle_mode))


def _cos(value, angle_mode):
    if angle_mode == "deg" and value % 180 == 90:
        return 0.0
    return math.cos(_to_radians(value, angle_mode))


def _tan(value, angle_mode):
    if angle_mode == "deg":
        if value % 180 == 90:
            raise InvalidFunctionInput("Tangent is undefined at 90°")
        if value % 180 == 0:
            return 0.0
    return math.tan(_to_radians(value, angle_mode))


def _ln(value, angle_mode):
    if value <= 0:
        raise InvalidFunctionInput("Logarithm needs a positive number")
    return math.log(value)


def _log10(value, angle_mode):
    if value <= 0:
        raise InvalidFunctionInput("Logarithm needs a positive number")
    return math.log10(value)


def _exp(value, angle_mode):
    try:
        return math.exp(value)
    except OverflowError:
        raise InvalidFunctionInput("Result is too large")


FUNCTIONS = {
    "sqrt": _sqrt,
    "square": _square,
    "reciprocal": _reciprocal,
    "sin": _sin,
    "cos": _cos,
    "tan": _tan,
    "ln": _ln,
    "log": _log10,
    "exp": _exp,
}

# Button glyphs accepted as aliases for the function names
FUNCTION_ALIASES = {
    "√": "sqrt",
    "x²": "square",
    "1/x": "reciprocal",
    "log10": "log",
}


def resolve_function(name):
    """Map a key or glyph to a function name, or None"""
    name = FUNCTION_ALIASES.get(name, name)
    return name if name in FUNCTIONS else None


def apply_function(name, value, angle_mode=None):
    """Apply the named unary function, checking its domain and result"""
    if angle_mode is None:
        angle_mode = config.ANGLE_MODE
    if angle_mode not in ANGLE_MODES:
        raise ValueError(f"unknown angle mode: {angle_mode!r}")
    result = FUNCTIONS[name](float(value), angle_mode)
    if not math.isfinite(result):
        raise InvalidFunctionInput("Result is too large")
    return result
