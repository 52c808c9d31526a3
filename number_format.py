"""
Number formatting for KeyCalc
Renders floats to the canonical display string
"""
import math

import config


def format_number(value, max_fraction_digits=config.MAX_FRACTION_DIGITS):
    """Render a number for the display, trimming trailing zeros"""
    value = float(value)
    if not math.isfinite(value):
        return config.ERROR_GLYPH
    if value == 0:
        # Also catches -0.0
        return "0"

    magnitude = abs(value)
    if magnitude >= 1e15 or magnitude < 10 ** -max_fraction_digits:
        return f"{value:.{config.SIGNIFICANT_DIGITS}g}"
    if value.is_integer():
        return str(int(value))

    text = f"{value:.{max_fraction_digits}f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def parse_number(text):
    """Parse display text back into a float; raises ValueError"""
    return float(text)
