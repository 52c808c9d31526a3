"""
KeyCalc Configuration Settings
"""
import logging
import os

# Application Settings
APP_NAME = "KeyCalc Calculator"
VERSION = "1.0.0"

# Display Settings
WINDOW_WIDTH = 720
WINDOW_HEIGHT = 480
DISPLAY_FONT = ("Consolas", 24, "bold")
EQUATION_FONT = ("Consolas", 12)
BUTTON_FONT = ("Segoe UI", 12)
LABEL_FONT = ("Segoe UI", 11)

THEME = {
    "bg":           "#DDE6ED",
    "display_bg":   "#C8D4DF",
    "display_fg":   "#1A2332",
    "btn_bg":       "#DDE6ED",
    "btn_fg":       "#2B3A4A",
    "operator_fg":  "#1E7A56",
    "equals_bg":    "#2E8B57",
    "equals_fg":    "#FFFFFF",
    "accent":       "#2E8B57",
    "text":         "#2B3A4A",
    "subtext":      "#6E8090",
    "danger":       "#B03A2E",
    "listbox_bg":   "#C8D4DF",
    "listbox_fg":   "#1A2332",
}

# Number formatting
MAX_FRACTION_DIGITS = 8
SIGNIFICANT_DIGITS = 15
DEFAULT_GLYPH = "0"
ERROR_GLYPH = "Error"

# Trigonometric functions read angles in "deg" or "rad"
ANGLE_MODE = os.environ.get("KEYCALC_ANGLE_MODE", "deg")

# Database Settings
DB_PATH = os.environ.get(
    "KEYCALC_DB_PATH",
    os.path.join(os.path.dirname(__file__), "keycalc.db"),
)

# History Settings
HISTORY_BLOB_KEY = "calculation_history"
MAX_HISTORY_ITEMS = 100

# Web Portal settings
WEB_HOST = '0.0.0.0'
WEB_PORT = int(os.environ.get("KEYCALC_WEB_PORT", 8888))

# Logging
LOG_LEVEL = os.environ.get("KEYCALC_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL):
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
