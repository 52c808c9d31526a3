"""
KeyCalc Calculator
Main application entry point
"""
import logging
import tkinter as tk
import config
from api import build_calculator
from gui import KeyCalcGUI

logger = logging.getLogger(__name__)


def main():
    config.setup_logging()
    calculator = build_calculator()
    logger.info("Starting %s %s", config.APP_NAME, config.VERSION)

    try:
        # Start the GUI
        root = tk.Tk()
        KeyCalcGUI(root, calculator)
        root.mainloop()
    finally:
        # Final flush when the window closes
        calculator.close()


if __name__ == "__main__":
    main()
