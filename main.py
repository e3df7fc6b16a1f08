"""
Monthly Work Hours Calculator

A PyQt6 application that reads a month's attendance workbook and reports
worked hours, leave, lateness and the pace needed to reach the target.
"""

import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from ui.main_window import run_app


def main():
    """Application entry point."""
    run_app()


if __name__ == "__main__":
    main()
