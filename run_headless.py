"""
Launch the minions ecosystem without a display.

Usage:
    python run_headless.py --ticks 20000 --seed 3 --plot population.png
"""

import sys

from minions.cli import main


if __name__ == "__main__":
    sys.exit(main())
