#!/usr/bin/env python3
"""pomo entry point.

Run with:
    python main.py [MINUTES]
    python -m pomotimer [MINUTES]
"""

from pomotimer.cli import main


if __name__ == "__main__":
    main()
