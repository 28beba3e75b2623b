"""ucdoc CLI entry point.

This module enables running ucdoc as:
    python -m ucdoc <command>
"""

from ucdoc.cli import main

if __name__ == "__main__":
    main()
