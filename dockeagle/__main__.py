"""Run dockeagle with ``python -m dockeagle``."""

import sys

from dockeagle.app import main

if __name__ == "__main__":
    sys.exit(main())
