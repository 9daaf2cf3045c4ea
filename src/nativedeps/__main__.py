"""Allow ``python -m nativedeps``."""

import sys

from nativedeps.cli import main

if __name__ == "__main__":
    sys.exit(main())
