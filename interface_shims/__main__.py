"""Allow ``python -m interface_shims``."""

import sys

from interface_shims.cli import main

if __name__ == "__main__":
    sys.exit(main())
