"""Entry point for running prismbus as a module.

This file allows the scenario runner to be started with: python -m prismbus
"""

import sys

from prismbus.app import main

if __name__ == "__main__":
    sys.exit(main())
