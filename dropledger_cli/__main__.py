"""
Module execution entry point.

Allows running with: python -m dropledger_cli
"""

import sys
from dropledger_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
