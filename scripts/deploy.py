"""
Deploy PriceFeed to the configured network and print its address.

    python scripts/deploy.py
"""

import sys

from redstone_demo.cli.main import setup_logging
from redstone_demo.deploy import main

if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
