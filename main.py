#!/usr/bin/env python3
"""
Main entry point for Hypergres discovery
"""

import sys

from hypergres.cli.main_cli import main

if __name__ == "__main__":
    sys.exit(main())
