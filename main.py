#!/usr/bin/env python3
"""
Changelog Issues - GitHub changelog to issues sync
==================================================

Main application entry point.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py show-feed                 # List entries of the configured feed
    python main.py sync                      # Create issues for new entries
    python main.py sync --dry-run            # Preview without calling GitHub
"""

import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from changelog_issues.cli import main


if __name__ == "__main__":
    main()
