#!/usr/bin/env python3
"""
Simple script to run the release control bot.

The configuration file path can be given as the first argument and
defaults to config.json in the working directory.
"""

import sys
from pathlib import Path

# Add the current directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from release_bot.__main__ import run


if __name__ == "__main__":
    run()
