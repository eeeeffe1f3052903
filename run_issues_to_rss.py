#!/usr/bin/env python3
"""Command-line runner for Issues to RSS that works without installing the package."""

import os
import sys

# Add the src directory to the path so we can import our package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "src")))

from issues_to_rss.main import main

if __name__ == "__main__":
    sys.exit(main())
