#!/usr/bin/env python3
"""Format and lint the Issues to RSS code base with Ruff."""

import argparse
import glob
import os
import subprocess
import sys

DEFAULT_PATHS = [
    "src",
    "tests",
    "run_issues_to_rss.py",
    "run_tests.py",
    "setup.py",
    "lint.py",
]
RUFF_ARGS = ["--line-length", "110"]


def collect_files(paths):
    """Expand directories and glob patterns into a sorted list of Python files."""
    found = []
    for path in paths:
        if os.path.isdir(path):
            found.extend(glob.glob(os.path.join(path, "**", "*.py"), recursive=True))
        elif os.path.isfile(path) and path.endswith(".py"):
            found.append(path)
        else:
            found.extend(glob.glob(path, recursive=True))
    return sorted({f for f in found if os.path.isfile(f)})


def run(command):
    print(f"Running: {' '.join(command)}")
    result = subprocess.run(command, capture_output=True, text=True)
    print(result.stdout)
    if result.stderr:
        print(result.stderr, file=sys.stderr)
    return result.returncode


def main():
    """Parse arguments, then run the formatter and the linter."""
    parser = argparse.ArgumentParser(description="Run Ruff formatter and linter on the codebase")
    parser.add_argument("--paths", nargs="+", default=DEFAULT_PATHS, help="Paths to format and lint")
    parser.add_argument("--statistics", action="store_true", help="Show statistics during check phase")
    args = parser.parse_args()

    target_files = collect_files(args.paths)
    if not target_files:
        print("No Python files found to format or lint.")
        return 0

    print("\n--- Running Ruff Formatter ---")
    if run(["ruff", "format", *RUFF_ARGS, *target_files]) != 0:
        print("\nFormatter failed.", file=sys.stderr)

    print("\n--- Running Ruff Linter (with fixes) ---")
    check_command = ["ruff", "check", "--fix", *RUFF_ARGS, *target_files]
    if args.statistics:
        check_command.append("--statistics")
    if run(check_command) != 0:
        print("\nRuff check found errors (even after attempting fixes).", file=sys.stderr)
        return 1

    print("\nRuff format and check passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
