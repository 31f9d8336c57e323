#!/usr/bin/env python
"""A standalone script to run the randomized queue stress check.

This script executes the randomized push/pop integration test without the
rest of the pytest suite. It is a quick way to check that a change to the
resize policy or the verifier keeps every invariant intact over long
operation sequences.

Usage:
    python scripts/run_stress_check.py
"""

import sys
from pathlib import Path

import pytest

try:
    ROOT_DIR = Path(__file__).resolve().parent.parent
except NameError:
    ROOT_DIR = Path.cwd()

# --- Configuration ---
STRESS_TEST_FILE = ROOT_DIR / "tests" / "integration" / "test_random_interleaving.py"


def main() -> int:
    """Runs the stress check using pytest.

    Returns:
        The exit code from the pytest run. 0 for success, non-zero for failure.
    """
    print("--- ringqueue stress check ---")
    print(f"Target test file: {STRESS_TEST_FILE}")
    print("-" * 30)

    if not STRESS_TEST_FILE.exists():
        print(f"Error: Test file not found at '{STRESS_TEST_FILE}'.")
        print("Please ensure you are running this script from the repository root.")
        return 1

    # -q: one line per test file
    # -p no:cacheprovider: do not write .pytest_cache next to the sources
    args = [str(STRESS_TEST_FILE), "-q", "-p", "no:cacheprovider"]

    exit_code = int(pytest.main(args))

    print("-" * 30)
    if exit_code == 0:
        print("Stress check completed successfully.")
    else:
        print(f"Stress check failed with exit code: {exit_code}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
