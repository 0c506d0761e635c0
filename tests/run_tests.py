#!/usr/bin/env python3
"""
Test runner for the Phone Pickup Counter.

This script runs all the unit tests in the tests/unit directory.
"""

import sys
import unittest
from pathlib import Path

def load_test_suite() -> unittest.TestSuite:
    """Discover all test modules in the tests/unit directory."""
    test_dir = Path(__file__).parent / 'unit'
    return unittest.TestLoader().discover(str(test_dir), pattern='test_*.py',
                                          top_level_dir=str(test_dir))

def main():
    """Run the unit tests and return a process exit code."""
    # Allow running from a checkout without installing the package
    sys.path.insert(0, str(Path(__file__).parent.parent))

    suite = load_test_suite()
    print(f"Found {suite.countTestCases()} tests")

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)
    return 0 if result.wasSuccessful() else 1

if __name__ == "__main__":
    sys.exit(main())
