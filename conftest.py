"""
conftest.py
===========
Session-level pytest configuration for the test suite.

Custom marks
------------
randomized
    Applied to property tests that sweep many seeded random matrices.
    Deselect with ``-m "not randomized"`` for a quick run.

Warning filters
---------------
NumbaPerformanceWarning messages are filtered out during tests.  Tiny test
matrices leave the parallel kernel's threads idle, which is expected and
not informative for correctness testing.
"""

import warnings

from numba.core.errors import NumbaPerformanceWarning


def pytest_configure(config):
    """
    Configure pytest before test collection begins.

    This runs before any test modules are imported, which is important for
    catching warnings from numba kernel compilation.
    """
    config.addinivalue_line(
        "markers",
        "randomized: property tests over many seeded random matrices",
    )
    warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


def pytest_unconfigure(config):
    """Restore default warning behavior."""
    warnings.resetwarnings()
