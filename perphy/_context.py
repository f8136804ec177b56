"""
_context.py
===========
Context managers for perphy.

Provides context managers for temporarily changing state:
- Logging control (suppress/change levels)
- Warning control (suppress specific warnings)
- Backend selection (force specific backend)

All context managers restore state on exit, even if exceptions occur.
"""

import logging
import warnings
from contextlib import contextmanager
from typing import Optional, Type


# Module-level state for backend override
_backend_override = None


# ============================================================================ #
# Logging Context Managers
# ============================================================================ #


@contextmanager
def suppress_logger(logger_name: str, level: int = logging.CRITICAL):
    """
    Temporarily change a logger's level.

    Parameters
    ----------
    logger_name : str
        Name of the logger to suppress (e.g. 'perphy._builder').
    level : int, default logging.CRITICAL
        Temporary logging level.

    Examples
    --------
    >>> # Silence the builder's per-tree statistics
    >>> with suppress_logger('perphy._builder'):
    ...     tree, nodes, edges = build(m)

    Notes
    -----
    - Exception-safe: Logger level restored even if exception raised
    - Nesting-safe: Can nest multiple suppress_logger contexts
    """
    logger = logging.getLogger(logger_name)
    original_level = logger.level

    try:
        logger.setLevel(level)
        yield
    finally:
        logger.setLevel(original_level)


@contextmanager
def quiet(level: int = logging.CRITICAL):
    """
    Temporarily suppress all perphy logging.

    Every module logger is a child of the ``'perphy'`` logger, so raising
    that one level silences the whole package.

    Examples
    --------
    >>> with quiet():
    ...     tree, nodes, edges = reconstruct(m)

    >>> # Show only warnings (precondition failures)
    >>> with quiet(logging.WARNING):
    ...     has_phylogeny(m)
    """
    with suppress_logger("perphy", level):
        yield


# ============================================================================ #
# Warning Context Managers
# ============================================================================ #


@contextmanager
def suppress_warnings(category: Optional[Type[Warning]] = None):
    """
    Temporarily suppress warnings.

    Parameters
    ----------
    category : Type[Warning] or None, default None
        Warning category to suppress. If None, suppresses all warnings.
        ``NumbaPerformanceWarning`` is the usual candidate: small matrices
        leave most of the parallel kernel's threads idle.

    Examples
    --------
    >>> from numba.core.errors import NumbaPerformanceWarning
    >>> with suppress_warnings(NumbaPerformanceWarning):
    ...     has_phylogeny(m, backend='cpu-parallel')
    """
    with warnings.catch_warnings():
        if category is None:
            warnings.simplefilter("ignore")
        else:
            warnings.filterwarnings("ignore", category=category)
        yield


# ============================================================================ #
# Backend Context Managers
# ============================================================================ #


@contextmanager
def use_backend(backend: str):
    """
    Temporarily force a specific backend for compatibility checks.

    The override applies wherever a function is called with
    ``backend=None`` or ``backend='best'``; an explicit backend argument
    still wins.

    Parameters
    ----------
    backend : str
        'python', 'cpu-parallel' or 'best'.

    Raises
    ------
    ValueError
        If requested backend is not available.

    Examples
    --------
    >>> # Force the reference backend for debugging
    >>> with use_backend('python'):
    ...     tree, nodes, edges = build(m)

    Notes
    -----
    **Not thread-safe**: uses module-level state.  Pass ``backend=`` directly
    when calling from several threads.
    """
    global _backend_override

    from ._backend import get_available_backends

    available = get_available_backends()

    if backend != "best" and backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available. "
            f"Available backends: {', '.join(available)}"
        )

    original_override = _backend_override

    try:
        _backend_override = backend
        yield
    finally:
        _backend_override = original_override


def get_backend_override() -> Optional[str]:
    """
    Get the current backend override, if any.

    >>> get_backend_override() is None
    True
    >>> with use_backend('python'):
    ...     print(get_backend_override())
    python
    """
    return _backend_override
