"""
_backend.py
===========
Backend selection for the compatibility checker.

Two execution backends compute column-pair patterns:

  'python'        Pure-Python reference implementation built on sets of
                  observed state pairs.  Slow, but the correctness baseline.
  'cpu-parallel'  LLVM-compiled parallel kernel (numba.njit + prange).

Functions in this module have NO side effects - they only query state.
Logging is done by the calling code, not here.
"""

from typing import List, Optional

import numba


BACKENDS = ("python", "cpu-parallel")


def get_available_backends() -> List[str]:
    """
    Get list of available execution backends, in preference order.

    Returns
    -------
    list[str]
        ``['python', 'cpu-parallel']``; the last entry is the most optimized.
    """
    return list(BACKENDS)


def get_best_backend() -> str:
    """
    Get the most optimized available backend.

    >>> get_best_backend()
    'cpu-parallel'
    """
    return get_available_backends()[-1]


def resolve_backend(backend: Optional[str] = None) -> str:
    """
    Resolve a backend specification to an actual backend.

    Parameters
    ----------
    backend : str or None
        ``'best'`` (or None) for the best available backend, otherwise one
        of ``'python'`` or ``'cpu-parallel'``.  An override installed with
        ``use_backend`` takes precedence over ``None`` and ``'best'``.

    Returns
    -------
    str
        Resolved backend name.

    Raises
    ------
    ValueError
        If the requested backend is unknown.

    Examples
    --------
    >>> resolve_backend('best')
    'cpu-parallel'
    >>> resolve_backend('python')
    'python'
    """
    if backend is None or backend == "best":
        from perphy._context import get_backend_override

        override = get_backend_override()
        if override is not None and override != "best":
            return override
        return get_best_backend()

    available = get_available_backends()
    if backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available. "
            f"Available backends: {', '.join(available)}"
        )
    return backend


def get_backend_info() -> dict:
    """
    Get comprehensive backend information.

    Returns
    -------
    dict
        Dictionary with keys:
        - 'backends': list[str]
        - 'best_backend': str
        - 'numba_version': str
        - 'llvmlite_version': str or None
        - 'num_threads': int

    Examples
    --------
    >>> info = get_backend_info()
    >>> info['backends']
    ['python', 'cpu-parallel']
    """
    try:
        import llvmlite

        llvmlite_version = llvmlite.__version__
    except (ImportError, AttributeError):
        llvmlite_version = None  # version unavailable

    return {
        "backends": get_available_backends(),
        "best_backend": get_best_backend(),
        "numba_version": numba.__version__,
        "llvmlite_version": llvmlite_version,
        "num_threads": numba.get_num_threads(),
    }
