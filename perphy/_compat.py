"""
_compat.py
==========
Pairwise column compatibility and the global "has a perfect phylogeny" test.

Two columns c and d are *incompatible* when the set of (state_c, state_d)
pairs observed across all taxa is exactly {(0,1), (1,0), (1,1)}.  Any other
observed set is compatible -- including the one where all four pairs
(0,0), (0,1), (1,0), (1,1) occur.  This is narrower than the textbook
four-gamete test, and is kept as-is: the builder's shared-prefix walk was
validated against exactly this definition.

Public API
----------
  are_columns_compatible(M, c, d)     -> bool
  pair_patterns(M, backend=None)      -> uint8 ndarray (m, m)
  incompatible_pairs(M, backend=None) -> list[(c, d)]
  has_phylogeny(M, backend=None)      -> bool

Backends
--------
'python' is the set-based reference implementation, 'cpu-parallel' the
numba kernel in ``_cpu_kernels``.  Both produce identical pattern masks.
"""

from itertools import combinations
from typing import List, Optional, Set, Tuple

import numpy as np

from perphy._backend import resolve_backend
from perphy._cpu_kernels import FORBIDDEN_PATTERN, _pair_patterns_njit
from perphy._logging import log_backend_selection, log_incompatible_pairs
from perphy._matrix import as_binary_matrix


_INCOMPATIBLE_PAIR_SET = frozenset({(0, 1), (1, 0), (1, 1)})

# Track first kernel call for compilation logging
_kernel_first_call = {"cpu-parallel": True}


def _observed_pairs(arr: np.ndarray, c: int, d: int) -> Set[Tuple[int, int]]:
    """Set of (state in c, state in d) pairs over all rows of *arr*."""
    return set(zip(arr[:, c].astype(int).tolist(), arr[:, d].astype(int).tolist()))


def are_columns_compatible(matrix, c: int, d: int) -> bool:
    """
    Test whether columns *c* and *d* (0-based) are compatible.

    Returns False iff the observed pair set is exactly
    ``{(0,1), (1,0), (1,1)}``.

    Examples
    --------
    >>> m = [[0, 1, 1, 0], [1, 1, 1, 1], [1, 0, 0, 0]]
    >>> are_columns_compatible(m, 0, 1)
    False
    >>> are_columns_compatible(m, 0, 3)
    True
    """
    arr = as_binary_matrix(matrix)
    return _observed_pairs(arr, c, d) != _INCOMPATIBLE_PAIR_SET


def _pair_patterns_python(arr: np.ndarray) -> np.ndarray:
    """Reference implementation of the pair-pattern kernel."""
    n_characters = arr.shape[1]
    patterns = np.zeros((n_characters, n_characters), dtype=np.uint8)
    for c, d in combinations(range(n_characters), 2):
        mask = 0
        for a, b in _observed_pairs(arr, c, d):
            mask |= 1 << (2 * a + b)
        patterns[c, d] = mask
    return patterns


def pair_patterns(matrix, backend: Optional[str] = None) -> np.ndarray:
    """
    Observed-pattern mask for every unordered column pair.

    Parameters
    ----------
    matrix : array-like
        Binary matrix, shape ``(n, m)``.
    backend : str or None
        'python', 'cpu-parallel', 'best' or None (best, or the active
        ``use_backend`` override).

    Returns
    -------
    np.ndarray
        uint8, shape ``(m, m)``.  Entry ``[c, d]`` for ``c < d`` has bit
        ``2*a + b`` set iff some row shows state ``a`` in c and ``b`` in d.
        Diagonal and lower triangle are zero.
    """
    arr = as_binary_matrix(matrix)
    resolved = resolve_backend(backend)

    first_call = _kernel_first_call.get(resolved, False)
    log_backend_selection("pair_patterns", resolved, first_call)

    if resolved == "python":
        return _pair_patterns_python(arr)

    n_characters = arr.shape[1]
    patterns = np.zeros((n_characters, n_characters), dtype=np.uint8)
    _pair_patterns_njit(np.ascontiguousarray(arr, dtype=np.uint8), patterns)
    _kernel_first_call[resolved] = False
    return patterns


def incompatible_pairs(matrix, backend: Optional[str] = None) -> List[Tuple[int, int]]:
    """
    List every incompatible column pair.

    Returns
    -------
    list[tuple[int, int]]
        0-based pairs ``(c, d)`` with ``c < d``, in row-major order.
        Empty iff the matrix has a perfect phylogeny.

    Examples
    --------
    >>> incompatible_pairs([[0, 1, 1, 0], [1, 1, 1, 1], [1, 0, 0, 0]])
    [(0, 1), (0, 2)]
    """
    patterns = pair_patterns(matrix, backend=backend)
    return [(int(c), int(d)) for c, d in np.argwhere(patterns == FORBIDDEN_PATTERN)]


def has_phylogeny(matrix, backend: Optional[str] = None) -> bool:
    """
    True iff every unordered pair of distinct columns is compatible.

    The result is a pure conjunction over all ``m*(m-1)/2`` pairs and does
    not depend on column order.  A matrix with fewer than two columns
    always has a phylogeny.

    Examples
    --------
    >>> has_phylogeny([[0, 1, 1], [1, 1, 1], [0, 0, 1]])
    True
    >>> has_phylogeny([[0, 1, 1, 0], [1, 1, 1, 1], [1, 0, 1, 0]])
    False
    """
    arr = as_binary_matrix(matrix)
    pairs = incompatible_pairs(arr, backend=backend)
    log_incompatible_pairs(pairs, arr.shape[1])
    return not pairs
