"""
_cpu_kernels.py
===============
CPU-accelerated column-compatibility kernel using Numba.

This module contains ONLY numba-accelerated code and does not import other
project modules, to avoid import-time complications.

Exported Functions
------------------
_pair_patterns_njit : njit function
    Parallel computation of the observed (state_c, state_d) pattern mask for
    every unordered column pair.

FORBIDDEN_PATTERN : int
    The mask ``{(0,1), (1,0), (1,1)}`` that marks an incompatible pair.

Pattern encoding
----------------
For a pair of columns (c, d) the pattern is a 4-bit mask.  Bit ``2*a + b``
is set iff some row has state ``a`` in column c and state ``b`` in column d:

    bit 0  (0,0)      bit 1  (0,1)      bit 2  (1,0)      bit 3  (1,1)

Notes
-----
- cache=True persists the compiled binary to disk for faster subsequent runs
- The outer loop over c runs in parallel via prange; each thread owns row c
  of the output, so no atomics are needed
"""

import numpy as np
from numba import njit, prange


FORBIDDEN_PATTERN = 0b1110


@njit(parallel=True, cache=True)
def _pair_patterns_njit(matrix, patterns_out):
    """
    Fill the upper triangle of *patterns_out* with pair-pattern masks.

    Parameters
    ----------
    matrix : uint8[n_taxa, n_characters]
        Binary matrix (0/1 entries).
    patterns_out : uint8[n_characters, n_characters]
        Output array, zero-initialised by the caller.  Only entries with
        c < d are written; the diagonal and lower triangle stay zero.
    """
    n_taxa = matrix.shape[0]
    n_characters = matrix.shape[1]
    for c in prange(n_characters):
        for d in range(c + 1, n_characters):
            mask = 0
            for i in range(n_taxa):
                mask |= 1 << (2 * matrix[i, c] + matrix[i, d])
                if mask == 0b1111:
                    break
            patterns_out[c, d] = mask
