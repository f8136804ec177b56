"""
_matrix.py
==========
Binary taxon × character matrices: input coercion, structural validation
and the column sorter.

Rows are taxa, columns are characters.  The all-zero ancestor row is
implicit and never stored.  Everything here is a pure function of the
input; nothing is mutated in place.

Public API
----------
  as_binary_matrix(M)            -> bool ndarray (n, m)
  has_no_duplicate_rows(M)       -> bool
  has_no_duplicate_columns(M)    -> bool
  duplicate_rows(M)              -> list of 0-based row groups
  duplicate_columns(M)           -> list of 0-based column groups
  column_weights(M)              -> int64 ndarray (m,)
  sort_columns(M, return_order)  -> bool ndarray (n, m) [, order]
  is_sorted(M)                   -> bool
"""

from typing import Dict, List

import numpy as np


def as_binary_matrix(matrix) -> np.ndarray:
    """
    Return *matrix* as a 2-D boolean numpy array.

    Parameters
    ----------
    matrix : array-like
        Nested sequences or an ndarray of booleans or 0/1 values.

    Returns
    -------
    np.ndarray
        dtype ``bool``, shape ``(n_taxa, n_characters)``.  Boolean input is
        returned without copying.

    Raises
    ------
    ValueError
        If *matrix* is not 2-D, or holds anything other than 0/1 (missing or
        ambiguous character states are not supported).

    Examples
    --------
    >>> as_binary_matrix([[0, 1], [1, 1]]).dtype
    dtype('bool')
    """
    arr = np.asarray(matrix)
    if arr.ndim != 2:
        raise ValueError(
            f"Expected a 2-D taxon x character matrix, got {arr.ndim} dimension(s)."
        )
    if arr.dtype == np.bool_:
        return arr
    if arr.size > 0 and not np.isin(arr, (0, 1)).all():
        bad = arr[~np.isin(arr, (0, 1))]
        raise ValueError(
            f"Matrix entries must be 0/1 or booleans; found {bad.flat[0]!r}."
        )
    return arr.astype(np.bool_)


def _duplicate_groups(vectors: np.ndarray) -> List[List[int]]:
    """Group row indices of *vectors* by identical content; keep groups of 2+."""
    vectors = np.ascontiguousarray(vectors)
    seen: Dict[bytes, List[int]] = {}
    for i in range(vectors.shape[0]):
        seen.setdefault(vectors[i].tobytes(), []).append(i)
    return [group for group in seen.values() if len(group) > 1]


def duplicate_rows(matrix) -> List[List[int]]:
    """
    Return groups of 0-based row indices whose rows are identical.

    >>> duplicate_rows([[0, 1], [1, 0], [0, 1]])
    [[0, 2]]
    """
    return _duplicate_groups(as_binary_matrix(matrix))


def duplicate_columns(matrix) -> List[List[int]]:
    """
    Return groups of 0-based column indices whose columns are identical.

    >>> duplicate_columns([[0, 1, 1, 0], [1, 1, 1, 1], [1, 0, 0, 0]])
    [[1, 2]]
    """
    return _duplicate_groups(as_binary_matrix(matrix).T)


def has_no_duplicate_rows(matrix) -> bool:
    """True iff the rows (taxa) of *matrix* are pairwise distinct."""
    return not duplicate_rows(matrix)


def has_no_duplicate_columns(matrix) -> bool:
    """True iff the columns (characters) of *matrix* are pairwise distinct."""
    return not duplicate_columns(matrix)


def column_weights(matrix) -> np.ndarray:
    """Number of taxa possessing each character, as an int64 vector."""
    return as_binary_matrix(matrix).sum(axis=0, dtype=np.int64)


def sort_columns(matrix, return_order: bool = False):
    """
    Reorder columns by descending weight (number of ones).

    Ties keep their original relative order (stable sort), so the output is
    reproducible for a given input.  Row content is untouched.

    Parameters
    ----------
    matrix : array-like
        Binary matrix, shape ``(n, m)``.
    return_order : bool
        If True, also return the permutation applied.

    Returns
    -------
    np.ndarray
        Sorted boolean matrix (when *return_order* is False).
    (np.ndarray, np.ndarray)
        ``(sorted_matrix, order)`` where ``sorted_matrix[:, k]`` is
        ``matrix[:, order[k]]`` (when *return_order* is True).

    Examples
    --------
    >>> m = [[0, 1, 1, 0], [1, 1, 1, 1], [0, 0, 0, 1], [0, 0, 0, 1]]
    >>> sort_columns(m).astype(int)
    array([[0, 1, 1, 0],
           [1, 1, 1, 1],
           [1, 0, 0, 0],
           [1, 0, 0, 0]])
    """
    arr = as_binary_matrix(matrix)
    weights = arr.sum(axis=0, dtype=np.int64)
    order = np.argsort(-weights, kind="stable")
    sorted_arr = arr[:, order]
    if return_order:
        return sorted_arr, order
    return sorted_arr


def is_sorted(matrix) -> bool:
    """
    True iff column weights are non-increasing from left to right.

    A matrix with zero or one column is trivially sorted.
    """
    weights = column_weights(matrix)
    return bool(np.all(weights[1:] <= weights[:-1]))
