"""
_errors.py
==========
Precondition errors raised before a perfect phylogeny is constructed.

Every error is a deterministic function of the input matrix: nothing here is
transient or retryable.  All four classes derive from ``ValueError`` so that
callers who only care about "bad input" can catch the builtin type.

Hierarchy
---------
  PhylogenyError
      DuplicateRowError        two or more taxa share a character set
      DuplicateColumnError     two or more characters share an occurrence pattern
      IncompatibleMatrixError  some column pair shows the forbidden pattern
      UnsortedInputError       columns are not in non-increasing weight order
"""

from typing import List, Sequence, Tuple


class PhylogenyError(ValueError):
    """Base class for matrices that cannot be turned into a perfect phylogeny."""


class DuplicateRowError(PhylogenyError):
    """
    Raised when two or more taxa (rows) are identical.

    Attributes
    ----------
    groups : list[list[int]]
        Groups of 0-based row indices that share the same pattern.
    """

    def __init__(self, groups: Sequence[Sequence[int]]) -> None:
        self.groups: List[List[int]] = [list(g) for g in groups]
        super().__init__(
            f"Matrix has duplicate rows (0-based row groups): {self.groups}"
        )


class DuplicateColumnError(PhylogenyError):
    """
    Raised when two or more characters (columns) are identical.

    Attributes
    ----------
    groups : list[list[int]]
        Groups of 0-based column indices that share the same pattern.
    """

    def __init__(self, groups: Sequence[Sequence[int]]) -> None:
        self.groups: List[List[int]] = [list(g) for g in groups]
        super().__init__(
            f"Matrix has duplicate columns (0-based column groups): {self.groups}"
        )


class IncompatibleMatrixError(PhylogenyError):
    """
    Raised when at least one pair of columns is incompatible, i.e. the pairs
    observed across all rows are exactly {(0,1), (1,0), (1,1)}.

    Attributes
    ----------
    pairs : list[tuple[int, int]]
        Incompatible 0-based column pairs ``(c, d)`` with ``c < d``.
    """

    def __init__(self, pairs: Sequence[Tuple[int, int]]) -> None:
        self.pairs: List[Tuple[int, int]] = [(int(c), int(d)) for c, d in pairs]
        shown = ", ".join(str(p) for p in self.pairs[:5])
        if len(self.pairs) > 5:
            shown += f", ... ({len(self.pairs)} pairs total)"
        super().__init__(
            f"No perfect phylogeny exists; incompatible column pairs: {shown}"
        )


class UnsortedInputError(PhylogenyError):
    """
    Raised when the builder receives columns that are not sorted by
    non-increasing weight.  Call ``sort_columns`` first, or use
    ``reconstruct`` which sorts for you.

    Attributes
    ----------
    weights : list[int]
        Column weights (number of ones) in the order they were supplied.
    """

    def __init__(self, weights: Sequence[int]) -> None:
        self.weights: List[int] = [int(w) for w in weights]
        super().__init__(
            "Columns must be sorted by non-increasing number of ones; "
            f"got weights {self.weights}"
        )
