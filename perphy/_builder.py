"""
_builder.py
===========
Construction of a perfect phylogeny from a binary taxon × character matrix.

Public API
----------
  check_preconditions(M, backend=None, require_sorted=True)
      -> PhylogenyError | None
  validate(M, backend=None, require_sorted=True) -> bool ndarray
  build(M, backend=None)        -> (PhylogenyTree, node_labels, edge_labels)
  reconstruct(M, backend=None)  -> (PhylogenyTree, node_labels, edge_labels)

Algorithm
---------
Taxa are inserted one row at a time, in the given order.  At the start of
each iteration the tree is a perfect phylogeny for the rows already seen.

1. Traversal.  Starting at the root (state 0), walk the row's characters
   left to right.  For each character the row has, set its bit in the
   current state and look the result up in the table of internal nodes.
   Stop at the first state that is not registered; that column is the
   *mismatch column* (``n_characters`` if the whole path already exists).
2. Extension.  From the last matched node, create one internal node and one
   character-labeled edge for every remaining character of the row.
3. Leaf attachment.  Hang a leaf for the taxon off the last node via an
   unlabeled edge.  Leaves are never registered in the lookup table, so a
   later taxon with the same state can never grow below a leaf.

Because columns are sorted by non-increasing weight and the matrix has a
perfect phylogeny, two taxa that agree on their characters up to some
column share the same tree path up to that point (shared-prefix property).
A state lookup is therefore equivalent to following a tree edge.

State vectors are keyed by Python integers (bit ``j`` = column ``j``), which
are unbounded, so the same code serves any number of characters.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from perphy._compat import incompatible_pairs
from perphy._errors import (
    DuplicateColumnError,
    DuplicateRowError,
    IncompatibleMatrixError,
    PhylogenyError,
    UnsortedInputError,
)
from perphy._logging import (
    log_duplicate_groups,
    log_incompatible_pairs,
    log_matrix_summary,
    log_taxon_placement,
    log_tree_statistics,
    log_unsorted_columns,
)
from perphy._matrix import (
    as_binary_matrix,
    column_weights,
    duplicate_columns,
    duplicate_rows,
    is_sorted,
    sort_columns,
)
from perphy._tree import InternalNode, LeafNode, Node, PhylogenyTree


# ======================================================================== #
# Preconditions                                                             #
# ======================================================================== #


def check_preconditions(
    matrix, backend: Optional[str] = None, require_sorted: bool = True
) -> Optional[PhylogenyError]:
    """
    Run the builder's precondition checks and return the first failure.

    Checks run in this order: perfect phylogeny exists, no duplicate
    columns, no duplicate rows, columns sorted.  Nothing is raised; the
    error instance is returned so callers can report or raise it.

    Parameters
    ----------
    matrix : array-like
        Binary matrix, shape ``(n, m)``.
    backend : str or None
        Backend for the compatibility check.
    require_sorted : bool
        Whether unsorted columns count as a failure.

    Returns
    -------
    PhylogenyError or None
        ``IncompatibleMatrixError``, ``DuplicateColumnError``,
        ``DuplicateRowError`` or ``UnsortedInputError``; None if the matrix
        is ready for ``build``.

    Raises
    ------
    ValueError
        If *matrix* is not a 2-D binary matrix.
    """
    arr = as_binary_matrix(matrix)

    pairs = incompatible_pairs(arr, backend=backend)
    if pairs:
        log_incompatible_pairs(pairs, arr.shape[1])
        return IncompatibleMatrixError(pairs)

    groups = duplicate_columns(arr)
    if groups:
        log_duplicate_groups("column", groups)
        return DuplicateColumnError(groups)

    groups = duplicate_rows(arr)
    if groups:
        log_duplicate_groups("row", groups)
        return DuplicateRowError(groups)

    if require_sorted and not is_sorted(arr):
        weights = column_weights(arr)
        log_unsorted_columns(weights)
        return UnsortedInputError(weights)

    return None


def validate(
    matrix, backend: Optional[str] = None, require_sorted: bool = True
) -> np.ndarray:
    """
    Raise the first precondition failure, or return the coerced matrix.

    Raises
    ------
    PhylogenyError
        One of the four precondition errors.
    """
    arr = as_binary_matrix(matrix)
    error = check_preconditions(arr, backend=backend, require_sorted=require_sorted)
    if error is not None:
        raise error
    return arr


# ======================================================================== #
# Construction                                                              #
# ======================================================================== #


def _traverse_until_mismatch(
    columns: Sequence[int], lookup: Dict[int, int], n_characters: int
) -> Tuple[int, int, int]:
    """
    Walk registered states along a taxon's characters.

    Parameters
    ----------
    columns : sequence of int
        Sorted 0-based columns where the taxon has state 1.
    lookup : dict
        State key -> internal node ID.
    n_characters : int
        Number of columns, returned as the mismatch column on a full match.

    Returns
    -------
    (key, n_matched, mismatch_column)
        State key of the last matched node, how many of *columns* were
        matched, and the first unmatched column.
    """
    key = 0
    for k, col in enumerate(columns):
        candidate = key | (1 << col)
        if candidate not in lookup:
            return key, k, col
        key = candidate
    return key, len(columns), n_characters


def _construct(arr: np.ndarray) -> PhylogenyTree:
    """Build the tree for a matrix already known to satisfy the preconditions."""
    n_taxa, n_characters = arr.shape

    nodes: List[Node] = [InternalNode(0)]
    parent: List[int] = [-1]
    edge_labels: Dict[Tuple[int, int], int] = {}
    lookup: Dict[int, int] = {0: 0}

    for row in range(n_taxa):
        columns = [int(j) for j in np.flatnonzero(arr[row])]
        key, n_matched, mismatch = _traverse_until_mismatch(
            columns, lookup, n_characters
        )

        current = lookup[key]
        for col in columns[n_matched:]:
            key |= 1 << col
            nodes.append(InternalNode(key))
            parent.append(current)
            new_id = len(nodes) - 1
            edge_labels[(current, new_id)] = col + 1
            lookup[key] = new_id
            current = new_id

        nodes.append(LeafNode(taxon=row + 1, key=key))
        parent.append(current)

        log_taxon_placement(row + 1, n_matched, mismatch, len(columns) - n_matched)

    return PhylogenyTree(nodes, parent, edge_labels, n_characters)


def build(matrix, backend: Optional[str] = None):
    """
    Construct the perfect phylogeny of a validated, column-sorted matrix.

    Parameters
    ----------
    matrix : array-like
        Binary matrix, shape ``(n_taxa, n_characters)``.  Columns must be
        sorted by non-increasing weight.
    backend : str or None
        Backend for the compatibility precondition.

    Returns
    -------
    tree : PhylogenyTree
    node_labels : dict[int, np.ndarray]
        State vector for every node, leaves included.
    edge_labels : dict[tuple[int, int], int]
        1-based character (column ``j`` is character ``j + 1``) for each
        character-labeled edge.  Leaf edges have no entry.

    Raises
    ------
    IncompatibleMatrixError, DuplicateColumnError, DuplicateRowError,
    UnsortedInputError
        Before any node is created; no partial tree is ever returned.

    Examples
    --------
    >>> tree, nodes, edges = build([[1, 0, 0], [1, 1, 0], [1, 1, 1]])
    >>> sorted(edges.values())
    [1, 2, 3]
    >>> tree.n_leaves
    3
    """
    arr = validate(matrix, backend=backend)
    log_matrix_summary(arr.shape[0], arr.shape[1], column_weights(arr))

    tree = _construct(arr)
    log_tree_statistics(
        tree.n_nodes, tree.n_leaves, len(tree.edge_labels), tree.max_depth
    )
    return tree, tree.node_labels(), dict(tree.edge_labels)


def _remap_key(key: int, order: np.ndarray) -> int:
    """Move bit ``k`` of *key* to bit ``order[k]``."""
    out = 0
    k = 0
    while key:
        if key & 1:
            out |= 1 << int(order[k])
        key >>= 1
        k += 1
    return out


def reconstruct(matrix, backend: Optional[str] = None):
    """
    Validate, sort and build in one step, reporting results in the
    caller's original column order.

    Unlike ``build``, the matrix does not need sorted columns.  Characters
    in the returned edge labels and state vectors refer to the columns of
    *matrix* as given.

    Returns
    -------
    Same triple as ``build``.

    Raises
    ------
    IncompatibleMatrixError, DuplicateColumnError, DuplicateRowError
        Indices in the error refer to the unsorted input.

    Examples
    --------
    >>> tree, nodes, edges = reconstruct([[0, 0, 1, 0], [0, 1, 1, 0],
    ...                                   [1, 0, 0, 1], [1, 0, 0, 0]])
    >>> sorted(tree.taxon_characters(3))
    [1, 4]
    """
    arr = validate(matrix, backend=backend, require_sorted=False)
    log_matrix_summary(arr.shape[0], arr.shape[1], column_weights(arr))

    sorted_arr, order = sort_columns(arr, return_order=True)
    sorted_tree = _construct(sorted_arr)

    nodes: List[Node] = []
    for node in sorted_tree.nodes:
        if isinstance(node, LeafNode):
            nodes.append(LeafNode(taxon=node.taxon, key=_remap_key(node.key, order)))
        else:
            nodes.append(InternalNode(_remap_key(node.key, order)))
    edge_labels = {
        edge: int(order[char - 1]) + 1 for edge, char in sorted_tree.edge_labels.items()
    }
    tree = PhylogenyTree(nodes, sorted_tree.parent, edge_labels, arr.shape[1])

    log_tree_statistics(
        tree.n_nodes, tree.n_leaves, len(tree.edge_labels), tree.max_depth
    )
    return tree, tree.node_labels(), dict(tree.edge_labels)
