"""
_logging.py
===========
Logging functions for perphy.

All functions in this module have NO side effects except logging. They take
computed data as parameters and format/emit log messages, so computation
stays separate from reporting and logging is easy to silence in tests.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np


logger = logging.getLogger(__name__)


def _format_index_list(items: Sequence, limit: int = 5) -> str:
    """Render at most *limit* items, summarising the rest."""
    shown = ", ".join(str(item) for item in items[:limit])
    if len(items) > limit:
        shown += f", ... ({len(items)} total)"
    return shown


# ============================================================================ #
# Input and Backend Logging
# ============================================================================ #


def log_matrix_summary(n_taxa: int, n_characters: int, weights: np.ndarray) -> None:
    """
    Log the shape of an input matrix and its column-weight range.

    Parameters
    ----------
    n_taxa : int
        Number of rows.
    n_characters : int
        Number of columns.
    weights : np.ndarray
        Number of ones per column.
    """
    if n_characters == 0:
        logger.info("Matrix: %d taxa, no characters", n_taxa)
        return
    logger.info(
        "Matrix: %d taxa x %d characters, column weights %d..%d",
        n_taxa,
        n_characters,
        int(weights.min()),
        int(weights.max()),
    )


def log_backend_selection(operation: str, backend: str, first_call: bool) -> None:
    """
    Log which backend an operation runs on.

    Parameters
    ----------
    operation : str
        Name of the public operation (e.g. 'has_phylogeny').
    backend : str
        Resolved backend name.
    first_call : bool
        Whether this is the first use of the compiled kernel in this session.
    """
    logger.info("%s(backend=%r)", operation, backend)
    if first_call and backend == "cpu-parallel":
        logger.info("  Compiling pair-pattern kernel (cached for future calls)")


# ============================================================================ #
# Precondition Failures
# ============================================================================ #


def log_duplicate_groups(kind: str, groups: List[List[int]]) -> None:
    """
    Emit a consolidated warning about duplicate rows or columns.

    Parameters
    ----------
    kind : str
        'row' or 'column'.
    groups : List[List[int]]
        Groups of 0-based indices sharing a pattern.
    """
    if not groups:
        return
    if len(groups) == 1:
        logger.warning(
            "1 group of duplicate %ss: %s", kind, _format_index_list(groups[0])
        )
    else:
        logger.warning(
            "%d groups of duplicate %ss: %s",
            len(groups),
            kind,
            _format_index_list(groups),
        )


def log_incompatible_pairs(pairs: List[Tuple[int, int]], n_characters: int) -> None:
    """
    Emit a consolidated warning about incompatible column pairs.

    Parameters
    ----------
    pairs : List[Tuple[int, int]]
        Incompatible 0-based column pairs.
    n_characters : int
        Number of columns, used to report the fraction of failing pairs.
    """
    if not pairs:
        return
    n_pairs = n_characters * (n_characters - 1) // 2
    if len(pairs) <= 5:
        logger.warning(
            "No perfect phylogeny: %d incompatible column pair(s): %s",
            len(pairs),
            _format_index_list(pairs),
        )
    else:
        logger.warning(
            "No perfect phylogeny: %d incompatible column pairs (%.1f%% of %d)",
            len(pairs),
            100.0 * len(pairs) / n_pairs,
            n_pairs,
        )


def log_unsorted_columns(weights: np.ndarray) -> None:
    """Warn that the builder was handed columns out of weight order."""
    first = int(np.argmax(weights[1:] > weights[:-1])) + 1
    logger.warning(
        "Columns are not sorted by weight: column %d (weight %d) follows "
        "column %d (weight %d). Use sort_columns() or reconstruct().",
        first,
        int(weights[first]),
        first - 1,
        int(weights[first - 1]),
    )


# ============================================================================ #
# Tree Construction Logging
# ============================================================================ #


def log_taxon_placement(
    taxon: int, matched: int, mismatch_column: int, n_created: int
) -> None:
    """
    Log, at DEBUG level, where one taxon was attached.

    Parameters
    ----------
    taxon : int
        1-based taxon label.
    matched : int
        Number of existing internal nodes walked below the root.
    mismatch_column : int
        0-based column where the walk stopped (n_characters on a full match).
    n_created : int
        Number of internal nodes created for this taxon.
    """
    logger.debug(
        "Taxon %d: matched %d node(s), mismatch at column %d, %d new node(s)",
        taxon,
        matched,
        mismatch_column,
        n_created,
    )


def log_tree_statistics(
    n_nodes: int, n_leaves: int, n_character_edges: int, max_depth: int
) -> None:
    """
    Log a summary of a finished tree.

    Parameters
    ----------
    n_nodes : int
        Total number of nodes, leaves included.
    n_leaves : int
        Number of taxon leaves.
    n_character_edges : int
        Number of character-labeled edges.
    max_depth : int
        Maximum edge depth from the root.
    """
    logger.info(
        "Tree built: %d nodes (%d internal, %d leaves), %d character edges, "
        "max depth %d",
        n_nodes,
        n_nodes - n_leaves,
        n_leaves,
        n_character_edges,
        max_depth,
    )
