"""
perphy
======

Perfect phylogenies for binary character matrices under the infinite-site
model.

Given a taxon × character matrix of 0/1 states (rows are taxa, columns are
characters, the all-zero ancestor is implicit), *perphy* decides whether a
perfect phylogeny exists and, if so, builds it directly: a rooted tree whose
edges are labeled by characters and whose leaves are labeled by taxa.

Main Functions
--------------
build : Construct the tree for a validated, column-sorted matrix
reconstruct : Validate, sort and build in one step
has_phylogeny : Pairwise compatibility test over all column pairs

Matrix Utilities
----------------
as_binary_matrix, has_no_duplicate_rows, has_no_duplicate_columns,
sort_columns, is_sorted, column_weights, check_preconditions, validate

Label Formatting and I/O
------------------------
format_state, labels_to_strings, format_edge_labels,
parse_matrix, read_matrix, format_matrix

Context Managers
----------------
quiet : Suppress logging during operations
suppress_logger : Suppress specific logger
suppress_warnings : Suppress specific warnings
use_backend : Force specific computational backend

Examples
--------
>>> from perphy import reconstruct, labels_to_strings
>>> m = [[1, 1, 1, 0], [1, 1, 1, 1], [1, 1, 0, 0], [1, 0, 0, 0]]
>>> tree, nodes, edges = reconstruct(m)
>>> labels_to_strings(nodes)[tree.leaf_of(3)]
'1100'

With context managers:

>>> from perphy import has_phylogeny, quiet, use_backend
>>> with quiet(), use_backend('python'):
...     has_phylogeny([[0, 1, 1, 0], [1, 1, 1, 1], [1, 0, 0, 0]])
False
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Tree construction
from ._builder import build, reconstruct, check_preconditions, validate
from ._tree import PhylogenyTree, InternalNode, LeafNode

# Matrix validation and sorting
from ._matrix import (
    as_binary_matrix,
    has_no_duplicate_rows,
    has_no_duplicate_columns,
    duplicate_rows,
    duplicate_columns,
    column_weights,
    sort_columns,
    is_sorted,
)

# Compatibility
from ._compat import (
    are_columns_compatible,
    has_phylogeny,
    incompatible_pairs,
    pair_patterns,
)

# Errors
from ._errors import (
    PhylogenyError,
    DuplicateRowError,
    DuplicateColumnError,
    IncompatibleMatrixError,
    UnsortedInputError,
)

# Label formatting and I/O
from ._utils import format_state, labels_to_strings, format_edge_labels
from ._io import parse_matrix, read_matrix, format_matrix

# Context managers
from ._context import suppress_logger, quiet, suppress_warnings, use_backend

# Backend information
from ._backend import get_available_backends, get_backend_info

# Public API
__all__ = [
    # Tree construction
    "build",
    "reconstruct",
    "check_preconditions",
    "validate",
    "PhylogenyTree",
    "InternalNode",
    "LeafNode",
    # Matrix
    "as_binary_matrix",
    "has_no_duplicate_rows",
    "has_no_duplicate_columns",
    "duplicate_rows",
    "duplicate_columns",
    "column_weights",
    "sort_columns",
    "is_sorted",
    # Compatibility
    "are_columns_compatible",
    "has_phylogeny",
    "incompatible_pairs",
    "pair_patterns",
    # Errors
    "PhylogenyError",
    "DuplicateRowError",
    "DuplicateColumnError",
    "IncompatibleMatrixError",
    "UnsortedInputError",
    # Formatting and I/O
    "format_state",
    "labels_to_strings",
    "format_edge_labels",
    "parse_matrix",
    "read_matrix",
    "format_matrix",
    # Context managers
    "suppress_logger",
    "quiet",
    "suppress_warnings",
    "use_backend",
    # Backend information
    "get_available_backends",
    "get_backend_info",
    # Version info
    "__version__",
]
