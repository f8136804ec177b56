"""
_io.py
======
Plain-text binary matrices.

One taxon per line.  A line is either a run of 0/1 characters (``0110``) or
0/1 tokens separated by whitespace and/or commas (``0 1 1 0``, ``0,1,1,0``).
Blank lines and everything after ``#`` are ignored.

  parse_matrix(text)   -> bool ndarray (n, m)
  read_matrix(path)    -> bool ndarray (n, m)
  format_matrix(M)     -> str
"""

import logging
import os
import re
from typing import List, Union

import numpy as np

from perphy._matrix import as_binary_matrix
from perphy._utils import format_state


logger = logging.getLogger(__name__)

_SEPARATOR = re.compile(r"[\s,]+")


def parse_matrix(text: str) -> np.ndarray:
    """
    Parse a text matrix into a boolean array.

    Raises
    ------
    ValueError
        On a token other than 0/1, or rows of different lengths.

    Examples
    --------
    >>> parse_matrix('''
    ... # taxa x characters
    ... 100
    ... 1 1 0
    ... 1,1,1
    ... ''').astype(int)
    array([[1, 0, 0],
           [1, 1, 0],
           [1, 1, 1]])
    """
    rows: List[List[bool]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        tokens = _SEPARATOR.split(line)
        if len(tokens) == 1:
            tokens = list(tokens[0])
        for token in tokens:
            if token not in ("0", "1"):
                raise ValueError(
                    f"Line {lineno}: expected 0/1 character states, got {token!r}."
                )
        row = [token == "1" for token in tokens]
        if rows and len(row) != len(rows[0]):
            raise ValueError(
                f"Line {lineno}: row has {len(row)} characters, "
                f"expected {len(rows[0])}."
            )
        rows.append(row)

    if not rows:
        return np.zeros((0, 0), dtype=np.bool_)
    return np.array(rows, dtype=np.bool_)


def read_matrix(path: Union[str, os.PathLike]) -> np.ndarray:
    """Read a text matrix file; see ``parse_matrix`` for the format."""
    with open(path) as fh:
        matrix = parse_matrix(fh.read())
    logger.info(
        "Read %d taxa x %d characters from %s", matrix.shape[0], matrix.shape[1], path
    )
    return matrix


def format_matrix(matrix) -> str:
    """
    Render a binary matrix with one 0/1 string per line.

    >>> print(format_matrix([[1, 0], [1, 1]]))
    10
    11
    """
    arr = as_binary_matrix(matrix)
    return "\n".join(format_state(row) for row in arr)
