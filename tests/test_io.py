"""
tests/test_io.py
================
Tests for text matrix parsing and the label formatter.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from perphy._io import format_matrix, parse_matrix, read_matrix
from perphy._utils import format_edge_labels, format_state, labels_to_strings


_MATRICES_DIR = os.path.join(os.path.dirname(__file__), "matrices")


# ======================================================================== #
# Parsing                                                                   #
# ======================================================================== #


class TestParseMatrix:
    @pytest.mark.parametrize(
        "text",
        [
            "0110\n1111\n",
            "0 1 1 0\n1 1 1 1\n",
            "0,1,1,0\n1,1,1,1\n",
            "0, 1, 1, 0\n\n# comment\n1 1 1 1  # trailing\n",
        ],
    )
    def test_formats(self, text):
        assert parse_matrix(text).astype(int).tolist() == [[0, 1, 1, 0], [1, 1, 1, 1]]

    def test_dtype(self):
        assert parse_matrix("01\n").dtype == np.bool_

    def test_single_column(self):
        assert parse_matrix("1\n0\n").shape == (2, 1)

    def test_empty(self):
        assert parse_matrix("# nothing\n\n").shape == (0, 0)

    def test_bad_token(self):
        with pytest.raises(ValueError, match="Line 2"):
            parse_matrix("01\n0?\n")

    def test_ragged(self):
        with pytest.raises(ValueError, match="expected 3"):
            parse_matrix("011\n01\n")


class TestReadMatrix:
    def test_shared_prefix_file(self):
        m = read_matrix(os.path.join(_MATRICES_DIR, "shared_prefix.txt"))
        assert m.astype(int).tolist() == [
            [1, 1, 1, 0],
            [1, 1, 1, 1],
            [1, 1, 0, 0],
            [1, 0, 0, 0],
        ]

    def test_comma_file(self):
        m = read_matrix(os.path.join(_MATRICES_DIR, "unsorted.txt"))
        assert m.shape == (4, 4)

    def test_tmp_path(self, tmp_path):
        path = tmp_path / "m.txt"
        path.write_text("10\n11\n")
        assert read_matrix(path).astype(int).tolist() == [[1, 0], [1, 1]]

    def test_format_then_parse(self):
        m = np.array([[1, 0, 1], [0, 0, 1]], dtype=bool)
        np.testing.assert_array_equal(parse_matrix(format_matrix(m)), m)


# ======================================================================== #
# Label formatter                                                           #
# ======================================================================== #


class TestFormatter:
    def test_format_state(self):
        assert format_state([True, False, True]) == "101"
        assert format_state(np.array([0, 1, 1, 0])) == "0110"
        assert format_state([]) == ""

    def test_labels_to_strings(self):
        labels = {0: np.zeros(3, dtype=bool), 4: np.array([1, 1, 0], dtype=bool)}
        assert labels_to_strings(labels) == {0: "000", 4: "110"}

    def test_original_example(self):
        example = [[0, 1, 1, 0], [1, 1, 1, 1], [0, 0, 0, 1], [0, 0, 0, 1]]
        assert [format_state(row) for row in example] == ["0110", "1111", "0001", "0001"]

    def test_edge_labels(self):
        assert format_edge_labels({(0, 1): 1, (1, 3): 2}) == {(0, 1): "1", (1, 3): "2"}

    def test_edge_labels_with_names(self):
        out = format_edge_labels({(0, 1): 2}, characters=["a", "b"])
        assert out == {(0, 1): "b"}
