"""
test_cpu_kernels.py
===================
Tests for the CPU kernel (_cpu_kernels.py).

These tests call the numba kernel directly on small uint8 matrices and
check the pattern masks it writes.  Agreement with the pure-Python backend
over random matrices is covered in test_compat.py.
"""

import inspect
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest

from perphy._cpu_kernels import FORBIDDEN_PATTERN, _pair_patterns_njit


def run_kernel(matrix) -> np.ndarray:
    arr = np.ascontiguousarray(matrix, dtype=np.uint8)
    out = np.zeros((arr.shape[1], arr.shape[1]), dtype=np.uint8)
    _pair_patterns_njit(arr, out)
    return out


class TestKernelImports:
    """Test that the kernel module exposes what callers rely on."""

    def test_kernel_is_callable(self):
        assert callable(_pair_patterns_njit)

    def test_kernel_has_two_parameters(self):
        # numba dispatchers keep the Python signature of the wrapped function
        params = list(inspect.signature(_pair_patterns_njit.py_func).parameters)
        assert params == ["matrix", "patterns_out"]

    def test_forbidden_pattern_value(self):
        # bits for (0,1), (1,0), (1,1)
        assert FORBIDDEN_PATTERN == (1 << 1) | (1 << 2) | (1 << 3)


class TestPairPatternsKernel:
    def test_chain(self):
        out = run_kernel([[1, 0, 0], [1, 1, 0], [1, 1, 1]])
        assert out[0, 1] == 0b1100
        assert out[0, 2] == 0b1100
        assert out[1, 2] == 0b1101

    def test_forbidden_pair_detected(self):
        out = run_kernel([[0, 1, 1, 0], [1, 1, 1, 1], [1, 0, 0, 0]])
        assert out[0, 1] == FORBIDDEN_PATTERN
        assert out[0, 2] == FORBIDDEN_PATTERN
        assert out[1, 2] == 0b1001

    def test_all_four_gametes(self):
        out = run_kernel([[0, 0], [0, 1], [1, 0], [1, 1]])
        assert out[0, 1] == 0b1111

    def test_only_upper_triangle_written(self):
        rng = np.random.default_rng(7)
        out = run_kernel(rng.integers(0, 2, size=(9, 6)))
        assert not np.tril(out).any()

    @pytest.mark.parametrize("shape", [(0, 4), (3, 0), (1, 1)])
    def test_degenerate_shapes(self, shape):
        out = run_kernel(np.zeros(shape, dtype=np.uint8))
        assert out.shape == (shape[1], shape[1])
        assert not out.any()

    def test_wide_matrix(self):
        rng = np.random.default_rng(11)
        m = rng.integers(0, 2, size=(20, 64))
        out = run_kernel(m)
        c, d = 5, 40
        expected = 0
        for a, b in zip(m[:, c], m[:, d]):
            expected |= 1 << (2 * int(a) + int(b))
        assert out[c, d] == expected
