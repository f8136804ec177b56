"""
tests/test_context.py
=====================
Tests for backend resolution and the context managers.
"""

import logging
import os
import sys
import warnings

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from perphy._backend import (
    get_available_backends,
    get_backend_info,
    get_best_backend,
    resolve_backend,
)
from perphy._builder import build
from perphy._context import (
    get_backend_override,
    quiet,
    suppress_logger,
    suppress_warnings,
    use_backend,
)


class TestBackendResolution:
    def test_available(self):
        assert get_available_backends() == ["python", "cpu-parallel"]

    def test_best(self):
        assert get_best_backend() == "cpu-parallel"

    @pytest.mark.parametrize("name", [None, "best"])
    def test_best_aliases(self, name):
        assert resolve_backend(name) == "cpu-parallel"

    def test_explicit(self):
        assert resolve_backend("python") == "python"

    def test_unknown(self):
        with pytest.raises(ValueError, match="Available backends"):
            resolve_backend("cuda")

    def test_info(self):
        info = get_backend_info()
        assert info["backends"] == ["python", "cpu-parallel"]
        assert info["best_backend"] == "cpu-parallel"
        assert isinstance(info["numba_version"], str)
        assert info["num_threads"] >= 1


class TestUseBackend:
    def test_override_applies_to_default(self):
        with use_backend("python"):
            assert get_backend_override() == "python"
            assert resolve_backend(None) == "python"
            assert resolve_backend("best") == "python"
        assert get_backend_override() is None

    def test_explicit_argument_wins(self):
        with use_backend("python"):
            assert resolve_backend("cpu-parallel") == "cpu-parallel"

    def test_best_override_is_noop(self):
        with use_backend("best"):
            assert resolve_backend(None) == "cpu-parallel"

    def test_nested(self):
        with use_backend("python"):
            with use_backend("cpu-parallel"):
                assert get_backend_override() == "cpu-parallel"
            assert get_backend_override() == "python"

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with use_backend("python"):
                raise RuntimeError("boom")
        assert get_backend_override() is None

    def test_unknown_backend_raises_on_enter(self):
        with pytest.raises(ValueError):
            with use_backend("cuda"):
                pass

    def test_build_logs_selected_backend(self, caplog):
        with caplog.at_level(logging.INFO, logger="perphy"):
            with use_backend("python"):
                build([[1, 0], [1, 1]])
        assert any("backend='python'" in r.getMessage() for r in caplog.records)


class TestLoggingContexts:
    def test_suppress_logger_restores_level(self):
        logger = logging.getLogger("perphy._builder")
        original = logger.level
        with suppress_logger("perphy._builder", logging.ERROR):
            assert logger.level == logging.ERROR
        assert logger.level == original

    def test_quiet_sets_package_level(self):
        with quiet():
            assert logging.getLogger("perphy").level == logging.CRITICAL

    def test_quiet_silences_build(self, caplog):
        with quiet():
            build([[1, 0], [1, 1]])
        assert not [r for r in caplog.records if r.name.startswith("perphy")]

    def test_build_reports_statistics(self, caplog):
        with caplog.at_level(logging.INFO, logger="perphy"):
            build([[1, 0], [1, 1]])
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Tree built: 5 nodes") for m in messages)


class TestSuppressWarnings:
    def test_all(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings():
                warnings.warn("hidden", UserWarning)
        assert not caught

    def test_category(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings(DeprecationWarning):
                warnings.warn("hidden", DeprecationWarning)
                warnings.warn("shown", UserWarning)
        assert [str(w.message) for w in caught] == ["shown"]
