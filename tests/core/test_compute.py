"""
Tests for the compute primitives: Timer and QR least squares.
"""

import numpy as np
import pytest

from pyeconometrics.core.compute import Timer
from pyeconometrics.core.compute.linalg import qr_decompose, qr_solve
from pyeconometrics.core.exceptions import RankDeficientError


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('a'):
            pass
        with timer.section('a'):
            pass
        timer.stop()
        result = timer.result()
        assert 'total_seconds' in result
        assert result['a'] >= 0.0

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()


class TestQR:

    def test_solves_exact_system(self, rng):
        X = rng.standard_normal((30, 3))
        beta = np.array([1.0, -2.0, 0.5])
        coef, qr = qr_solve(X, X @ beta)
        np.testing.assert_allclose(coef, beta, atol=1e-10)
        assert qr.rank == 3
        assert qr.aliased == ()

    def test_matches_lstsq(self, rng):
        X = rng.standard_normal((50, 4))
        y = rng.standard_normal(50)
        coef, _ = qr_solve(X, y)
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        np.testing.assert_allclose(coef, expected, atol=1e-10)

    def test_rank_deficient_names_aliased_column(self, rng):
        x1 = rng.standard_normal(20)
        x2 = rng.standard_normal(20)
        X = np.column_stack([x1, x2, x1 + x2])
        with pytest.raises(RankDeficientError, match="'c'") as exc_info:
            qr_solve(X, rng.standard_normal(20), column_names=('a', 'b', 'c'))
        err = exc_info.value
        assert err.rank == 2
        assert err.expected_rank == 3
        assert err.columns == ('a', 'b', 'c')

    def test_fewer_rows_than_columns(self):
        with pytest.raises(RankDeficientError, match="fewer rows"):
            qr_solve(np.ones((2, 3)), np.ones(2))

    def test_zero_matrix_rank(self):
        assert qr_decompose(np.zeros((4, 2))).rank == 0
