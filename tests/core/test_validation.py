"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d / check_2d: dimensionality checks
    - check_consistent_length: multi-array length matching
    - check_min_samples: minimum sample count
    - check_open_fraction / check_closed_range / check_int_at_least:
      parameter domains, raising InvalidParameterError
    - check_seed / check_columns_present
"""

import numpy as np
import pytest

from pyeconometrics.core.exceptions import (
    DimensionError,
    InvalidParameterError,
    ValidationError,
)
from pyeconometrics.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_closed_range,
    check_columns_present,
    check_consistent_length,
    check_finite,
    check_int_at_least,
    check_min_samples,
    check_open_fraction,
    check_seed,
)


# ═══════════════════════════════════════════════════════════════════════
# Array checks
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "X")
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "X")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b"], "X")


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "X")

    def test_nan_reported(self):
        with pytest.raises(ValidationError, match="1 NaN, 0 Inf"):
            check_finite(np.array([1.0, np.nan]), "X")

    def test_inf_reported(self):
        with pytest.raises(ValidationError, match="0 NaN, 1 Inf"):
            check_finite(np.array([np.inf, 2.0]), "X")


class TestDimensions:

    def test_check_1d(self):
        check_1d(np.zeros(3), "y")
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((3, 1)), "y")

    def test_check_2d(self):
        check_2d(np.zeros((3, 2)), "X")
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.zeros(3), np.zeros((3, 2)), names=("a", "b"))
        with pytest.raises(DimensionError, match="a=3, b=4"):
            check_consistent_length(np.zeros(3), np.zeros(4), names=("a", "b"))

    def test_min_samples(self):
        check_min_samples(2, 2, "X")
        with pytest.raises(ValidationError, match="at least 3"):
            check_min_samples(2, 3, "X")


# ═══════════════════════════════════════════════════════════════════════
# Parameter domains
# ═══════════════════════════════════════════════════════════════════════


class TestCheckOpenFraction:

    @pytest.mark.parametrize("value", [0.01, 0.2, 0.5, 0.99])
    def test_inside(self, value):
        assert check_open_fraction(value, "f") == value

    @pytest.mark.parametrize("value", [0, 0.0, 1, 1.0, -0.2, 1.5, float('nan')])
    def test_outside(self, value):
        with pytest.raises(InvalidParameterError) as exc_info:
            check_open_fraction(value, "holdout_fraction")
        assert exc_info.value.parameter == "holdout_fraction"

    @pytest.mark.parametrize("value", [True, "0.2", None])
    def test_wrong_type(self, value):
        with pytest.raises(InvalidParameterError):
            check_open_fraction(value, "f")


class TestCheckClosedRange:

    @pytest.mark.parametrize("value", [-1.0, 0.0, 0.75, 1.0])
    def test_inside(self, value):
        assert check_closed_range(value, -1.0, 1.0, "threshold") == value

    @pytest.mark.parametrize("value", [-1.01, 1.5, float('nan')])
    def test_outside(self, value):
        with pytest.raises(InvalidParameterError, match="threshold"):
            check_closed_range(value, -1.0, 1.0, "threshold")


class TestCheckIntAtLeast:

    def test_accepts_numpy_int(self):
        assert check_int_at_least(np.int64(5), 2, "k") == 5

    def test_too_small(self):
        with pytest.raises(InvalidParameterError, match="must be >= 2, got 1"):
            check_int_at_least(1, 2, "k")

    @pytest.mark.parametrize("value", [2.0, True, "3"])
    def test_wrong_type(self, value):
        with pytest.raises(InvalidParameterError):
            check_int_at_least(value, 1, "k")


class TestCheckSeed:

    def test_none_allowed(self):
        assert check_seed(None) is None

    def test_int(self):
        assert check_seed(7) == 7

    def test_negative(self):
        with pytest.raises(InvalidParameterError, match="seed"):
            check_seed(-1)


class TestCheckColumnsPresent:

    def test_present(self):
        check_columns_present(("a", "b"), ("a",), "exclude")

    def test_missing_listed(self):
        with pytest.raises(ValidationError, match=r"\['c'\]"):
            check_columns_present(("a", "b"), ("a", "c"), "exclude")
