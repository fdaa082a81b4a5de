"""
Input validation utilities for PyEconometrics.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from collections.abc import Iterable
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyeconometrics.core.exceptions import (
    DimensionError,
    InvalidParameterError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.
    
    Args:
        array: Input to validate
        name: Parameter name for error messages
        
    Returns:
        numpy.ndarray with floating dtype
        
    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e
    
    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.
    
    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray, ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.
    
    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray, name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray, name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray,
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).
    
    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )
    
    if len(arrays) < 2:
        return
    
    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(n: int, min_samples: int, name: str) -> None:
    """
    Verify there are at least the minimum number of samples.
    
    Raises:
        ValidationError: If n < min_samples
    """
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_open_fraction(value: float, name: str) -> float:
    """
    Verify a fraction lies strictly between 0 and 1.

    Raises:
        InvalidParameterError: If value is not a real number in (0, 1)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating)):
        raise InvalidParameterError(
            f"{name}: expected a number in (0, 1), got {value!r}",
            parameter=name, value=value,
        )
    if not 0.0 < float(value) < 1.0:
        raise InvalidParameterError(
            f"{name}: must lie in the open interval (0, 1), got {value}",
            parameter=name, value=value,
        )
    return float(value)


def check_closed_range(value: float, low: float, high: float, name: str) -> float:
    """
    Verify low <= value <= high.

    Raises:
        InvalidParameterError: If value is outside [low, high] or NaN
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating)):
        raise InvalidParameterError(
            f"{name}: expected a number in [{low}, {high}], got {value!r}",
            parameter=name, value=value,
        )
    if not low <= float(value) <= high:
        raise InvalidParameterError(
            f"{name}: must lie in [{low}, {high}], got {value}",
            parameter=name, value=value,
        )
    return float(value)


def check_int_at_least(value: int, minimum: int, name: str) -> int:
    """
    Verify value is an integer >= minimum.

    Raises:
        InvalidParameterError: If value is not an int or is too small
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(
            f"{name}: expected an integer >= {minimum}, got {value!r}",
            parameter=name, value=value,
        )
    if value < minimum:
        raise InvalidParameterError(
            f"{name}: must be >= {minimum}, got {value}",
            parameter=name, value=value,
        )
    return int(value)


def check_seed(seed: int | None, name: str = 'seed') -> int | None:
    """
    Verify a reproducibility seed is None or a non-negative integer.

    Raises:
        InvalidParameterError: If seed is of the wrong type or negative
    """
    if seed is None:
        return None
    return check_int_at_least(seed, 0, name)


def check_columns_present(
    available: Iterable[str],
    required: Iterable[str],
    name: str,
) -> None:
    """
    Verify every required column name is available.

    Raises:
        ValidationError: Listing the missing columns
    """
    available_set = set(available)
    missing = [c for c in required if c not in available_set]
    if missing:
        raise ValidationError(
            f"{name}: missing column(s) {missing}. Available: {sorted(available_set)}"
        )
