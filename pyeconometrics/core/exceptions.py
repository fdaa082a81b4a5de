"""
Exception hierarchy for PyEconometrics.

All exceptions inherit from PyEconometricsError to allow catching any
library-specific error. Every condition is reported to the caller as a
distinct, recoverable error; nothing is retried.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from __future__ import annotations

from pathlib import Path


class PyEconometricsError(Exception):
    """Base exception for all PyEconometrics errors."""
    pass


class ValidationError(PyEconometricsError):
    """
    Input validation failed.
    
    Raised when user-provided inputs fail validation checks.
    """
    pass


class InvalidParameterError(ValidationError):
    """
    A call parameter is outside its allowed domain.

    Examples: holdout fraction outside (0, 1), missing scoring metric,
    correlation threshold outside [-1, 1], k < 2 for k-fold.

    Attributes:
        parameter: Name of the offending parameter
        value: The value that was rejected
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        value: object = None,
    ):
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    
    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class SchemaMismatchError(ValidationError):
    """
    A table does not match the schema a model was trained on.

    Raised at predict time when a column used during fitting is missing,
    or when a categorical column carries a level unseen at fit time.

    Attributes:
        missing: Column names that were expected but not found
        unseen_levels: Mapping of column name to unseen categorical levels
    """

    def __init__(
        self,
        message: str,
        missing: tuple[str, ...] = (),
        unseen_levels: dict[str, tuple[str, ...]] | None = None,
    ):
        super().__init__(message)
        self.missing = tuple(missing)
        self.unseen_levels = dict(unseen_levels or {})


class NumericalError(PyEconometricsError):
    """
    Numerical computation failed.
    
    Base class for errors arising from numerical issues during computation.
    """
    pass


class RankDeficientError(NumericalError):
    """
    Design matrix is not of full column rank.
    
    Raised when dummy encoding, interactions or the data itself produce
    perfect multicollinearity, so OLS coefficients are not identified.
    
    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Expected rank (number of design columns)
        columns: Design column names, if known
    """
    
    def __init__(
        self, 
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        columns: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank
        self.columns = tuple(columns)


class DatasetLoadError(PyEconometricsError):
    """
    Loading a dataset from storage failed.

    Wraps I/O, parse and schema failures of the dataset adapter. The
    original exception is chained as __cause__ and kept as ``cause``.

    Attributes:
        path: The path that failed to load
        cause: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.path = str(path) if path is not None else None
        self.cause = cause
