"""
Core infrastructure for PyEconometrics.

Shared abstractions and utilities used by the regression, resampling,
diagnostics and reporting subpackages.

Key components:
    table: Immutable column Table and the dataset adapter (from_file)
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    defaults: Numeric defaults
    compute: Timing and linear algebra primitives
"""

from pyeconometrics.core.exceptions import (
    DatasetLoadError,
    DimensionError,
    InvalidParameterError,
    NumericalError,
    PyEconometricsError,
    RankDeficientError,
    SchemaMismatchError,
    ValidationError,
)
from pyeconometrics.core.protocols import Backend
from pyeconometrics.core.result import Result
from pyeconometrics.core.table import Table

__all__ = [
    # Data
    "Table",
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyEconometricsError",
    "ValidationError",
    "InvalidParameterError",
    "DimensionError",
    "SchemaMismatchError",
    "NumericalError",
    "RankDeficientError",
    "DatasetLoadError",
]
