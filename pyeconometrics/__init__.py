"""
PyEconometrics: model comparison and diagnostics for small econometric datasets.

Fit OLS or random-forest models from structured formulas, estimate their
out-of-sample error by repeated cross-validation or bootstrap, and check
them for heteroscedasticity and collinearity. Every result is an immutable
record with an R-style summary() and a JSON-safe export.

Submodules:
    regression: Formulas and model fitting (OLS, random forest)
    resampling: Stratified splits, resampled evaluation, model comparison
    diagnostics: Heteroscedasticity, collinearity, seasonal adjustment
    reporting: Record and DataFrame export, plots
"""

__version__ = "0.1.0"

from pyeconometrics import diagnostics, regression, reporting, resampling
from pyeconometrics.core.table import Table
from pyeconometrics.diagnostics import (
    deseasonalize,
    find_collinear,
    partial_out,
    test_heteroscedasticity,
)
from pyeconometrics.regression import Formula, fit
from pyeconometrics.resampling import (
    Bootstrap,
    RepeatedKFold,
    bootstrap_coefficients,
    compare_models,
    evaluate,
    split,
)

__all__ = [
    "__version__",
    "Table",
    "Formula",
    "fit",
    "split",
    "evaluate",
    "bootstrap_coefficients",
    "compare_models",
    "RepeatedKFold",
    "Bootstrap",
    "test_heteroscedasticity",
    "find_collinear",
    "deseasonalize",
    "partial_out",
    "regression",
    "resampling",
    "diagnostics",
    "reporting",
]
