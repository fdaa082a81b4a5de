"""
Diagnostics for fitted models and candidate regressors.

Public API:
    test_heteroscedasticity(model, table)  - F test on squared residuals
    find_collinear(table)                  - correlation-based column pruning
    deseasonalize(table, outcome, dummies) - seasonal-dummy adjustment
    partial_out(table, column, controls)   - FWL residualization
"""

from pyeconometrics.diagnostics.solution import (
    AdjustmentSolution,
    CollinearitySolution,
    HeteroscedasticitySolution,
)
from pyeconometrics.diagnostics.solvers import (
    deseasonalize,
    find_collinear,
    partial_out,
    test_heteroscedasticity,
)

__all__ = [
    'test_heteroscedasticity',
    'find_collinear',
    'deseasonalize',
    'partial_out',
    'HeteroscedasticitySolution',
    'CollinearitySolution',
    'AdjustmentSolution',
]
