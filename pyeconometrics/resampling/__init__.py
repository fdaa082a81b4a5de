"""
Resampling: stratified splits and resampled model evaluation.

Public API:
    split(table, outcome, holdout_fraction, seed) -> (train, test)
    evaluate(table, formula, scheme=..., metric=..., seed=...) -> EvaluationSolution
    bootstrap_coefficients(table, formula, R, seed) -> CoefficientBootstrapSolution
    compare_models(table, candidates, scheme=..., metric=..., seed=...) -> ComparisonSolution
"""

from pyeconometrics.resampling.design import Bootstrap, RepeatedKFold
from pyeconometrics.resampling.metrics import mae, r2, rmse
from pyeconometrics.resampling.solution import (
    CoefficientBootstrapSolution,
    ComparisonSolution,
    EvaluationSolution,
)
from pyeconometrics.resampling.solvers import (
    bootstrap_coefficients,
    compare_models,
    evaluate,
)
from pyeconometrics.resampling.split import split, split_indices

__all__ = [
    'split',
    'split_indices',
    'evaluate',
    'bootstrap_coefficients',
    'compare_models',
    'RepeatedKFold',
    'Bootstrap',
    'rmse',
    'mae',
    'r2',
    'EvaluationSolution',
    'CoefficientBootstrapSolution',
    'ComparisonSolution',
]
