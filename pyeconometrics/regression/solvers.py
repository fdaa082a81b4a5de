"""
Solver dispatch for regression.

This module provides the fit() function (public API) and fitting-strategy
selection. OLS and random forest share one entry point and one result
shape, so callers such as the resampling evaluator never branch on the
method.
"""

from __future__ import annotations

from typing import Literal

from pyeconometrics.core.defaults import DEFAULT_FOREST_TREES
from pyeconometrics.core.exceptions import InvalidParameterError, ValidationError
from pyeconometrics.core.table import Table
from pyeconometrics.core.validation import check_seed
from pyeconometrics.regression.backends.cpu import CPUQRBackend
from pyeconometrics.regression.backends.forest import ForestBackend
from pyeconometrics.regression.design import Encoding, RegressionDesign
from pyeconometrics.regression.formula import Formula
from pyeconometrics.regression.solution import ForestSolution, LinearSolution

MethodChoice = Literal['ols', 'forest']


def fit(
    table: Table,
    formula: Formula | str,
    *,
    method: MethodChoice = 'ols',
    seed: int | None = None,
    n_estimators: int = DEFAULT_FOREST_TREES,
    max_features: float | int | str | None = 1.0,
    min_samples_leaf: int = 1,
    encoding: Encoding | None = None,
) -> LinearSolution | ForestSolution:
    """
    Fit a regression model.

    Args:
        table: Training data
        formula: A Formula, or formula text for Formula.parse()
        method: Fitting strategy:
            - 'ols': ordinary least squares via QR (coefficients, SEs)
            - 'forest': random forest (predictions and OOB error only)
        seed: Seed for the forest's randomness (ignored by OLS)
        n_estimators, max_features, min_samples_leaf: Forest settings
        encoding: Encoding learned on a larger table (for example the full
            data behind a cross-validation fold); replayed instead of
            learning levels and scale parameters from ``table``

    Returns:
        LinearSolution for 'ols', ForestSolution for 'forest'

    Raises:
        ValidationError: If referenced columns are missing or malformed
        RankDeficientError: If the OLS design is not of full column rank
        InvalidParameterError: If method, forest settings or encoding are invalid

    Example:
        >>> tbl = Table.from_columns(y=[1, 2, 3, 4], x=[1, 2, 3, 4])
        >>> model = fit(tbl, "y ~ x")
        >>> round(model.params['x'], 6)
        1.0
    """
    if not isinstance(table, Table):
        raise ValidationError(
            f"table: expected a Table, got {type(table).__name__}"
        )
    formula = as_formula(formula)

    if method == 'ols':
        design = _build_design(table, formula, encoding, intercept=None)
        result = CPUQRBackend().solve(design)
        return LinearSolution(_result=result, _design=design)

    if method == 'forest':
        seed = check_seed(seed)
        design = _build_design(table, formula, encoding, intercept=False)
        if design.p == 0:
            raise InvalidParameterError(
                "forest fitting needs at least one predictor column",
                parameter='formula', value=str(formula),
            )
        backend = ForestBackend(
            n_estimators=n_estimators,
            max_features=max_features,
            min_samples_leaf=min_samples_leaf,
            seed=seed,
        )
        result = backend.solve(design)
        return ForestSolution(_result=result, _design=design)

    raise InvalidParameterError(
        f"Unknown method: {method!r}; expected 'ols' or 'forest'",
        parameter='method', value=method,
    )


def as_formula(formula: Formula | str) -> Formula:
    if isinstance(formula, Formula):
        return formula
    if isinstance(formula, str):
        return Formula.parse(formula)
    raise InvalidParameterError(
        f"formula: expected a Formula or formula text, got {type(formula).__name__}",
        parameter='formula', value=formula,
    )


def _build_design(
    table: Table,
    formula: Formula,
    encoding: Encoding | None,
    *,
    intercept: bool | None,
) -> RegressionDesign:
    if encoding is None:
        return RegressionDesign.build(table, formula, intercept=intercept)
    if encoding.formula != formula:
        raise InvalidParameterError(
            f"encoding was learned for {encoding.formula}, not {formula}",
            parameter='encoding', value=encoding,
        )
    expected = formula.intercept if intercept is None else intercept
    if encoding.has_intercept != expected:
        raise InvalidParameterError(
            f"encoding {'has' if encoding.has_intercept else 'lacks'} an intercept "
            f"column; this method needs it {'present' if expected else 'absent'}",
            parameter='encoding', value=encoding,
        )
    return RegressionDesign.from_encoding(encoding, table)
