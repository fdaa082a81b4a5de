"""
Public API for regression diagnostics.

test_heteroscedasticity(): auxiliary-regression F test on squared residuals
find_collinear(): greedy correlation pruning of numeric columns
deseasonalize(): remove seasonal-dummy effects from a series
partial_out(): Frisch-Waugh-Lovell residualization of one column
"""

from __future__ import annotations

import warnings
from typing import Iterable, Sequence

import numpy as np

from pyeconometrics.core.compute.timing import Timer
from pyeconometrics.core.defaults import DEFAULT_ALPHA, DEFAULT_COLLINEARITY_THRESHOLD
from pyeconometrics.core.exceptions import InvalidParameterError, ValidationError
from pyeconometrics.core.result import Result
from pyeconometrics.core.table import Table
from pyeconometrics.core.validation import (
    check_closed_range,
    check_columns_present,
    check_finite,
    check_open_fraction,
)
from pyeconometrics.diagnostics._collinearity import correlation_matrix, prune_correlated
from pyeconometrics.diagnostics._common import (
    AdjustmentParams,
    CollinearityParams,
    RegressorChoice,
)
from pyeconometrics.diagnostics._heteroscedasticity import heteroscedasticity_test
from pyeconometrics.diagnostics.solution import (
    AdjustmentSolution,
    CollinearitySolution,
    HeteroscedasticitySolution,
)
from pyeconometrics.regression.formula import Formula
from pyeconometrics.regression.solution import LinearSolution
from pyeconometrics.regression.solvers import fit


def test_heteroscedasticity(
    model: LinearSolution,
    table: Table,
    *,
    regressors: RegressorChoice = 'predictors',
    alpha: float = DEFAULT_ALPHA,
) -> HeteroscedasticitySolution:
    """
    Test an OLS model's residuals for non-constant variance.

    Squared residuals on ``table`` are regressed, with an intercept, on the
    model's design columns (regressors='predictors', the Breusch-Pagan
    auxiliary regression) or on the fitted values and their square
    (regressors='fitted'). The overall F test of that regression is
    returned; ``reject`` is ``p_value < alpha``.

    Args:
        model: A fitted OLS model
        table: Data to compute residuals on, usually the training table
        regressors: 'predictors' or 'fitted'
        alpha: Significance level in (0, 1)

    Returns:
        HeteroscedasticitySolution

    Raises:
        InvalidParameterError: If alpha or regressors is invalid, or the
            model is not an OLS fit
        SchemaMismatchError: If table does not match the model's schema
        RankDeficientError: If the auxiliary design is rank deficient
    """
    if not isinstance(model, LinearSolution):
        raise InvalidParameterError(
            f"model: heteroscedasticity tests need an OLS fit, got {type(model).__name__}",
            parameter='model', value=getattr(model, 'method', model),
        )
    alpha = check_open_fraction(alpha, 'alpha')
    if regressors not in ('predictors', 'fitted'):
        raise InvalidParameterError(
            f"regressors must be 'predictors' or 'fitted', got {regressors!r}",
            parameter='regressors', value=regressors,
        )

    timer = Timer()
    timer.start()
    with timer.section('auxiliary_regression'):
        params, warnings_list = heteroscedasticity_test(model, table, regressors, alpha)
    timer.stop()

    result = Result(
        params=params,
        info={'n': table.n_rows, 'regressors': regressors, 'formula': str(model.formula)},
        timing=timer.result(),
        backend_name='cpu_qr',
        warnings=tuple(warnings_list),
    )
    return HeteroscedasticitySolution(_result=result)


# Not a pytest test function.
test_heteroscedasticity.__test__ = False


def find_collinear(
    table: Table,
    *,
    exclude: Iterable[str] = (),
    threshold: float = DEFAULT_COLLINEARITY_THRESHOLD,
) -> CollinearitySolution:
    """
    Flag numeric columns to drop so no pair is correlated above threshold.

    Args:
        table: Data whose columns are screened
        exclude: Columns left out of the screen (typically the outcome)
        threshold: Absolute Pearson correlation cutoff in [-1, 1]

    Returns:
        CollinearitySolution; ``flagged`` lists the columns to remove

    Raises:
        InvalidParameterError: If threshold is outside [-1, 1]
        ValidationError: If an excluded column does not exist or a screened
            column holds non-finite values

    Example:
        >>> tbl = Table.from_columns(a=[1, 2, 3], b=[2, 4, 6])
        >>> find_collinear(tbl, threshold=0.75).flagged
        ('a',)
    """
    threshold = check_closed_range(threshold, -1.0, 1.0, 'threshold')
    exclude = tuple(exclude)
    check_columns_present(table.columns, exclude, 'exclude')

    timer = Timer()
    timer.start()

    warnings_list: list[str] = []
    candidates = [c for c in table.columns if c not in exclude]
    skipped = tuple(c for c in candidates if table.is_categorical(c))
    columns = tuple(c for c in candidates if not table.is_categorical(c))
    if skipped:
        message = f"categorical column(s) skipped by the correlation screen: {list(skipped)}"
        warnings_list.append(message)
        warnings.warn(message, UserWarning, stacklevel=2)

    with timer.section('correlation'):
        if columns:
            data = np.column_stack([table[c] for c in columns])
            check_finite(data, 'table')
            corr = correlation_matrix(data)
        else:
            corr = np.empty((0, 0))

    with timer.section('pruning'):
        removed = prune_correlated(corr, threshold) if len(columns) > 1 else []

    timer.stop()

    params = CollinearityParams(
        columns=columns,
        correlation=corr,
        flagged=tuple(columns[i] for i in removed),
        threshold=threshold,
        skipped=skipped,
    )
    result = Result(
        params=params,
        info={'n': table.n_rows, 'n_columns': len(columns), 'exclude': exclude},
        timing=timer.result(),
        backend_name='cpu_pearson',
        warnings=tuple(warnings_list),
    )
    return CollinearitySolution(_result=result)


def deseasonalize(
    table: Table,
    outcome: str,
    dummies: Sequence[str],
) -> AdjustmentSolution:
    """
    Seasonally adjust a series by regression on seasonal dummies.

    The outcome is regressed (with intercept) on the dummy columns, which
    may be 0/1 indicators or one categorical season column. The adjusted
    series is mean(outcome) + residuals, so it keeps the original level.

    Raises:
        ValidationError: If a column is missing or no dummies are given
        RankDeficientError: If the dummies are collinear with the intercept
    """
    return _adjust(table, outcome, dummies, kind='deseasonalization', keep_level=True)


def partial_out(
    table: Table,
    column: str,
    controls: Sequence[str],
) -> AdjustmentSolution:
    """
    Residuals of ``column`` regressed (with intercept) on ``controls``.

    By the Frisch-Waugh-Lovell theorem, regressing the partialled-out
    outcome on a partialled-out regressor recovers that regressor's
    coefficient in the full regression.

    Raises:
        ValidationError: If a column is missing or no controls are given
    """
    return _adjust(table, column, controls, kind='partialling-out', keep_level=False)


def _adjust(
    table: Table,
    column: str,
    regressors: Sequence[str],
    *,
    kind: str,
    keep_level: bool,
) -> AdjustmentSolution:
    if isinstance(regressors, str):
        regressors = (regressors,)
    regressors = tuple(regressors)
    if not regressors:
        raise ValidationError(f"{kind} of {column!r} needs at least one regressor column")
    check_columns_present(table.columns, (column,) + regressors, kind)

    timer = Timer()
    timer.start()
    with timer.section('regression'):
        model = fit(table, Formula.build(column, regressors))
    with timer.section('adjustment'):
        original = model.response(table)
        residuals = model.residuals
        adjusted = float(np.mean(original)) + residuals if keep_level else residuals.copy()
    timer.stop()

    params = AdjustmentParams(
        original=original,
        adjusted=adjusted,
        residuals=residuals,
        effects=model.params,
        r_squared=model.r_squared,
    )
    result = Result(
        params=params,
        info={'kind': kind, 'column': column, 'controls': regressors, 'n': table.n_rows},
        timing=timer.result(),
        backend_name=model.backend_name,
        warnings=model.warnings,
    )
    return AdjustmentSolution(_result=result, _model=model)
