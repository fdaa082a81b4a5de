"""
Auxiliary-regression heteroscedasticity test.

With regressors='predictors' this is the Breusch-Pagan auxiliary
regression in its F form; with regressors='fitted' it is White's special
case on the fitted values and their square.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pyeconometrics.core.table import Table
from pyeconometrics.diagnostics._common import HeteroscedasticityParams, RegressorChoice
from pyeconometrics.regression.backends.cpu import CPUQRBackend
from pyeconometrics.regression.design import INTERCEPT, RegressionDesign
from pyeconometrics.regression.solution import LinearSolution

if TYPE_CHECKING:
    from numpy.typing import NDArray


def auxiliary_regressors(
    model: LinearSolution,
    table: Table,
    regressors: RegressorChoice,
) -> tuple['NDArray', tuple[str, ...]]:
    """Columns of the auxiliary regression, without the intercept."""
    if regressors == 'fitted':
        fitted = model.predict(table)
        return np.column_stack([fitted, fitted ** 2]), ('fitted', 'fitted^2')
    X = model.design_matrix(table)
    keep = [i for i, name in enumerate(model.column_names) if name != INTERCEPT]
    return X[:, keep], tuple(model.column_names[i] for i in keep)


def heteroscedasticity_test(
    model: LinearSolution,
    table: Table,
    regressors: RegressorChoice,
    alpha: float,
) -> tuple[HeteroscedasticityParams, list[str]]:
    """
    Regress squared residuals on the auxiliary regressors and F-test them.

    Raises:
        RankDeficientError: If the auxiliary design is rank deficient
    """
    warnings_list: list[str] = []
    residuals = model.response(table) - model.predict(table)
    Z, names = auxiliary_regressors(model, table, regressors)

    n = len(residuals)
    X_aux = np.column_stack([np.ones(n), Z])
    design = RegressionDesign.from_arrays(X_aux, residuals ** 2, (INTERCEPT,) + names)
    aux = LinearSolution(_result=CPUQRBackend().solve(design), _design=design)

    f_stat = aux.f_statistic
    p_value = aux.f_p_value
    if np.isnan(f_stat):
        warnings_list.append(
            f"auxiliary F statistic undefined ({aux.df_model} and "
            f"{aux.df_residual} DF, RSS={aux.rss:.3g}); test not rejected"
        )

    params = HeteroscedasticityParams(
        f_statistic=f_stat,
        df_num=aux.df_model,
        df_den=aux.df_residual,
        p_value=p_value,
        aux_r_squared=aux.r_squared,
        alpha=alpha,
        reject=bool(p_value < alpha) if not np.isnan(p_value) else False,
        regressors=regressors,
        regressor_names=names,
    )
    return params, warnings_list
