"""
Tabular export of results as pandas DataFrames.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

import numpy as np

from pyeconometrics.diagnostics.solution import (
    AdjustmentSolution,
    CollinearitySolution,
    HeteroscedasticitySolution,
)
from pyeconometrics.regression.solution import ForestSolution, LinearSolution
from pyeconometrics.resampling.design import RepeatedKFold
from pyeconometrics.resampling.solution import (
    CoefficientBootstrapSolution,
    ComparisonSolution,
    EvaluationSolution,
)

if TYPE_CHECKING:
    import pandas as pd


def to_frame(result: Any) -> 'pd.DataFrame':
    """
    Export a result as a DataFrame.

    - LinearSolution: coefficient table indexed by term
    - ForestSolution: feature importances indexed by design column
    - EvaluationSolution: one row per score (with repeat and fold for k-fold)
    - CoefficientBootstrapSolution: original, bias, std. error per term
    - ComparisonSolution: one row per candidate, best first
    - HeteroscedasticitySolution: a single row
    - CollinearitySolution: the starting correlation matrix
    - AdjustmentSolution: original, adjusted and residual series

    Raises:
        TypeError: If result is not a pyeconometrics result object
    """
    import pandas as pd

    if isinstance(result, LinearSolution):
        rows = result.coef_table()
        return pd.DataFrame(
            {
                'estimate': [r.estimate for r in rows],
                'std_error': [r.std_error for r in rows],
                't_value': [r.t_value for r in rows],
                'p_value': [r.p_value for r in rows],
            },
            index=pd.Index([r.term for r in rows], name='term'),
        )

    if isinstance(result, ForestSolution):
        importances = result.feature_importances
        return pd.DataFrame(
            {'importance': list(importances.values())},
            index=pd.Index(list(importances), name='column'),
        )

    if isinstance(result, EvaluationSolution):
        return _scores_frame(result)

    if isinstance(result, CoefficientBootstrapSolution):
        return pd.DataFrame(
            {'original': result.t0, 'bias': result.bias, 'std_error': result.se},
            index=pd.Index(list(result.term_names), name='term'),
        )

    if isinstance(result, ComparisonSolution):
        means, stds = result.means, result.stds
        return pd.DataFrame(
            {
                'rank': np.arange(1, len(result.ranking) + 1),
                'mean': [means[n] for n in result.ranking],
                'std': [stds[n] for n in result.ranking],
                'n_scores': [result[n].n_scores for n in result.ranking],
            },
            index=pd.Index(list(result.ranking), name='model'),
        )

    if isinstance(result, HeteroscedasticitySolution):
        df_num, df_den = result.df
        return pd.DataFrame([{
            'regressors': result.regressors,
            'f_statistic': result.f_statistic,
            'df_num': df_num,
            'df_den': df_den,
            'p_value': result.p_value,
            'alpha': result.alpha,
            'reject': result.reject,
        }])

    if isinstance(result, CollinearitySolution):
        columns = list(result.columns)
        return pd.DataFrame(result.correlation, index=columns, columns=columns)

    if isinstance(result, AdjustmentSolution):
        return pd.DataFrame({
            'original': result.original,
            'adjusted': result.adjusted,
            'residual': result.residuals,
        })

    raise TypeError(f"cannot export {type(result).__name__} as a DataFrame")


def _scores_frame(ev: EvaluationSolution) -> 'pd.DataFrame':
    import pandas as pd

    frame = pd.DataFrame({'task': ev.task_indices, 'score': ev.scores})
    if isinstance(ev.scheme, RepeatedKFold):
        frame.insert(1, 'repeat', ev.task_indices // ev.scheme.k)
        frame.insert(2, 'fold', ev.task_indices % ev.scheme.k)
    return frame
