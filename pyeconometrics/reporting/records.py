"""
JSON-safe record export.

to_record() turns any result object into plain dicts, lists, strings,
bools, ints and floats that json.dumps accepts without custom encoders.

Policy
------
* NaN, +inf, -inf -> None (rendered "NA" by the text summaries)
* numpy scalars   -> Python scalars
* arrays, tuples  -> lists
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from pyeconometrics.diagnostics.solution import (
    AdjustmentSolution,
    CollinearitySolution,
    HeteroscedasticitySolution,
)
from pyeconometrics.regression.solution import ForestSolution, LinearSolution
from pyeconometrics.resampling.solution import (
    CoefficientBootstrapSolution,
    ComparisonSolution,
    EvaluationSolution,
)


def safe_float_optional(x: Any) -> float | None:
    """Return float(x) if it's finite, otherwise None."""
    f = float(x)
    return f if math.isfinite(f) else None


def json_safe(value: Any) -> Any:
    """Recursively convert a value into JSON-safe built-in types."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return safe_float_optional(value)
    if isinstance(value, np.ndarray):
        return [json_safe(v) for v in value.tolist()]
    if isinstance(value, dict):
        return {str(k): json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return str(value)


def _envelope(result: Any) -> dict[str, Any]:
    return {
        'backend': result.backend_name,
        'timing': result.timing,
        'warnings': list(result.warnings),
    }


def _linear(model: LinearSolution) -> dict[str, Any]:
    return {
        'type': 'ols',
        'formula': str(model.formula) if model.formula is not None else None,
        'n': model.n,
        'rank': model.rank,
        'df_residual': model.df_residual,
        'coefficients': [
            {
                'term': row.term,
                'estimate': row.estimate,
                'std_error': row.std_error,
                't_value': row.t_value,
                'p_value': row.p_value,
            }
            for row in model.coef_table()
        ],
        'r_squared': model.r_squared,
        'adjusted_r_squared': model.adjusted_r_squared,
        'residual_std_error': model.residual_std_error,
        'f_statistic': model.f_statistic,
        'f_p_value': model.f_p_value,
    }


def _forest(model: ForestSolution) -> dict[str, Any]:
    return {
        'type': 'forest',
        'formula': str(model.formula) if model.formula is not None else None,
        'n': model.n,
        'n_estimators': model.info.get('n_estimators'),
        'oob_mse': model.oob_mse,
        'oob_r2': model.oob_r2,
        'feature_importances': model.feature_importances,
    }


def _evaluation(ev: EvaluationSolution) -> dict[str, Any]:
    return {
        'type': 'evaluation',
        'formula': str(ev.formula),
        'method': ev.method,
        'metric': ev.metric,
        'scheme': ev.scheme.describe(),
        'seed': ev.seed,
        'scores': ev.scores,
        'mean': ev.mean,
        'std': ev.std,
        'n_skipped': ev.n_skipped,
        'n_rank_deficient': ev.n_rank_deficient,
    }


def _coefficient_bootstrap(boot: CoefficientBootstrapSolution) -> dict[str, Any]:
    return {
        'type': 'coefficient_bootstrap',
        'R': boot.R,
        'seed': boot.seed,
        'n_failed': boot.n_failed,
        'terms': [
            {'term': name, 'original': t0, 'bias': bias, 'std_error': se}
            for name, t0, bias, se in zip(boot.term_names, boot.t0, boot.bias, boot.se)
        ],
    }


def _comparison(cmp: ComparisonSolution) -> dict[str, Any]:
    return {
        'type': 'comparison',
        'metric': cmp.info.get('metric'),
        'scheme': cmp.info.get('scheme_description'),
        'seed': cmp.info.get('seed'),
        'higher_is_better': cmp.higher_is_better,
        'ranking': cmp.ranking,
        'candidates': [
            {'name': name, **_evaluation(cmp[name])} for name in cmp.names
        ],
    }


def _heteroscedasticity(test: HeteroscedasticitySolution) -> dict[str, Any]:
    df_num, df_den = test.df
    return {
        'type': 'heteroscedasticity',
        'regressors': test.regressors,
        'regressor_names': test.regressor_names,
        'f_statistic': test.f_statistic,
        'df_num': df_num,
        'df_den': df_den,
        'p_value': test.p_value,
        'aux_r_squared': test.aux_r_squared,
        'alpha': test.alpha,
        'reject': test.reject,
    }


def _collinearity(sol: CollinearitySolution) -> dict[str, Any]:
    return {
        'type': 'collinearity',
        'threshold': sol.threshold,
        'columns': sol.columns,
        'flagged': sol.flagged,
        'kept': sol.kept,
        'skipped': sol.skipped,
        'correlation': sol.correlation,
    }


def _adjustment(adj: AdjustmentSolution) -> dict[str, Any]:
    return {
        'type': 'adjustment',
        'kind': adj.info['kind'],
        'column': adj.column,
        'controls': adj.controls,
        'effects': adj.effects,
        'r_squared': adj.r_squared,
        'adjusted': adj.adjusted,
    }


_BUILDERS = (
    (LinearSolution, _linear),
    (ForestSolution, _forest),
    (EvaluationSolution, _evaluation),
    (CoefficientBootstrapSolution, _coefficient_bootstrap),
    (ComparisonSolution, _comparison),
    (HeteroscedasticitySolution, _heteroscedasticity),
    (CollinearitySolution, _collinearity),
    (AdjustmentSolution, _adjustment),
)


def to_record(result: Any) -> dict[str, Any]:
    """
    Export a result as a JSON-safe dict.

    Raises:
        TypeError: If result is not a pyeconometrics result object
    """
    for kind, build in _BUILDERS:
        if isinstance(result, kind):
            return json_safe({**build(result), **_envelope(result)})
    raise TypeError(f"cannot export {type(result).__name__} as a record")
