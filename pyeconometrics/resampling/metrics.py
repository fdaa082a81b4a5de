"""
Scoring metrics for resampled evaluation.

Every metric maps (y_true, y_pred) to a float. Callers must name one
explicitly; there is no default metric.
"""

from __future__ import annotations

from typing import Callable, Literal, Union

import numpy as np
from numpy.typing import NDArray
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from pyeconometrics.core.exceptions import InvalidParameterError

MetricFn = Callable[[NDArray, NDArray], float]
MetricChoice = Union[Literal['rmse', 'mae', 'r2'], MetricFn]


def rmse(y_true: NDArray, y_pred: NDArray) -> float:
    """Root mean squared error."""
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def mae(y_true: NDArray, y_pred: NDArray) -> float:
    """Mean absolute error."""
    return float(mean_absolute_error(y_true, y_pred))


def r2(y_true: NDArray, y_pred: NDArray) -> float:
    """
    1 - SSE/SST around the mean of y_true.

    NaN when y_true has no spread (for example a single held-out row).
    """
    if len(y_true) < 2:
        return float('nan')
    score = float(r2_score(y_true, y_pred, force_finite=False))
    # force_finite=False gives -inf for constant y_true with nonzero error.
    return score if np.isfinite(score) else float('nan')


METRICS: dict[str, MetricFn] = {
    'rmse': rmse,
    'mae': mae,
    'r2': r2,
}

# Metrics where a larger value is better; everything else is an error.
HIGHER_IS_BETTER = frozenset({'r2'})


def resolve_metric(metric: MetricChoice | None) -> tuple[str, MetricFn]:
    """
    Turn a metric name or callable into (name, function).

    Raises:
        InvalidParameterError: If metric is None or an unknown name
    """
    if metric is None:
        raise InvalidParameterError(
            "metric is required: pass 'rmse', 'mae', 'r2' or a callable",
            parameter='metric', value=None,
        )
    if isinstance(metric, str):
        key = metric.lower()
        if key not in METRICS:
            raise InvalidParameterError(
                f"Unknown metric {metric!r}; expected one of {sorted(METRICS)} or a callable",
                parameter='metric', value=metric,
            )
        return key, METRICS[key]
    if callable(metric):
        return getattr(metric, '__name__', 'custom'), metric
    raise InvalidParameterError(
        f"metric must be a name or a callable, got {type(metric).__name__}",
        parameter='metric', value=metric,
    )
