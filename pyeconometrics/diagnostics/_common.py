"""
Common data structures for diagnostics.

Parameter payloads wrapped by Result[P] and exposed through the Solution
classes in diagnostics.solution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import NDArray

RegressorChoice = Literal['predictors', 'fitted']


@dataclass(frozen=True)
class HeteroscedasticityParams:
    """
    Parameter payload for the auxiliary-regression heteroscedasticity test.

    Squared residuals are regressed on the chosen regressors; the overall F
    test of that auxiliary regression is the test statistic.
    """
    f_statistic: float
    df_num: int
    df_den: int
    p_value: float
    aux_r_squared: float
    alpha: float
    reject: bool
    regressors: RegressorChoice
    regressor_names: tuple[str, ...]


@dataclass(frozen=True)
class CollinearityParams:
    """
    Parameter payload for correlation-based collinearity pruning.

    - columns: numeric columns considered, in table order
    - correlation: their Pearson correlation matrix at the start (NaN -> 0)
    - flagged: columns to remove, in removal order
    """
    columns: tuple[str, ...]
    correlation: NDArray[np.floating[Any]]
    flagged: tuple[str, ...]
    threshold: float
    skipped: tuple[str, ...]


@dataclass(frozen=True)
class AdjustmentParams:
    """
    Parameter payload for regression-based adjustment of one column.

    Used by deseasonalize (adjusted = mean + residuals) and partial_out
    (adjusted = residuals).
    """
    original: NDArray[np.floating[Any]]
    adjusted: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    effects: dict[str, float]
    r_squared: float
