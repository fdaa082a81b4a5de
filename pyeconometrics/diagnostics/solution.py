"""
Solution wrappers for diagnostics.

HeteroscedasticitySolution, CollinearitySolution and AdjustmentSolution wrap
Result[P] and provide convenient accessors and plain-text summaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyeconometrics.core.result import Result, ResultAccessors
from pyeconometrics.diagnostics._common import (
    AdjustmentParams,
    CollinearityParams,
    HeteroscedasticityParams,
)

if TYPE_CHECKING:
    from pyeconometrics.regression.solution import LinearSolution


@dataclass
class HeteroscedasticitySolution(ResultAccessors):
    """Auxiliary-regression test for non-constant residual variance."""
    _result: Result[HeteroscedasticityParams]

    @property
    def f_statistic(self) -> float:
        return self._result.params.f_statistic

    @property
    def df(self) -> tuple[int, int]:
        """(numerator, denominator) degrees of freedom."""
        p = self._result.params
        return p.df_num, p.df_den

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def aux_r_squared(self) -> float:
        return self._result.params.aux_r_squared

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def reject(self) -> bool:
        """True when p_value < alpha: evidence of heteroscedasticity."""
        return self._result.params.reject

    @property
    def regressors(self) -> str:
        return self._result.params.regressors

    @property
    def regressor_names(self) -> tuple[str, ...]:
        return self._result.params.regressor_names

    def summary(self) -> str:
        df_num, df_den = self.df
        f_str = "NA" if np.isnan(self.f_statistic) else f"{self.f_statistic:.4f}"
        p_str = "NA" if np.isnan(self.p_value) else f"{self.p_value:.4g}"
        verdict = "reject" if self.reject else "do not reject"
        return "\n".join([
            "\nHeteroscedasticity test (auxiliary regression of squared residuals)\n",
            f"Regressors: {self.regressors} ({', '.join(self.regressor_names)})",
            f"F = {f_str}, df = ({df_num}, {df_den}), p-value = {p_str}",
            f"Auxiliary R-squared: {self.aux_r_squared:.6f}",
            f"At alpha = {self.alpha}: {verdict} constant variance",
            "",
        ])

    def __repr__(self) -> str:
        return (
            f"HeteroscedasticitySolution(F={self.f_statistic:.4g}, "
            f"p_value={self.p_value:.4g}, reject={self.reject})"
        )


@dataclass
class CollinearitySolution(ResultAccessors):
    """Columns flagged for removal by correlation pruning."""
    _result: Result[CollinearityParams]

    @property
    def flagged(self) -> tuple[str, ...]:
        """Columns to remove, in removal order."""
        return self._result.params.flagged

    @property
    def kept(self) -> tuple[str, ...]:
        flagged = set(self.flagged)
        return tuple(c for c in self.columns if c not in flagged)

    @property
    def columns(self) -> tuple[str, ...]:
        return self._result.params.columns

    @property
    def correlation(self) -> NDArray[np.floating[Any]]:
        """Correlation matrix of the considered columns before pruning."""
        return self._result.params.correlation

    @property
    def threshold(self) -> float:
        return self._result.params.threshold

    @property
    def skipped(self) -> tuple[str, ...]:
        """Categorical columns that were not considered."""
        return self._result.params.skipped

    def __iter__(self):
        return iter(self.flagged)

    def __len__(self) -> int:
        return len(self.flagged)

    def __contains__(self, name: object) -> bool:
        return name in self.flagged

    def summary(self) -> str:
        lines = [
            "\nCollinearity pruning\n",
            f"Threshold: |r| > {self.threshold}",
            f"Columns considered: {len(self.columns)}",
            f"Flagged ({len(self.flagged)}): {', '.join(self.flagged) or 'none'}",
        ]
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CollinearitySolution(flagged={self.flagged!r}, threshold={self.threshold})"


@dataclass
class AdjustmentSolution(ResultAccessors):
    """
    A column adjusted by regression on other columns.

    ``adjusted`` is mean(y) + residuals for deseasonalize and the plain
    residuals for partial_out. The auxiliary OLS fit is kept as ``model``.
    """
    _result: Result[AdjustmentParams]
    _model: 'LinearSolution'

    @property
    def original(self) -> NDArray[np.floating[Any]]:
        return self._result.params.original

    @property
    def adjusted(self) -> NDArray[np.floating[Any]]:
        return self._result.params.adjusted

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def effects(self) -> dict[str, float]:
        """Coefficients of the adjustment regression, by term."""
        return self._result.params.effects

    @property
    def r_squared(self) -> float:
        return self._result.params.r_squared

    @property
    def model(self) -> 'LinearSolution':
        return self._model

    @property
    def column(self) -> str:
        return self.info['column']

    @property
    def controls(self) -> tuple[str, ...]:
        return self.info['controls']

    def summary(self) -> str:
        lines = [
            f"\n{self.info['kind'].capitalize()} of {self.column}\n",
            f"Regressed on: {', '.join(self.controls)}",
            f"R-squared: {self.r_squared:.6f}",
            "Effects:",
        ]
        for name, value in self.effects.items():
            lines.append(f"  {name[:30]:<30} {value:12.6f}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AdjustmentSolution(kind={self.info['kind']!r}, column={self.column!r}, "
            f"n={len(self.adjusted)})"
        )
