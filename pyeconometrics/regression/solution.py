"""
Regression solution types.

Contains the parameter payloads computed by backends and the user-facing
solution wrappers. Both solution types satisfy the FittedModel protocol
(predict, response, residuals, fitted_values), which is all the resampling
evaluator relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, TYPE_CHECKING, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pyeconometrics.core.result import Result, ResultAccessors
from pyeconometrics.core.table import Table

if TYPE_CHECKING:
    from sklearn.ensemble import RandomForestRegressor

    from pyeconometrics.regression.design import RegressionDesign
    from pyeconometrics.regression.formula import Formula


@runtime_checkable
class FittedModel(Protocol):
    """Shared result shape of every fitting strategy."""

    @property
    def residuals(self) -> NDArray[np.floating[Any]]: ...

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]: ...

    @property
    def method(self) -> str: ...

    def predict(self, table: Table) -> NDArray[np.floating[Any]]: ...

    def response(self, table: Table) -> NDArray[np.floating[Any]]: ...


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for OLS.

    This is the immutable data computed by backends.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int


@dataclass(frozen=True)
class Coefficient:
    """One row of the coefficient table. NaN marks an undefined statistic."""
    term: str
    estimate: float
    std_error: float
    t_value: float
    p_value: float


class _SolutionBase(ResultAccessors):
    """Accessors shared by both solution types."""
    _result: Result[Any]
    _design: 'RegressionDesign'

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def formula(self) -> 'Formula | None':
        encoding = self._design.encoding
        return encoding.formula if encoding is not None else None

    @property
    def design(self) -> 'RegressionDesign':
        return self._design

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._design.column_names

    @property
    def n(self) -> int:
        return self._design.n

    def design_matrix(self, table: Table) -> NDArray[np.floating[Any]]:
        """Replay the fit-time encoding on a new table."""
        encoding = self._design.encoding
        if encoding is None:
            raise TypeError("model was fitted from arrays; it has no formula to replay")
        return encoding.matrix(table)

    def response(self, table: Table) -> NDArray[np.floating[Any]]:
        """Outcome of ``table`` on the model's (possibly transformed) scale."""
        encoding = self._design.encoding
        if encoding is None:
            raise TypeError("model was fitted from arrays; it has no formula to replay")
        return encoding.response(table)


@dataclass
class LinearSolution(_SolutionBase):
    """
    User-facing OLS results.

    Wraps the backend Result and provides convenient accessors
    for all regression outputs including standard errors and t-statistics.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'

    _standard_errors: NDArray[np.floating[Any]] | None = None

    @property
    def method(self) -> str:
        return 'ols'

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def params(self) -> dict[str, float]:
        """Coefficient estimates keyed by design column name."""
        return dict(zip(self.column_names, (float(b) for b in self.coefficients)))

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def df_model(self) -> int:
        """Model degrees of freedom, excluding the intercept."""
        return self.rank - (1 if self._design.has_intercept else 0)

    @property
    def r_squared(self) -> float:
        """
        Coefficient of determination.

        With an intercept, TSS is centered; without one it is the raw sum of
        squares of y, as R's summary.lm computes it.
        """
        tss = self.tss
        if tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        df = self.df_residual
        if df <= 0 or self.tss == 0:
            return float('nan')
        k = 1 if self._design.has_intercept else 0
        return 1.0 - (1.0 - self.r_squared) * (n - k) / df

    @property
    def residual_std_error(self) -> float:
        df = self.df_residual
        if df <= 0:
            return float('nan')
        return float(np.sqrt(self.rss / df))

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        Computed as SE(β) = sqrt(diag(σ² (X'X)⁻¹)). Undefined (NaN) when
        there are no residual degrees of freedom.
        """
        if self._standard_errors is not None:
            return self._standard_errors

        p = len(self.coefficients)
        df = self.df_residual
        if df <= 0:
            self._standard_errors = np.full(p, np.nan, dtype=np.float64)
            return self._standard_errors

        sigma_sq = self.rss / df
        XtX_inv = np.linalg.inv(self._design.XtX())
        self._standard_errors = np.sqrt(sigma_sq * np.diag(XtX_inv))
        return self._standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / se
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from Student's t with df_residual degrees of freedom."""
        t = self.t_statistics
        if self.df_residual <= 0:
            return np.full_like(t, np.nan)
        return 2.0 * stats.t.sf(np.abs(t), self.df_residual)

    @property
    def f_statistic(self) -> float:
        """Overall F test of all non-intercept terms; NaN when undefined."""
        df_model, df_resid = self.df_model, self.df_residual
        if df_model <= 0 or df_resid <= 0 or self.rss == 0:
            return float('nan')
        ess = self.tss - self.rss
        return float((ess / df_model) / (self.rss / df_resid))

    @property
    def f_p_value(self) -> float:
        f = self.f_statistic
        if np.isnan(f):
            return float('nan')
        return float(stats.f.sf(f, self.df_model, self.df_residual))

    def coef_table(self) -> tuple[Coefficient, ...]:
        """Rows of (term, estimate, SE, t, p), in design-column order."""
        return tuple(
            Coefficient(name, float(b), float(se), float(t), float(pv))
            for name, b, se, t, pv in zip(
                self.column_names, self.coefficients, self.standard_errors,
                self.t_statistics, self.p_values,
            )
        )

    def predict(self, table: Table) -> NDArray[np.floating[Any]]:
        """
        Predictions for a table with the training schema.

        Raises:
            SchemaMismatchError: If a training column is missing or a
                categorical level was unseen at fit time
        """
        return self.design_matrix(table) @ self.coefficients

    def summary(self) -> str:
        """Generate R-style summary output."""
        formula = self.formula
        lines = [
            "Linear Regression Results",
            "=" * 72,
        ]
        if formula is not None:
            lines.append(f"Formula: {formula}")
        lines += [
            f"Observations: {self._design.n}",
            f"Rank: {self.rank}",
            "",
            "Coefficients:",
            "-" * 72,
            f"{'':<24} {'Estimate':>12} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>10}",
            "-" * 72,
        ]
        for row in self.coef_table():
            se_str = f"{row.std_error:12.6f}" if not np.isnan(row.std_error) else f"{'NA':>12}"
            t_str = f"{row.t_value:10.3f}" if not np.isnan(row.t_value) else f"{'NA':>10}"
            p_str = f"{row.p_value:10.4g}" if not np.isnan(row.p_value) else f"{'NA':>10}"
            lines.append(f"{row.term[:24]:<24} {row.estimate:12.6f} {se_str} {t_str} {p_str}")
        lines.append("-" * 72)

        rse = self.residual_std_error
        rse_str = "NA" if np.isnan(rse) else f"{rse:.6f}"
        lines.append(f"Residual Std. Error: {rse_str} on {self.df_residual} DF")
        adj = self.adjusted_r_squared
        adj_str = "NA" if np.isnan(adj) else f"{adj:.6f}"
        lines.append(f"R-squared: {self.r_squared:.6f}, Adj. R-squared: {adj_str}")
        if not np.isnan(self.f_statistic):
            lines.append(
                f"F-statistic: {self.f_statistic:.4f} on {self.df_model} and "
                f"{self.df_residual} DF, p-value: {self.f_p_value:.4g}"
            )
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )


@dataclass(frozen=True)
class ForestParams:
    """
    Parameter payload for the random forest fitter.

    There is no coefficient table; the fitted estimator is kept for
    prediction, together with out-of-bag error estimates.
    """
    estimator: 'RandomForestRegressor'
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    oob_prediction: NDArray[np.floating[Any]]
    oob_mse: float
    oob_r2: float
    feature_importances: NDArray[np.floating[Any]]


@dataclass
class ForestSolution(_SolutionBase):
    """User-facing random forest results."""
    _result: Result[ForestParams]
    _design: 'RegressionDesign'

    @property
    def method(self) -> str:
        return 'forest'

    @property
    def oob_mse(self) -> float:
        return self._result.params.oob_mse

    @property
    def oob_rmse(self) -> float:
        return float(np.sqrt(self.oob_mse))

    @property
    def oob_r2(self) -> float:
        return self._result.params.oob_r2

    @property
    def oob_prediction(self) -> NDArray[np.floating[Any]]:
        return self._result.params.oob_prediction

    @property
    def feature_importances(self) -> dict[str, float]:
        """Impurity-based importances keyed by design column."""
        return dict(zip(
            self.column_names,
            (float(v) for v in self._result.params.feature_importances),
        ))

    def predict(self, table: Table) -> NDArray[np.floating[Any]]:
        return self._result.params.estimator.predict(self.design_matrix(table))

    def summary(self) -> str:
        lines = [
            "Random Forest Regression Results",
            "=" * 60,
        ]
        if self.formula is not None:
            lines.append(f"Formula: {self.formula}")
        lines += [
            f"Observations: {self._design.n}",
            f"Trees: {self.info.get('n_estimators')}",
            f"OOB RMSE: {self.oob_rmse:.6f}",
            f"OOB R-squared: {self.oob_r2:.6f}",
            "",
            "Feature importances:",
        ]
        ranked = sorted(self.feature_importances.items(), key=lambda kv: -kv[1])
        for name, value in ranked:
            lines.append(f"  {name[:30]:<30} {value:10.4f}")
        lines.append(f"Backend: {self.backend_name}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ForestSolution(n={self._design.n}, p={self._design.p}, "
            f"oob_r2={self.oob_r2:.4f})"
        )
