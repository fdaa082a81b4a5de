"""
Solution wrappers for resampled evaluation.

EvaluationSolution, CoefficientBootstrapSolution and ComparisonSolution wrap
Result[P] and provide convenient accessors and plain-text summaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyeconometrics.core.result import Result, ResultAccessors
from pyeconometrics.resampling._common import (
    CoefficientBootstrapParams,
    ComparisonParams,
    EvaluationParams,
)

if TYPE_CHECKING:
    from pyeconometrics.resampling.design import (
        CoefficientBootstrapDesign,
        EvaluationDesign,
        Scheme,
    )


def _fmt(value: float, fmt: str = '.6f') -> str:
    return "NA" if np.isnan(value) else format(value, fmt)


@dataclass
class EvaluationSolution(ResultAccessors):
    """
    User-facing results of scoring one model under a resampling scheme.

    The aggregate (mean and sample std of the per-resample scores) is the
    headline; individual scores stay available for plots and comparisons.
    """
    _result: Result[EvaluationParams]
    _design: 'EvaluationDesign'

    @property
    def scores(self) -> NDArray[np.floating[Any]]:
        """One metric value per completed resample."""
        return self._result.params.scores

    @property
    def task_indices(self) -> NDArray[np.intp]:
        return self._result.params.task_indices

    @property
    def mean(self) -> float:
        return self._result.params.mean

    @property
    def std(self) -> float:
        """Sample standard deviation of the scores; NaN for a single score."""
        return self._result.params.std

    @property
    def n_scores(self) -> int:
        return len(self.scores)

    @property
    def n_skipped(self) -> int:
        return self._result.params.n_skipped

    @property
    def n_rank_deficient(self) -> int:
        """Resamples scored NaN because their OLS fit was rank deficient."""
        return self._result.params.n_rank_deficient

    @property
    def metric(self) -> str:
        return self._design.metric_name

    @property
    def method(self) -> str:
        return self._design.method

    @property
    def scheme(self) -> 'Scheme':
        return self._design.scheme

    @property
    def formula(self):
        return self._design.formula

    @property
    def seed(self) -> int | None:
        return self._design.seed

    def summary(self) -> str:
        lines = [
            "Resampled Evaluation",
            "=" * 60,
            f"Formula: {self.formula}",
            f"Method: {self.method}",
            f"Scheme: {self.scheme.describe()}",
            f"Observations: {self.info.get('n')}",
            f"Scores: {self.n_scores}" + (f" ({self.n_skipped} skipped)" if self.n_skipped else ""),
            *([f"Rank-deficient fits: {self.n_rank_deficient}"] if self.n_rank_deficient else []),
            "",
            f"{self.metric.upper()}: mean {_fmt(self.mean)}, sd {_fmt(self.std)}",
        ]
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"EvaluationSolution(method={self.method!r}, metric={self.metric!r}, "
            f"n_scores={self.n_scores}, mean={self.mean:.4g})"
        )


@dataclass
class CoefficientBootstrapSolution(ResultAccessors):
    """
    User-facing bootstrap of OLS coefficients.

    Matches R's boot object output: t0, t, bias and standard error per
    term. summary() follows print.boot, labelled with the term names.
    """
    _result: Result[CoefficientBootstrapParams]
    _design: 'CoefficientBootstrapDesign'

    @property
    def t0(self) -> NDArray[np.floating[Any]]:
        """Coefficients on the original data, shape (k,)."""
        return self._result.params.t0

    @property
    def t(self) -> NDArray[np.floating[Any]]:
        """Replicate coefficients, shape (R, k)."""
        return self._result.params.t

    @property
    def R(self) -> int:
        return self._result.params.R

    @property
    def bias(self) -> NDArray[np.floating[Any]]:
        """Bootstrap bias estimate: mean(t) - t0, shape (k,)."""
        return self._result.params.bias

    @property
    def se(self) -> NDArray[np.floating[Any]]:
        """Bootstrap standard error: sd(t), shape (k,)."""
        return self._result.params.se

    @property
    def n_failed(self) -> int:
        return self._result.params.n_failed

    @property
    def term_names(self) -> tuple[str, ...]:
        return self._design.term_names

    @property
    def seed(self) -> int | None:
        return self._design.seed

    def summary(self) -> str:
        """
        R-style print.boot output.

        Produces:
            ORDINARY NONPARAMETRIC BOOTSTRAP

            Bootstrap Statistics :
                            original       bias    std. error
            (Intercept)      5.12345    0.01234       0.56789
            x                3.45678   -0.00567       0.34567
        """
        lines = [
            "\nORDINARY NONPARAMETRIC BOOTSTRAP\n",
            f"Formula: {self._design.encoding.formula}",
            f"Replicates: {self.R}",
            "",
            "Bootstrap Statistics :",
            f"{'':<16s} {'original':>14s} {'bias':>14s} {'std. error':>14s}",
        ]
        for name, t0, bias, se in zip(self.term_names, self.t0, self.bias, self.se):
            lines.append(
                f"{name[:16]:<16s} {t0:14.5f} {_fmt(bias, '14.5f'):>14s} "
                f"{_fmt(se, '14.5f'):>14s}"
            )
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CoefficientBootstrapSolution(R={self.R}, k={len(self.t0)}, "
            f"backend={self.backend_name!r})"
        )


@dataclass
class ComparisonSolution(ResultAccessors):
    """
    User-facing comparison of candidate models on identical resamples.

    Candidates are ranked by mean score: ascending for error metrics,
    descending for R².
    """
    _result: Result[ComparisonParams]
    _evaluations: dict[str, EvaluationSolution] = field(default_factory=dict)

    @property
    def names(self) -> tuple[str, ...]:
        return self._result.params.names

    @property
    def ranking(self) -> tuple[str, ...]:
        """Candidate names, best first."""
        return self._result.params.ranking

    @property
    def best(self) -> str:
        return self.ranking[0]

    @property
    def means(self) -> dict[str, float]:
        return dict(zip(self.names, (float(m) for m in self._result.params.means)))

    @property
    def stds(self) -> dict[str, float]:
        return dict(zip(self.names, (float(s) for s in self._result.params.stds)))

    @property
    def higher_is_better(self) -> bool:
        return self._result.params.higher_is_better

    @property
    def evaluations(self) -> dict[str, EvaluationSolution]:
        return dict(self._evaluations)

    def __getitem__(self, name: str) -> EvaluationSolution:
        return self._evaluations[name]

    def summary(self) -> str:
        metric = self.info.get('metric', '')
        lines = [
            "Model Comparison",
            "=" * 60,
            f"Scheme: {self.info.get('scheme_description', '')}",
            f"Metric: {metric} ({'higher' if self.higher_is_better else 'lower'} is better)",
            "",
            f"{'Rank':>4}  {'Model':<24} {'Mean':>12} {'SD':>12}",
            "-" * 56,
        ]
        means, stds = self.means, self.stds
        for rank, name in enumerate(self.ranking, start=1):
            lines.append(
                f"{rank:>4}  {name[:24]:<24} {_fmt(means[name], '12.6f'):>12} "
                f"{_fmt(stds[name], '12.6f'):>12}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ComparisonSolution(candidates={len(self.names)}, best={self.best!r})"
