"""
CPU backends for resampled evaluation.

CPUResamplingBackend: fit-and-score over k-fold or bootstrap tasks.
CPUCoefficientBootstrapBackend: bootstrap replicates of OLS coefficients.

Both fan work out with joblib. Every task carries its own row indices and
fit seed, generated up front from the design seed, so the gathered result
does not depend on n_jobs or on task completion order.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np
from joblib import Parallel, delayed
from numpy.typing import NDArray

from pyeconometrics.core.compute.timing import Timer
from pyeconometrics.core.exceptions import RankDeficientError
from pyeconometrics.core.result import Result
from pyeconometrics.core.table import Table
from pyeconometrics.regression.backends.cpu import CPUQRBackend
from pyeconometrics.regression.design import Encoding, RegressionDesign
from pyeconometrics.regression.solvers import fit
from pyeconometrics.resampling._common import (
    CoefficientBootstrapParams,
    EvaluationParams,
    summarize_scores,
)
from pyeconometrics.resampling.design import (
    CoefficientBootstrapDesign,
    EvaluationDesign,
    ResampleTask,
)
from pyeconometrics.resampling.metrics import MetricFn
from pyeconometrics.resampling.split import spawn_generators, bootstrap_indices


def _fit_and_score(
    table: Table,
    encoding: Encoding,
    method: str,
    fit_options: dict[str, Any],
    metric: MetricFn,
    task: ResampleTask,
) -> tuple[float, bool]:
    """
    Fit on the task's training rows and score on its test rows.

    Returns (score, rank_deficient). An OLS fit whose training rows leave a
    design column without information (typically a dummy for a level none
    of them carry) scores NaN instead of failing the whole evaluation.
    """
    try:
        model = fit(
            table.take(task.train), encoding.formula,
            method=method, seed=task.fit_seed, encoding=encoding, **fit_options,
        )
    except RankDeficientError:
        return float('nan'), True
    scored = table if task.test is None else table.take(task.test)
    return float(metric(model.response(scored), model.predict(scored))), False


class CPUResamplingBackend:
    """
    CPU backend for repeated k-fold and bootstrap evaluation.

    Args:
        n_jobs: joblib worker count; 1 runs in-process, -1 uses all cores
    """

    def __init__(self, n_jobs: int = 1) -> None:
        self._n_jobs = n_jobs

    @property
    def name(self) -> str:
        return 'cpu_resampling'

    def solve(
        self,
        design: EvaluationDesign,
        tasks: list[ResampleTask] | None = None,
    ) -> Result[EvaluationParams]:
        """
        Score the design's model on every resample.

        Args:
            design: Evaluation design
            tasks: Precomputed tasks (shared across candidates by
                compare_models); generated from the design seed if None

        Raises:
            Any fitting or scoring error from a task, unchanged
        """
        timer = Timer()
        timer.start()

        with timer.section('resample'):
            if tasks is None:
                tasks = design.scheme.tasks(design.table.n_rows, design.seed)

        runnable = [t for t in tasks if t.test is None or len(t.test) > 0]
        skipped = [t.index for t in tasks if t.test is not None and len(t.test) == 0]

        warnings_list: list[str] = []
        if skipped:
            message = (
                f"{len(skipped)} bootstrap resample(s) drew every row and have "
                f"no out-of-bag rows; skipped: {skipped}"
            )
            warnings_list.append(message)
            warnings.warn(message, RuntimeWarning, stacklevel=3)

        with timer.section('fit_and_score'):
            scores = Parallel(n_jobs=self._n_jobs)(
                delayed(_fit_and_score)(
                    design.table, design.encoding, design.method,
                    design.fit_options, design.metric, task,
                )
                for task in runnable
            )

        with timer.section('summary_statistics'):
            scores_arr = np.array([s for s, _ in scores], dtype=np.float64)
            rank_deficient = [t.index for t, (_, bad) in zip(runnable, scores) if bad]
            mean, std = summarize_scores(scores_arr)
            if rank_deficient:
                message = (
                    f"{len(rank_deficient)} resample(s) gave a rank-deficient OLS fit "
                    f"(a level or column without variation in the training rows); "
                    f"scored NaN: {rank_deficient}"
                )
                warnings_list.append(message)
                warnings.warn(message, RuntimeWarning, stacklevel=3)
            n_undefined = int(np.isnan(scores_arr).sum()) - len(rank_deficient)
            if n_undefined:
                warnings_list.append(
                    f"{n_undefined} score(s) are NaN "
                    f"(metric {design.metric_name!r} undefined on the held-out rows)"
                )

        timer.stop()

        params = EvaluationParams(
            scores=scores_arr,
            task_indices=np.array([t.index for t in runnable], dtype=np.intp),
            mean=mean,
            std=std,
            n_skipped=len(skipped),
            n_rank_deficient=len(rank_deficient),
        )

        return Result(
            params=params,
            info={
                'method': design.method,
                'scheme': design.scheme.name,
                'metric': design.metric_name,
                'n': design.table.n_rows,
                'n_tasks': len(tasks),
                'seed': design.seed,
                'n_jobs': self._n_jobs,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


def _replicate(
    table: Table,
    encoding: Encoding,
    indices: NDArray[np.intp],
) -> NDArray[np.floating[Any]] | None:
    """OLS coefficients on one resample; None when it is rank deficient."""
    design = RegressionDesign.from_encoding(encoding, table.take(indices))
    try:
        result = CPUQRBackend().solve(design)
    except RankDeficientError:
        return None
    return result.params.coefficients


class CPUCoefficientBootstrapBackend:
    """
    CPU backend for the ordinary nonparametric bootstrap of OLS
    coefficients, R's ``boot(data, function(d, i) coef(lm(f, d[i, ])), R)``.
    """

    def __init__(self, n_jobs: int = 1) -> None:
        self._n_jobs = n_jobs

    @property
    def name(self) -> str:
        return 'cpu_coefficient_bootstrap'

    def solve(self, design: CoefficientBootstrapDesign) -> Result[CoefficientBootstrapParams]:
        """
        Run the bootstrap and return Result[CoefficientBootstrapParams].

        Raises:
            RankDeficientError: If the full-data design is rank deficient
        """
        timer = Timer()
        timer.start()

        table = design.table
        n = table.n_rows

        with timer.section('t0_computation'):
            full = RegressionDesign.from_encoding(design.encoding, table)
            t0 = CPUQRBackend().solve(full).params.coefficients

        with timer.section('resample'):
            draws = [
                bootstrap_indices(n, rng)[0]
                for rng in spawn_generators(design.seed, design.R)
            ]

        with timer.section('bootstrap_replicates'):
            replicates = Parallel(n_jobs=self._n_jobs)(
                delayed(_replicate)(table, design.encoding, indices)
                for indices in draws
            )

        k = len(t0)
        t = np.full((design.R, k), np.nan, dtype=np.float64)
        failed = []
        for i, coefficients in enumerate(replicates):
            if coefficients is None:
                failed.append(i)
            else:
                t[i] = coefficients

        warnings_list: list[str] = []
        if failed:
            warnings_list.append(
                f"{len(failed)} of {design.R} replicate(s) had a rank-deficient "
                f"design; their coefficients are NaN"
            )

        with timer.section('summary_statistics'):
            defined = t[~np.isnan(t).any(axis=1)]
            if len(defined) == 0:
                bias = np.full(k, np.nan)
                se = np.full(k, np.nan)
            else:
                bias = np.mean(defined, axis=0) - t0
                se = (
                    np.std(defined, axis=0, ddof=1) if len(defined) > 1
                    else np.full(k, np.nan)
                )

        timer.stop()

        params = CoefficientBootstrapParams(
            t0=t0,
            t=t,
            R=design.R,
            bias=bias,
            se=se,
            n_failed=len(failed),
        )

        return Result(
            params=params,
            info={
                'sim': 'ordinary',
                'n': n,
                'k': k,
                'seed': design.seed,
                'n_jobs': self._n_jobs,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
