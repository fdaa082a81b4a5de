"""
Public API for resampled evaluation.

evaluate(): score one model under repeated k-fold or bootstrap
bootstrap_coefficients(): nonparametric bootstrap of OLS coefficients
compare_models(): score several candidates on identical resamples
"""

from __future__ import annotations

from typing import Any, Mapping, Union

import numpy as np

from pyeconometrics.core.compute.timing import Timer
from pyeconometrics.core.exceptions import InvalidParameterError
from pyeconometrics.core.result import Result
from pyeconometrics.core.table import Table
from pyeconometrics.regression.formula import Formula
from pyeconometrics.regression.solvers import MethodChoice, as_formula
from pyeconometrics.resampling._common import ComparisonParams
from pyeconometrics.resampling.backends.cpu import (
    CPUCoefficientBootstrapBackend,
    CPUResamplingBackend,
)
from pyeconometrics.resampling.design import (
    CoefficientBootstrapDesign,
    EvaluationDesign,
    Scheme,
)
from pyeconometrics.resampling.metrics import HIGHER_IS_BETTER, MetricChoice
from pyeconometrics.resampling.solution import (
    CoefficientBootstrapSolution,
    ComparisonSolution,
    EvaluationSolution,
)

Candidate = Union[Formula, str, tuple]


def evaluate(
    table: Table,
    formula: Formula | str,
    *,
    method: MethodChoice = 'ols',
    scheme: Scheme,
    metric: MetricChoice | None,
    seed: int | None,
    n_jobs: int = 1,
    **fit_options: Any,
) -> EvaluationSolution:
    """
    Estimate out-of-sample performance by resampling.

    Categorical levels and scale parameters are learned once on the full
    table and replayed in every fold, so a level missing from a fold's
    training rows never makes its held-out rows unscorable. An OLS fold
    left rank deficient by such a level scores NaN with a warning; mean
    and std cover the defined scores.

    Args:
        table: Data to resample
        formula: A Formula, or formula text
        method: 'ols' or 'forest'
        scheme: RepeatedKFold(k, repeats) or Bootstrap(R, out_of_bag=False)
        metric: 'rmse', 'mae', 'r2' or a callable (y_true, y_pred) -> float
        seed: Seed for fold layout, bootstrap draws and forest fits
        n_jobs: joblib workers; results do not depend on this
        **fit_options: Forwarded to fit() (forest settings)

    Returns:
        EvaluationSolution with per-resample scores and their aggregate

    Raises:
        InvalidParameterError: If scheme, metric, method or seed is invalid
        RankDeficientError: If the OLS design on the full table is rank
            deficient
        ValidationError: From encoding the table or any fold's fit

    Example:
        >>> res = evaluate(tbl, "y ~ x", scheme=RepeatedKFold(10, 5),
        ...                metric='rmse', seed=42)
        >>> res.n_scores
        50
    """
    design = EvaluationDesign.for_evaluation(
        table, as_formula(formula),
        method=method, scheme=scheme, metric=metric, seed=seed,
        fit_options=fit_options,
    )
    result = CPUResamplingBackend(n_jobs=n_jobs).solve(design)
    return EvaluationSolution(_result=result, _design=design)


def bootstrap_coefficients(
    table: Table,
    formula: Formula | str,
    R: int,
    seed: int | None,
    *,
    n_jobs: int = 1,
) -> CoefficientBootstrapSolution:
    """
    Nonparametric bootstrap of OLS coefficients.

    Args:
        table: Original data
        formula: A Formula, or formula text
        R: Number of replicates
        seed: Reproducibility seed
        n_jobs: joblib workers; results do not depend on this

    Returns:
        CoefficientBootstrapSolution with t0, replicates, bias and SE

    Raises:
        InvalidParameterError: If R < 1 or seed is invalid
        RankDeficientError: If the full-data design is rank deficient
    """
    design = CoefficientBootstrapDesign.for_coefficients(
        table, as_formula(formula), R, seed
    )
    result = CPUCoefficientBootstrapBackend(n_jobs=n_jobs).solve(design)
    return CoefficientBootstrapSolution(_result=result, _design=design)


def compare_models(
    table: Table,
    candidates: Mapping[str, Candidate],
    *,
    scheme: Scheme,
    metric: MetricChoice | None,
    seed: int | None,
    n_jobs: int = 1,
) -> ComparisonSolution:
    """
    Evaluate several named models on the same resamples and rank them.

    Args:
        table: Data to resample
        candidates: name -> formula, formula text, (formula, method) or
            (formula, method, fit_options)
        scheme: RepeatedKFold or Bootstrap
        metric: 'rmse', 'mae', 'r2' or a callable
        seed: Seed shared by every candidate
        n_jobs: joblib workers

    Returns:
        ComparisonSolution ranking candidates by mean score

    Raises:
        InvalidParameterError: If candidates is empty or malformed
    """
    if not candidates:
        raise InvalidParameterError(
            "compare_models needs at least one candidate",
            parameter='candidates', value=candidates,
        )

    timer = Timer()
    timer.start()

    designs: dict[str, EvaluationDesign] = {}
    for name, candidate in candidates.items():
        formula, method, options = _unpack_candidate(name, candidate)
        designs[name] = EvaluationDesign.for_evaluation(
            table, formula,
            method=method, scheme=scheme, metric=metric, seed=seed,
            fit_options=options,
        )

    first = next(iter(designs.values()))
    with timer.section('resample'):
        tasks = scheme.tasks(table.n_rows, first.seed)

    backend = CPUResamplingBackend(n_jobs=n_jobs)
    evaluations: dict[str, EvaluationSolution] = {}
    with timer.section('evaluate'):
        for name, design in designs.items():
            evaluations[name] = EvaluationSolution(
                _result=backend.solve(design, tasks), _design=design
            )

    names = tuple(designs)
    means = np.array([evaluations[n].mean for n in names], dtype=np.float64)
    stds = np.array([evaluations[n].std for n in names], dtype=np.float64)
    higher = first.metric_name in HIGHER_IS_BETTER
    # Stable sort; NaN means rank last.
    keys = np.where(np.isnan(means), np.inf, -means if higher else means)
    ranking = tuple(names[i] for i in np.argsort(keys, kind='stable'))

    timer.stop()

    warnings_list = tuple(
        f"{name}: {w}" for name, ev in evaluations.items() for w in ev.warnings
    )
    params = ComparisonParams(
        names=names, means=means, stds=stds, ranking=ranking,
        higher_is_better=higher,
    )
    result = Result(
        params=params,
        info={
            'scheme': scheme.name,
            'scheme_description': scheme.describe(),
            'metric': first.metric_name,
            'n': table.n_rows,
            'n_tasks': len(tasks),
            'seed': first.seed,
        },
        timing=timer.result(),
        backend_name=backend.name,
        warnings=warnings_list,
    )
    return ComparisonSolution(_result=result, _evaluations=evaluations)


def _unpack_candidate(name: str, candidate: Candidate) -> tuple[Formula, str, dict[str, Any]]:
    if isinstance(candidate, (Formula, str)):
        return as_formula(candidate), 'ols', {}
    if isinstance(candidate, tuple) and len(candidate) in (2, 3):
        options = dict(candidate[2]) if len(candidate) == 3 else {}
        return as_formula(candidate[0]), candidate[1], options
    raise InvalidParameterError(
        f"candidate {name!r}: expected a formula, (formula, method) or "
        f"(formula, method, fit_options), got {candidate!r}",
        parameter='candidates', value=candidate,
    )
