"""
Design classes for resampled evaluation.

RepeatedKFold and Bootstrap describe how rows are resampled; EvaluationDesign
bundles everything a backend needs to score one model under one scheme.
All are immutable and validated at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np
from numpy.typing import NDArray

from pyeconometrics.core.exceptions import InvalidParameterError, ValidationError
from pyeconometrics.core.table import Table
from pyeconometrics.core.validation import check_int_at_least, check_seed
from pyeconometrics.regression.backends.cpu import CPUQRBackend
from pyeconometrics.regression.design import Encoding, RegressionDesign
from pyeconometrics.regression.formula import Formula
from pyeconometrics.resampling.metrics import MetricChoice, MetricFn, resolve_metric
from pyeconometrics.resampling.split import (
    bootstrap_indices,
    kfold_indices,
    spawn_generators,
)


@dataclass(frozen=True)
class ResampleTask:
    """
    One fit-and-score unit of work.

    Attributes:
        index: Position in the scheme's task list
        train: Row indices to fit on (may repeat for bootstrap)
        test: Row indices to score on; None means the full table
        fit_seed: Seed handed to the fitter (used by the forest)
    """
    index: int
    train: NDArray[np.intp]
    test: NDArray[np.intp] | None
    fit_seed: int


@dataclass(frozen=True)
class RepeatedKFold:
    """
    Repeated k-fold cross-validation.

    Each repeat shuffles the rows with its own generator and deals them into
    k near-equal folds; every fold is held out once, giving k * repeats
    scores. ``RepeatedKFold(k=N, repeats=1)`` is leave-one-out.
    """
    k: int
    repeats: int = 1

    def __post_init__(self) -> None:
        check_int_at_least(self.k, 2, 'k')
        check_int_at_least(self.repeats, 1, 'repeats')

    @property
    def name(self) -> str:
        return 'repeated_kfold'

    @property
    def n_resamples(self) -> int:
        return self.k * self.repeats

    def tasks(self, n: int, seed: int | None) -> list[ResampleTask]:
        if self.k > n:
            raise InvalidParameterError(
                f"k: must be <= number of rows ({n}), got {self.k}",
                parameter='k', value=self.k,
            )
        generators = spawn_generators(seed, self.repeats)
        tasks: list[ResampleTask] = []
        for rng in generators:
            for train, test in kfold_indices(n, self.k, rng):
                fit_seed = int(rng.integers(0, 2**31 - 1))
                tasks.append(ResampleTask(len(tasks), train, test, fit_seed))
        return tasks

    def describe(self) -> str:
        if self.repeats == 1:
            return f"{self.k}-fold cross-validation"
        return f"{self.k}-fold cross-validation, repeated {self.repeats} times"


@dataclass(frozen=True)
class Bootstrap:
    """
    Bootstrap evaluation with R resamples of size N drawn with replacement.

    Each model is scored on the full table, or with ``out_of_bag=True`` on
    the rows its resample did not draw.
    """
    R: int
    out_of_bag: bool = False

    def __post_init__(self) -> None:
        check_int_at_least(self.R, 1, 'R')
        if not isinstance(self.out_of_bag, bool):
            raise InvalidParameterError(
                f"out_of_bag: expected a bool, got {self.out_of_bag!r}",
                parameter='out_of_bag', value=self.out_of_bag,
            )

    @property
    def name(self) -> str:
        return 'bootstrap'

    @property
    def n_resamples(self) -> int:
        return self.R

    def tasks(self, n: int, seed: int | None) -> list[ResampleTask]:
        tasks: list[ResampleTask] = []
        for i, rng in enumerate(spawn_generators(seed, self.R)):
            drawn, out_of_bag = bootstrap_indices(n, rng)
            fit_seed = int(rng.integers(0, 2**31 - 1))
            test = out_of_bag if self.out_of_bag else None
            tasks.append(ResampleTask(i, drawn, test, fit_seed))
        return tasks

    def describe(self) -> str:
        target = "out-of-bag rows" if self.out_of_bag else "full table"
        return f"bootstrap, {self.R} resamples, scored on {target}"


Scheme = Union[RepeatedKFold, Bootstrap]


@dataclass(frozen=True)
class EvaluationDesign:
    """
    Frozen design for scoring one model under one resampling scheme.

    Attributes:
        table: Data every task indexes into
        formula: Model formula
        method: 'ols' or 'forest'
        scheme: RepeatedKFold or Bootstrap
        metric_name: Display name of the metric
        metric: Scoring function (y_true, y_pred) -> float
        seed: Seed all resampling randomness derives from
        encoding: Encoding learned once on the full table; every task's
            fit replays it, so a level absent from the training rows still
            has its design column and the held-out rows can be scored
        fit_options: Extra keyword arguments for fit()
    """
    table: Table
    formula: Formula
    method: str
    scheme: Scheme
    metric_name: str
    metric: MetricFn
    seed: int | None
    encoding: Encoding
    fit_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_evaluation(
        cls,
        table: Table,
        formula: Formula,
        *,
        method: str,
        scheme: Scheme,
        metric: MetricChoice | None,
        seed: int | None,
        fit_options: dict[str, Any] | None = None,
    ) -> EvaluationDesign:
        """
        Create an evaluation design with validation.

        Raises:
            ValidationError: If table is not a Table or cannot be encoded
            InvalidParameterError: If scheme, metric, method or seed is invalid
            RankDeficientError: If the full-data OLS design is rank deficient
        """
        if not isinstance(table, Table):
            raise ValidationError(
                f"table: expected a Table, got {type(table).__name__}"
            )
        if not isinstance(scheme, (RepeatedKFold, Bootstrap)):
            raise InvalidParameterError(
                f"scheme must be RepeatedKFold or Bootstrap, got {type(scheme).__name__}",
                parameter='scheme', value=scheme,
            )
        if method not in ('ols', 'forest'):
            raise InvalidParameterError(
                f"Unknown method: {method!r}; expected 'ols' or 'forest'",
                parameter='method', value=method,
            )
        metric_name, metric_fn = resolve_metric(metric)
        options = dict(fit_options or {})
        for reserved in ('seed', 'encoding'):
            if reserved in options:
                raise InvalidParameterError(
                    f"{reserved} is set by the evaluation; do not pass it in fit options",
                    parameter=reserved, value=options[reserved],
                )
        seed = check_seed(seed)

        encoding = Encoding.learn(
            table, formula, intercept=False if method == 'forest' else None
        )
        if method == 'ols':
            # Folds may still lose a rare level; that is scored as NaN.
            CPUQRBackend().solve(RegressionDesign.from_encoding(encoding, table))

        return cls(
            table=table,
            formula=formula,
            method=method,
            scheme=scheme,
            metric_name=metric_name,
            metric=metric_fn,
            seed=seed,
            encoding=encoding,
            fit_options=options,
        )


@dataclass(frozen=True)
class CoefficientBootstrapDesign:
    """
    Frozen design for the nonparametric bootstrap of OLS coefficients.

    The encoding is learned once on the full table so every replicate
    produces the same design columns, even when a resample misses a
    categorical level.

    Attributes:
        table: Original data
        encoding: Encoding learned on the full table
        R: Number of bootstrap replicates
        seed: Seed all replicates derive from
    """
    table: Table
    encoding: Encoding
    R: int
    seed: int | None

    @classmethod
    def for_coefficients(
        cls,
        table: Table,
        formula: Formula,
        R: int,
        seed: int | None,
    ) -> CoefficientBootstrapDesign:
        """
        Create a coefficient bootstrap design with validation.

        Raises:
            ValidationError: If the table cannot be encoded with the formula
            InvalidParameterError: If R < 1 or seed is invalid
        """
        if not isinstance(table, Table):
            raise ValidationError(
                f"table: expected a Table, got {type(table).__name__}"
            )
        R = check_int_at_least(R, 1, 'R')
        seed = check_seed(seed)
        encoding = Encoding.learn(table, formula)
        return cls(table=table, encoding=encoding, R=R, seed=seed)

    @property
    def term_names(self) -> tuple[str, ...]:
        return self.encoding.column_names
