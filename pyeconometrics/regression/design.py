"""
Regression Design.

The design turns a Table and a Formula into a numeric design matrix X and
response y. Everything learned from the training data while doing so
(categorical levels, scale parameters, design column names) is kept in an
Encoding so the same transformation can be replayed on new tables at
predict time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyeconometrics.core.exceptions import SchemaMismatchError, ValidationError
from pyeconometrics.core.table import Table
from pyeconometrics.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
)
from pyeconometrics.regression.formula import Formula, Interaction, PredictorTerm, Term

INTERCEPT = "(Intercept)"


@dataclass(frozen=True)
class Encoding:
    """
    Fit-time state needed to rebuild the design on another table.

    Attributes:
        formula: The formula being encoded
        levels: Sorted levels of every categorical column (first is reference)
        scales: (mean, sd) for every scale()-transformed column
        column_names: Design column names, intercept first if present
    """
    formula: Formula
    levels: dict[str, tuple[str, ...]] = field(default_factory=dict)
    scales: dict[str, tuple[float, float]] = field(default_factory=dict)
    column_names: tuple[str, ...] = ()

    @classmethod
    def learn(cls, table: Table, formula: Formula, *, intercept: bool | None = None) -> Encoding:
        """
        Learn levels and scale parameters from a (training) table.

        Args:
            table: Training data
            formula: Model formula
            intercept: Override the formula's intercept flag (the forest
                fitter has no use for an intercept column)

        Raises:
            ValidationError: If a referenced column is missing or malformed
        """
        missing = [c for c in formula.columns if c not in table]
        if missing:
            raise ValidationError(
                f"formula references missing column(s) {missing}. "
                f"Available: {list(table.columns)}"
            )
        if table.is_categorical(formula.outcome.column):
            raise ValidationError(
                f"outcome {formula.outcome.column!r} is categorical; regression needs a numeric outcome"
            )

        levels: dict[str, tuple[str, ...]] = {}
        scales: dict[str, tuple[float, float]] = {}
        terms = [formula.outcome]
        for term in formula.predictors:
            terms.extend((term.left, term.right) if isinstance(term, Interaction) else (term,))

        for term in terms:
            values = table[term.column]
            if table.is_categorical(term.column):
                if term.transform != 'identity':
                    raise ValidationError(
                        f"{term.name}: transforms apply to numeric columns only, "
                        f"{term.column!r} is categorical"
                    )
                if any(v is None for v in values):
                    raise ValidationError(f"{term.column}: contains missing categorical values")
                levels[term.column] = tuple(sorted(set(values)))
            elif term.transform == 'scale' and term.column not in scales:
                check_finite(values, term.column)
                sd = float(np.std(values, ddof=1)) if len(values) > 1 else 0.0
                if sd == 0.0:
                    raise ValidationError(f"{term.name}: column has zero variance, cannot scale")
                scales[term.column] = (float(np.mean(values)), sd)

        use_intercept = formula.intercept if intercept is None else intercept
        names: list[str] = [INTERCEPT] if use_intercept else []
        for term in formula.predictors:
            names.extend(_term_names(term, levels))

        return cls(formula=formula, levels=levels, scales=scales, column_names=tuple(names))

    @property
    def has_intercept(self) -> bool:
        return bool(self.column_names) and self.column_names[0] == INTERCEPT

    def check_schema(self, table: Table) -> None:
        """
        Verify a table can be encoded with this fit-time state.

        Raises:
            SchemaMismatchError: Missing predictor columns or unseen levels
        """
        missing = tuple(c for c in self.formula.predictor_columns if c not in table)
        if missing:
            raise SchemaMismatchError(
                f"table is missing column(s) the model was trained on: {list(missing)}",
                missing=missing,
            )
        unseen: dict[str, tuple[str, ...]] = {}
        for column, known in self.levels.items():
            if column == self.formula.outcome.column or column not in table:
                continue
            if not table.is_categorical(column):
                raise SchemaMismatchError(
                    f"column {column!r} was categorical at fit time but is numeric now"
                )
            extra = tuple(sorted(set(table[column]) - set(known), key=str))
            if extra:
                unseen[column] = extra
        if unseen:
            raise SchemaMismatchError(
                f"categorical level(s) unseen at fit time: {unseen}",
                unseen_levels=unseen,
            )

    def matrix(self, table: Table) -> NDArray[np.floating[Any]]:
        """Design matrix for a table, replaying the learned encoding."""
        self.check_schema(table)
        n = table.n_rows
        blocks: list[NDArray] = []
        if self.has_intercept:
            blocks.append(np.ones((n, 1), dtype=np.float64))
        for term in self.formula.predictors:
            blocks.append(self._term_block(term, table))
        if not blocks:
            return np.empty((n, 0), dtype=np.float64)
        X = np.hstack(blocks)
        check_finite(X, 'X')
        return X

    def response(self, table: Table) -> NDArray[np.floating[Any]]:
        """Outcome vector for a table, on the transformed scale."""
        outcome = self.formula.outcome
        if outcome.column not in table:
            raise SchemaMismatchError(
                f"table is missing outcome column {outcome.column!r}",
                missing=(outcome.column,),
            )
        y = _transform(table[outcome.column], outcome, self.scales)
        check_finite(y, outcome.name)
        return y

    def _term_block(self, term: PredictorTerm, table: Table) -> NDArray:
        if isinstance(term, Interaction):
            left = self._term_block(term.left, table)
            right = self._term_block(term.right, table)
            # Column order matches _term_names: left varies slowest.
            return np.einsum('ni,nj->nij', left, right).reshape(table.n_rows, -1)
        values = table[term.column]
        if term.column in self.levels:
            levels = self.levels[term.column]
            return np.column_stack(
                [(values == level).astype(np.float64) for level in levels[1:]]
            ) if len(levels) > 1 else np.empty((table.n_rows, 0))
        return _transform(values, term, self.scales).reshape(-1, 1)


def _term_names(term: PredictorTerm, levels: dict[str, tuple[str, ...]]) -> list[str]:
    if isinstance(term, Interaction):
        return [
            f"{left}:{right}"
            for left in _term_names(term.left, levels)
            for right in _term_names(term.right, levels)
        ]
    if term.column in levels:
        return [f"{term.column}{level}" for level in levels[term.column][1:]]
    return [term.name]


def _transform(
    values: NDArray,
    term: Term,
    scales: dict[str, tuple[float, float]],
) -> NDArray[np.floating[Any]]:
    """Apply a term's transform to a numeric column."""
    x = np.asarray(values, dtype=np.float64)
    if term.transform == 'log':
        bad = int(np.sum(x <= 0))
        if bad:
            raise ValidationError(f"{term.name}: requires positive values, {bad} are <= 0")
        return np.log(x)
    if term.transform == 'reciprocal':
        bad = int(np.sum(x == 0))
        if bad:
            raise ValidationError(f"{term.name}: {bad} zero value(s), reciprocal undefined")
        return 1.0 / x
    if term.transform == 'power':
        return x ** term.degree
    if term.transform == 'scale':
        mean, sd = scales[term.column]
        return (x - mean) / sd
    return x


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design: X, y and the encoding that produced them.

    Immutable after construction.

    Construction:
        RegressionDesign.build(table, formula)      # from a formula
        RegressionDesign.from_encoding(enc, table)  # replay a learned encoding
        RegressionDesign.from_arrays(X, y, names)   # auxiliary regressions
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _column_names: tuple[str, ...]
    _encoding: Encoding | None = None

    @classmethod
    def build(
        cls,
        table: Table,
        formula: Formula,
        *,
        intercept: bool | None = None,
    ) -> RegressionDesign:
        """Learn the encoding on ``table`` and build X and y from it."""
        encoding = Encoding.learn(table, formula, intercept=intercept)
        X = encoding.matrix(table)
        y = encoding.response(table)
        return cls._build(X, y, encoding.column_names, encoding)

    @classmethod
    def from_encoding(cls, encoding: Encoding, table: Table) -> RegressionDesign:
        """Build X and y for ``table`` with an already-learned encoding."""
        X = encoding.matrix(table)
        y = encoding.response(table)
        return cls._build(X, y, encoding.column_names, encoding)

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        column_names: tuple[str, ...] | None = None,
    ) -> RegressionDesign:
        """Build a design directly from arrays (no formula, no predict)."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        names = column_names or tuple(f"x{i}" for i in range(X_arr.shape[1] if X_arr.ndim == 2 else 0))
        return cls._build(X_arr, y_arr, tuple(names), None)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        column_names: tuple[str, ...],
        encoding: Encoding | None,
    ) -> RegressionDesign:
        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))
        check_min_samples(X.shape[0], 1, 'X')
        if len(column_names) != X.shape[1]:
            raise ValidationError(
                f"{len(column_names)} column names for {X.shape[1]} design columns"
            )
        n, p = X.shape
        return cls(_X=X, _y=y, _n=n, _p=p, _column_names=column_names, _encoding=encoding)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of design columns."""
        return self._p

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._column_names

    @property
    def encoding(self) -> Encoding | None:
        """Fit-time encoding, None for array-built designs."""
        return self._encoding

    @property
    def has_intercept(self) -> bool:
        return bool(self._column_names) and self._column_names[0] == INTERCEPT

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Compute X'X (for standard errors)."""
        return self._X.T @ self._X
