"""
Stratified train/holdout split and resampling index generation.

All randomness flows from an explicit integer seed. The same seed and the
same table always produce the same partition, fold layout or resample.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyeconometrics.core.defaults import DEFAULT_QUANTILE_BINS
from pyeconometrics.core.table import Table
from pyeconometrics.core.validation import (
    check_finite,
    check_int_at_least,
    check_open_fraction,
    check_seed,
)


def quantile_strata(y: NDArray[np.floating[Any]], n_bins: int) -> NDArray[np.intp]:
    """
    Bucket a continuous outcome into quantile bins.

    Uses ``min(n_bins, max(1, n // 2))`` bins so every bin can hold at
    least two rows; duplicate quantile edges collapse.
    """
    n = len(y)
    bins = min(n_bins, max(1, n // 2))
    edges = np.unique(np.quantile(y, np.linspace(0.0, 1.0, bins + 1)))
    if len(edges) < 2:
        return np.zeros(n, dtype=np.intp)
    # Right-closed bins with the lowest edge included.
    inner = edges[1:-1]
    return np.searchsorted(inner, y, side='left').astype(np.intp)


def split_indices(
    table: Table,
    outcome: str,
    holdout_fraction: float,
    seed: int | None,
    *,
    n_bins: int = DEFAULT_QUANTILE_BINS,
) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """
    Row indices of a stratified train/holdout partition.

    Within every stratum ``ceil(len * (1 - holdout_fraction))`` rows go to
    training and the rest to holdout; singleton strata go to training.
    Both index arrays are sorted. Small strata with a small fraction can
    round every row into training; the holdout is then empty and a
    UserWarning is emitted.

    Raises:
        InvalidParameterError: If holdout_fraction is outside (0, 1)
    """
    fraction = check_open_fraction(holdout_fraction, 'holdout_fraction')
    n_bins = check_int_at_least(n_bins, 1, 'n_bins')
    seed = check_seed(seed)

    values = table[outcome]
    if table.is_categorical(outcome):
        labels = np.array(['' if v is None else v for v in values], dtype=object)
        _, strata = np.unique(labels.astype(str), return_inverse=True)
    else:
        check_finite(values, outcome)
        strata = quantile_strata(values, n_bins)

    rng = np.random.default_rng(seed)
    train_parts: list[NDArray] = []
    test_parts: list[NDArray] = []
    for stratum in np.unique(strata):
        members = np.flatnonzero(strata == stratum)
        if len(members) == 1:
            train_parts.append(members)
            continue
        n_train = int(np.ceil(round(len(members) * (1.0 - fraction), 9)))
        shuffled = rng.permutation(members)
        train_parts.append(shuffled[:n_train])
        test_parts.append(shuffled[n_train:])

    train = np.sort(np.concatenate(train_parts)) if train_parts else np.empty(0, dtype=np.intp)
    test = np.sort(np.concatenate(test_parts)) if test_parts else np.empty(0, dtype=np.intp)
    if len(test) == 0:
        warnings.warn(
            f"holdout is empty: rounding training shares up in every stratum "
            f"kept all {table.n_rows} rows for training (holdout_fraction={fraction})",
            UserWarning,
            stacklevel=2,
        )
    return train.astype(np.intp), test.astype(np.intp)


def split(
    table: Table,
    outcome: str,
    holdout_fraction: float,
    seed: int | None,
    *,
    n_bins: int = DEFAULT_QUANTILE_BINS,
) -> tuple[Table, Table]:
    """
    Stratified train/holdout split of a table.

    Args:
        table: Data to partition
        outcome: Column whose marginal distribution is preserved
        holdout_fraction: Share of rows held out, in (0, 1)
        seed: Reproducibility seed
        n_bins: Quantile bins for a continuous outcome

    Returns:
        (train, test) Tables; rows keep their original order
        (test may be empty, with a UserWarning, when every stratum rounds
        all of its rows into training)

    Raises:
        InvalidParameterError: If holdout_fraction is outside (0, 1)
        KeyError: If outcome is not a column of table
    """
    train_idx, test_idx = split_indices(
        table, outcome, holdout_fraction, seed, n_bins=n_bins
    )
    return table.take(train_idx), table.take(test_idx)


def spawn_generators(seed: int | None, count: int) -> list[np.random.Generator]:
    """Independent child generators derived from one seed."""
    children = np.random.SeedSequence(seed).spawn(count)
    return [np.random.default_rng(child) for child in children]


def kfold_indices(
    n: int,
    k: int,
    rng: np.random.Generator,
) -> list[tuple[NDArray[np.intp], NDArray[np.intp]]]:
    """
    One repeat of k-fold: shuffle rows and deal them into k near-equal folds.

    Returns (train, test) index pairs, one per fold, each sorted.
    """
    order = rng.permutation(n)
    folds = np.array_split(order, k)
    pairs = []
    for i, test in enumerate(folds):
        train = np.concatenate([f for j, f in enumerate(folds) if j != i])
        pairs.append((np.sort(train), np.sort(test)))
    return pairs


def bootstrap_indices(
    n: int,
    rng: np.random.Generator,
) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """
    One bootstrap resample: n draws with replacement plus the out-of-bag rows.
    """
    drawn = rng.integers(0, n, size=n)
    out_of_bag = np.setdiff1d(np.arange(n), drawn)
    return drawn.astype(np.intp), out_of_bag.astype(np.intp)
