"""
Correlation-based collinearity pruning.

Follows the greedy scheme of caret's findCorrelation: while some pair of
remaining columns has |r| above the threshold, drop the column (among those
in an offending pair) with the largest mean absolute correlation to the
other remaining columns.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray


def correlation_matrix(data: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Pearson correlation of the columns of data; NaN entries become 0."""
    with np.errstate(divide='ignore', invalid='ignore'):
        corr = np.corrcoef(data, rowvar=False)
    corr = np.atleast_2d(corr)
    corr = np.where(np.isnan(corr), 0.0, corr)
    np.fill_diagonal(corr, 1.0)
    return corr


def prune_correlated(
    corr: NDArray[np.floating[Any]],
    threshold: float,
) -> list[int]:
    """
    Indices of columns to remove, in removal order.

    Ties go to the lowest index. The correlation of a pair does not depend
    on the other columns, so the matrix is recomputed by slicing.
    """
    remaining = list(range(corr.shape[0]))
    removed: list[int] = []
    while len(remaining) > 1:
        sub = np.abs(corr[np.ix_(remaining, remaining)])
        np.fill_diagonal(sub, 0.0)
        offending = np.argwhere(sub > threshold)
        if len(offending) == 0:
            break
        candidates = np.unique(offending)
        mean_abs = sub.sum(axis=1) / (len(remaining) - 1)
        # argmax returns the first maximum, candidates are ascending.
        pick = candidates[int(np.argmax(mean_abs[candidates]))]
        removed.append(remaining.pop(int(pick)))
    return removed
