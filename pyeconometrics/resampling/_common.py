"""
Common data structures for resampled evaluation.

EvaluationParams, CoefficientBootstrapParams and ComparisonParams are the
parameter payloads wrapped by Result[P] and exposed through Solution
classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class EvaluationParams:
    """
    Parameter payload for one evaluated model.

    - scores: one metric value per completed resample, in task order
    - task_indices: which scheme task produced each score
    - mean, std: aggregate over the defined (non-NaN) scores; std uses
      ddof=1 and is NaN below two defined scores
    - n_rank_deficient: OLS resamples whose fit was rank deficient (NaN)
    """
    scores: NDArray[np.floating[Any]]          # shape (m,)
    task_indices: NDArray[np.intp]             # shape (m,)
    mean: float
    std: float
    n_skipped: int
    n_rank_deficient: int = 0


@dataclass(frozen=True)
class CoefficientBootstrapParams:
    """
    Parameter payload for the bootstrap of OLS coefficients.

    Matches R's boot object structure:
    - t0: coefficients on the original data
    - t: replicate coefficients (R rows, one column per term); a replicate
      whose resample was rank deficient is a row of NaN
    - bias: mean(t) - t0 over the defined replicates
    - se: sd(t) over the defined replicates
    """
    t0: NDArray[np.floating[Any]]              # shape (k,)
    t: NDArray[np.floating[Any]]               # shape (R, k)
    R: int
    bias: NDArray[np.floating[Any]]            # shape (k,)
    se: NDArray[np.floating[Any]]              # shape (k,)
    n_failed: int


@dataclass(frozen=True)
class ComparisonParams:
    """
    Parameter payload for a model comparison.

    - names: candidate names in the order given
    - means, stds: aggregate score per candidate
    - ranking: candidate names, best first
    """
    names: tuple[str, ...]
    means: NDArray[np.floating[Any]]
    stds: NDArray[np.floating[Any]]
    ranking: tuple[str, ...]
    higher_is_better: bool


def summarize_scores(scores: NDArray[np.floating[Any]]) -> tuple[float, float]:
    """
    Mean and sample standard deviation of the defined scores.

    NaN scores are left out; std is NaN below two defined scores and both
    are NaN when nothing is defined.
    """
    scores = scores[~np.isnan(scores)]
    if len(scores) == 0:
        return float('nan'), float('nan')
    mean = float(np.mean(scores))
    std = float(np.std(scores, ddof=1)) if len(scores) > 1 else float('nan')
    return mean, std
