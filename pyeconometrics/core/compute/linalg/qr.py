"""
QR decomposition and least squares solve.

Used by the OLS backend, the heteroscedasticity auxiliary regression and
the partialling-out helpers.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr as scipy_qr, solve_triangular

from pyeconometrics.core.defaults import RANK_TOLERANCE_FACTOR
from pyeconometrics.core.exceptions import RankDeficientError


@dataclass(frozen=True)
class QRResult:
    """
    Result of a reduced QR decomposition.
    
    Attributes:
        Q: Orthonormal columns (n x k, k = min(n, p))
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from the R diagonal
        aliased: Column indices whose R diagonal fell below tolerance
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    aliased: tuple[int, ...]


def qr_decompose(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Reduced QR decomposition X = QR with a numerical rank estimate.

    Without pivoting, a column that is a linear combination of earlier
    columns produces a (numerically) zero diagonal entry in R, so the
    aliased columns can be named directly.
    """
    n, p = X.shape
    Q, R = scipy_qr(X, mode='economic')

    diag_R = np.abs(np.diag(R))
    if diag_R.size == 0 or diag_R.max() == 0:
        return QRResult(Q=Q, R=R, rank=0, aliased=tuple(range(p)))

    tol = RANK_TOLERANCE_FACTOR * max(n, p) * np.finfo(X.dtype).eps * diag_R.max()
    full = np.zeros(p, dtype=bool)
    full[:diag_R.size] = diag_R > tol
    aliased = tuple(int(i) for i in np.flatnonzero(~full))

    return QRResult(Q=Q, R=R, rank=int(full.sum()), aliased=aliased)


def qr_solve(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    column_names: tuple[str, ...] = (),
) -> tuple[NDArray[np.floating[Any]], QRResult]:
    """
    Solve min_β ||y - Xβ||² via QR decomposition.

    The solution is computed as β = R⁻¹ Q'y.
    
    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)
        column_names: Design column names for the error message
        
    Returns:
        (β, QRResult)
        
    Raises:
        RankDeficientError: If X is not of full column rank
    """
    n, p = X.shape
    if n < p:
        raise RankDeficientError(
            f"Design matrix has fewer rows ({n}) than columns ({p}).",
            matrix_name='X', rank=n, expected_rank=p, columns=column_names,
        )

    qr_result = qr_decompose(X)
    if qr_result.rank < p:
        aliased = [
            column_names[i] if i < len(column_names) else str(i)
            for i in qr_result.aliased
        ]
        raise RankDeficientError(
            f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
            f"Perfect multicollinearity involving {aliased}.",
            matrix_name='X',
            rank=qr_result.rank,
            expected_rank=p,
            columns=column_names,
        )

    Qty = qr_result.Q.T @ y
    beta = solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)
    return beta, qr_result
