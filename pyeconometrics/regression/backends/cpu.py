"""
CPU reference backend for OLS.

Uses QR decomposition via LAPACK (through SciPy) to solve the least
squares problem; replicates R's lm() for full-rank designs.
"""

from typing import Any

import numpy as np

from pyeconometrics.core.compute.linalg.qr import qr_solve
from pyeconometrics.core.compute.timing import Timer
from pyeconometrics.core.result import Result
from pyeconometrics.regression.design import RegressionDesign
from pyeconometrics.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Implements the Backend protocol for RegressionDesign -> LinearParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. Compute QR decomposition: X = QR, checking column rank
            2. Solve: β = R⁻¹ Q'y
            3. Compute residuals, fitted values, and sums of squares

        Raises:
            RankDeficientError: If X is not of full column rank
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p

        with timer.section('solve'):
            coefficients, qr_result = qr_solve(X, y, column_names=design.column_names)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            if design.has_intercept:
                tss = float(np.sum((y - np.mean(y)) ** 2))
            else:
                tss = float(y @ y)

        timer.stop()

        df_residual = n - qr_result.rank
        warnings: list[str] = []
        if df_residual <= 0:
            warnings.append(
                f"standard errors undefined: {df_residual} residual degrees of freedom"
            )

        params = LinearParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            rank=qr_result.rank,
            df_residual=df_residual,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'n': n,
            'p': p,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings),
        )
