"""
Random forest backend.

Delegates to scikit-learn's RandomForestRegressor with out-of-bag scoring
switched on, the analogue of caret's method="rf" / method="ranger".
"""

from __future__ import annotations

from typing import Any

import numpy as np
from sklearn.ensemble import RandomForestRegressor

from pyeconometrics.core.compute.timing import Timer
from pyeconometrics.core.defaults import DEFAULT_FOREST_TREES
from pyeconometrics.core.result import Result
from pyeconometrics.core.validation import check_int_at_least, check_min_samples
from pyeconometrics.regression.design import RegressionDesign
from pyeconometrics.regression.solution import ForestParams


class ForestBackend:
    """
    Random forest fitting strategy.

    Args:
        n_estimators: Number of trees
        max_features: Features considered per split (scikit-learn semantics;
            1.0 uses all, "sqrt" mimics randomForest's classification default)
        min_samples_leaf: Minimum rows per leaf
        seed: Seed for bootstrap draws and feature sampling
    """

    def __init__(
        self,
        *,
        n_estimators: int = DEFAULT_FOREST_TREES,
        max_features: float | int | str | None = 1.0,
        min_samples_leaf: int = 1,
        seed: int | None = None,
    ):
        self.n_estimators = check_int_at_least(n_estimators, 1, 'n_estimators')
        self.max_features = max_features
        self.min_samples_leaf = check_int_at_least(min_samples_leaf, 1, 'min_samples_leaf')
        self.seed = seed

    @property
    def name(self) -> str:
        return 'sklearn_forest'

    def solve(self, design: RegressionDesign) -> Result[ForestParams]:
        timer = Timer()
        timer.start()

        X, y = design.X, design.y
        check_min_samples(design.n, 2, 'X')
        estimator = RandomForestRegressor(
            n_estimators=self.n_estimators,
            max_features=self.max_features,
            min_samples_leaf=self.min_samples_leaf,
            bootstrap=True,
            oob_score=True,
            random_state=self.seed,
        )

        with timer.section('fit'):
            estimator.fit(X, y)

        with timer.section('residuals'):
            fitted_values = estimator.predict(X)
            residuals = y - fitted_values

        with timer.section('oob'):
            oob_prediction = np.asarray(estimator.oob_prediction_, dtype=np.float64)
            oob_mse = float(np.mean((y - oob_prediction) ** 2))
            oob_r2 = float(estimator.oob_score_)

        timer.stop()

        params = ForestParams(
            estimator=estimator,
            residuals=residuals,
            fitted_values=fitted_values,
            oob_prediction=oob_prediction,
            oob_mse=oob_mse,
            oob_r2=oob_r2,
            feature_importances=np.asarray(estimator.feature_importances_, dtype=np.float64),
        )

        info: dict[str, Any] = {
            'method': 'forest',
            'n_estimators': self.n_estimators,
            'max_features': self.max_features,
            'min_samples_leaf': self.min_samples_leaf,
            'seed': self.seed,
            'n': design.n,
            'p': design.p,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
