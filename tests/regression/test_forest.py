"""
Tests for the random forest fitting strategy.
"""

import numpy as np
import pytest

from pyeconometrics.core.exceptions import (
    InvalidParameterError,
    SchemaMismatchError,
    ValidationError,
)
from pyeconometrics.core.table import Table
from pyeconometrics.regression import FittedModel, ForestSolution, fit

N_TREES = 50


@pytest.fixture
def forest(linear_table):
    return fit(linear_table, "y ~ x1 + x2 + region", method='forest', seed=7, n_estimators=N_TREES)


class TestForestFit:

    def test_solution_type(self, forest):
        assert isinstance(forest, ForestSolution)
        assert isinstance(forest, FittedModel)
        assert forest.method == 'forest'
        assert forest.backend_name == 'sklearn_forest'

    def test_no_intercept_column(self, forest):
        assert forest.column_names == ("x1", "x2", "regionsouth", "regionwest")

    def test_predict_plus_residuals_is_outcome(self, forest, linear_table):
        np.testing.assert_allclose(
            forest.predict(linear_table) + forest.residuals, linear_table['y'], atol=1e-10
        )

    def test_importances(self, forest):
        imp = forest.feature_importances
        assert set(imp) == set(forest.column_names)
        assert sum(imp.values()) == pytest.approx(1.0)
        assert max(imp, key=imp.get) == "x1"

    def test_oob_estimates(self, forest, linear_table):
        assert forest.oob_prediction.shape == (linear_table.n_rows,)
        assert forest.oob_rmse == pytest.approx(np.sqrt(forest.oob_mse))
        assert 0.0 < forest.oob_r2 <= 1.0

    def test_info(self, forest):
        assert forest.info['n_estimators'] == N_TREES
        assert forest.info['seed'] == 7


class TestForestReproducibility:

    def test_same_seed_same_predictions(self, linear_table):
        a = fit(linear_table, "y ~ x1 + x2", method='forest', seed=3, n_estimators=N_TREES)
        b = fit(linear_table, "y ~ x1 + x2", method='forest', seed=3, n_estimators=N_TREES)
        np.testing.assert_array_equal(a.predict(linear_table), b.predict(linear_table))

    def test_different_seed_differs(self, linear_table):
        a = fit(linear_table, "y ~ x1 + x2", method='forest', seed=3, n_estimators=N_TREES)
        b = fit(linear_table, "y ~ x1 + x2", method='forest', seed=4, n_estimators=N_TREES)
        assert not np.array_equal(a.fitted_values, b.fitted_values)


class TestForestFailures:

    def test_needs_a_predictor(self, linear_table):
        with pytest.raises(InvalidParameterError, match="at least one predictor"):
            fit(linear_table, "y ~ 1", method='forest', seed=1)

    def test_unseen_level(self, forest):
        new = Table.from_columns(x1=[0.0], x2=[0.0], region=['east'])
        with pytest.raises(SchemaMismatchError):
            forest.predict(new)

    def test_invalid_tree_count(self, linear_table):
        with pytest.raises(InvalidParameterError):
            fit(linear_table, "y ~ x1", method='forest', seed=1, n_estimators=0)

    def test_invalid_seed(self, linear_table):
        with pytest.raises(ValidationError):
            fit(linear_table, "y ~ x1", method='forest', seed=-1)


def test_summary(forest):
    text = forest.summary()
    assert "Random Forest Regression Results" in text
    assert "Trees: 50" in text
    assert "OOB R-squared" in text
    assert repr(forest).startswith("ForestSolution(n=120, p=4")
