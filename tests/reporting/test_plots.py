"""
Smoke tests for residual and adjustment plots.
"""

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from pyeconometrics.diagnostics import deseasonalize  # noqa: E402
from pyeconometrics.regression import fit  # noqa: E402
from pyeconometrics.reporting.plots import (  # noqa: E402
    adjusted_series,
    comparison_boxplot,
    residual_histogram,
    residual_series,
    residuals_vs_fitted,
)
from pyeconometrics.resampling import RepeatedKFold, compare_models  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestResidualPlots:

    def test_histogram(self, linear_table):
        ax = residual_histogram(fit(linear_table, "y ~ x1"), bins=10)
        assert len(ax.patches) == 10
        assert ax.get_xlabel() == "Residual"

    def test_residuals_vs_fitted(self, heteroscedastic_table):
        ax = residuals_vs_fitted(fit(heteroscedastic_table, "y ~ x"))
        assert ax.get_title() == "Residuals vs Fitted"
        assert len(ax.collections) == 1

    def test_series_on_given_axes(self, linear_table):
        _, ax = plt.subplots()
        out = residual_series(fit(linear_table, "y ~ x1"), ax=ax)
        assert out is ax
        assert len(ax.lines[0].get_xdata()) == linear_table.n_rows

    def test_forest_residuals(self, linear_table):
        model = fit(linear_table, "y ~ x1", method='forest', seed=0, n_estimators=10)
        assert residual_histogram(model).get_ylabel() == "Frequency"


class TestAdjustmentAndComparisonPlots:

    def test_adjusted_series(self, quarterly_table):
        ax = adjusted_series(deseasonalize(quarterly_table, 'sales', ['d2', 'd3', 'd4']))
        labels = [line.get_label() for line in ax.lines]
        assert labels == ["original", "adjusted"]
        assert ax.get_ylabel() == 'sales'

    def test_comparison_boxplot(self, linear_table):
        res = compare_models(
            linear_table, {'small': "y ~ x1", 'big': "y ~ x1 + x2"},
            scheme=RepeatedKFold(3), metric='rmse', seed=0,
        )
        ax = comparison_boxplot(res)
        assert [t.get_text() for t in ax.get_xticklabels()] == list(res.ranking)
