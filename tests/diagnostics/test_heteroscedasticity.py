"""
Tests for the auxiliary-regression heteroscedasticity test.
"""

import numpy as np
import pytest
from scipy import stats

from pyeconometrics.core.exceptions import InvalidParameterError
from pyeconometrics.core.table import Table
from pyeconometrics.diagnostics import HeteroscedasticitySolution, test_heteroscedasticity
from pyeconometrics.regression import fit


# ═══════════════════════════════════════════════════════════════════════
# Decisions
# ═══════════════════════════════════════════════════════════════════════


class TestDecision:

    def test_rejects_when_variance_grows(self, heteroscedastic_table):
        model = fit(heteroscedastic_table, "y ~ x")
        res = test_heteroscedasticity(model, heteroscedastic_table)
        assert isinstance(res, HeteroscedasticitySolution)
        assert res.reject is True
        assert res.p_value < 0.01

    def test_constant_variance(self, homoscedastic_table):
        model = fit(homoscedastic_table, "y ~ x")
        res = test_heteroscedasticity(model, homoscedastic_table)
        assert res.p_value > 0.001

    def test_fitted_regressors(self, heteroscedastic_table):
        model = fit(heteroscedastic_table, "y ~ x")
        res = test_heteroscedasticity(model, heteroscedastic_table, regressors='fitted')
        assert res.regressor_names == ('fitted', 'fitted^2')
        assert res.df == (2, heteroscedastic_table.n_rows - 3)
        assert res.reject is True

    def test_reject_follows_alpha(self, homoscedastic_table):
        model = fit(homoscedastic_table, "y ~ x")
        loose = test_heteroscedasticity(model, homoscedastic_table, alpha=0.999999)
        strict = test_heteroscedasticity(model, homoscedastic_table, alpha=1e-12)
        assert loose.reject is (loose.p_value < 0.999999)
        assert strict.reject is False


# ═══════════════════════════════════════════════════════════════════════
# Statistic
# ═══════════════════════════════════════════════════════════════════════


class TestStatistic:

    def test_matches_manual_auxiliary_regression(self, linear_table):
        model = fit(linear_table, "y ~ x1 + x2 + region")
        res = test_heteroscedasticity(model, linear_table)

        u2 = model.residuals ** 2
        Z = model.design_matrix(linear_table)  # intercept plus four predictors
        beta, *_ = np.linalg.lstsq(Z, u2, rcond=None)
        rss = np.sum((u2 - Z @ beta) ** 2)
        tss = np.sum((u2 - u2.mean()) ** 2)
        n, q = Z.shape[0], Z.shape[1] - 1
        f = ((tss - rss) / q) / (rss / (n - q - 1))

        assert res.f_statistic == pytest.approx(f, rel=1e-8)
        assert res.df == (q, n - q - 1)
        assert res.p_value == pytest.approx(stats.f.sf(f, q, n - q - 1), rel=1e-6)
        assert res.aux_r_squared == pytest.approx(1 - rss / tss, rel=1e-8)
        assert res.regressor_names == ("x1", "x2", "regionsouth", "regionwest")

    def test_no_auxiliary_regressors(self, rng):
        tbl = Table.from_columns(y=rng.standard_normal(15))
        res = test_heteroscedasticity(fit(tbl, "y ~ 1"), tbl)
        assert np.isnan(res.f_statistic)
        assert res.reject is False
        assert any("undefined" in w for w in res.warnings)
        assert "F = NA" in res.summary()


# ═══════════════════════════════════════════════════════════════════════
# Arguments
# ═══════════════════════════════════════════════════════════════════════


class TestArguments:

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1, 2])
    def test_alpha_outside_open_interval(self, homoscedastic_table, alpha):
        model = fit(homoscedastic_table, "y ~ x")
        with pytest.raises(InvalidParameterError) as exc_info:
            test_heteroscedasticity(model, homoscedastic_table, alpha=alpha)
        assert exc_info.value.parameter == 'alpha'

    def test_unknown_regressors(self, homoscedastic_table):
        model = fit(homoscedastic_table, "y ~ x")
        with pytest.raises(InvalidParameterError):
            test_heteroscedasticity(model, homoscedastic_table, regressors='squares')

    def test_forest_model_rejected(self, homoscedastic_table):
        model = fit(homoscedastic_table, "y ~ x", method='forest', seed=0, n_estimators=10)
        with pytest.raises(InvalidParameterError) as exc_info:
            test_heteroscedasticity(model, homoscedastic_table)
        assert exc_info.value.parameter == 'model'


def test_summary(heteroscedastic_table):
    res = test_heteroscedasticity(fit(heteroscedastic_table, "y ~ x"), heteroscedastic_table)
    text = res.summary()
    assert "Heteroscedasticity test" in text
    assert "reject constant variance" in text
    assert res.backend_name == 'cpu_qr'
