"""
Tests for JSON-safe record export.
"""

import json

import numpy as np
import pytest

from pyeconometrics.core.table import Table
from pyeconometrics.diagnostics import deseasonalize, find_collinear, test_heteroscedasticity
from pyeconometrics.regression import fit
from pyeconometrics.reporting import json_safe, to_record
from pyeconometrics.resampling import (
    Bootstrap,
    RepeatedKFold,
    bootstrap_coefficients,
    compare_models,
    evaluate,
)


def dumps(record):
    return json.dumps(record, allow_nan=False)


class TestJsonSafe:

    def test_non_finite_to_none(self):
        assert json_safe([np.nan, np.inf, -np.inf, 1.5]) == [None, None, None, 1.5]

    def test_numpy_scalars(self):
        out = json_safe({'a': np.float64(2.0), 'b': np.int64(3), 'c': np.bool_(True)})
        assert out == {'a': 2.0, 'b': 3, 'c': True}
        assert type(out['b']) is int
        assert type(out['c']) is bool

    def test_nested_arrays_and_tuples(self):
        out = json_safe({'m': np.eye(2), 't': (1, np.nan)})
        assert out == {'m': [[1.0, 0.0], [0.0, 1.0]], 't': [1, None]}


class TestRegressionRecords:

    def test_linear(self, linear_table):
        record = to_record(fit(linear_table, "y ~ x1 + region"))
        dumps(record)
        assert record['type'] == 'ols'
        assert record['formula'] == "y ~ x1 + region"
        assert [c['term'] for c in record['coefficients']] == [
            "(Intercept)", "x1", "regionsouth", "regionwest",
        ]
        assert record['backend'] == 'cpu_qr'
        assert record['warnings'] == []

    def test_undefined_statistics_become_null(self):
        tbl = Table.from_columns(y=[1.0, 3.0], x=[0.0, 1.0])
        record = to_record(fit(tbl, "y ~ x"))
        dumps(record)
        assert record['coefficients'][1]['std_error'] is None
        assert record['f_statistic'] is None
        assert len(record['warnings']) == 1

    def test_forest(self, linear_table):
        record = to_record(fit(linear_table, "y ~ x1 + x2", method='forest', seed=1, n_estimators=20))
        dumps(record)
        assert record['type'] == 'forest'
        assert set(record['feature_importances']) == {'x1', 'x2'}


class TestResamplingRecords:

    def test_evaluation(self, linear_table):
        res = evaluate(linear_table, "y ~ x1", scheme=RepeatedKFold(4), metric='rmse', seed=3)
        record = to_record(res)
        dumps(record)
        assert record['type'] == 'evaluation'
        assert len(record['scores']) == 4
        assert record['seed'] == 3

    def test_loo_r2_scores_null(self, identity_table):
        res = evaluate(identity_table, "y ~ x", scheme=RepeatedKFold(10), metric='r2', seed=0)
        record = to_record(res)
        dumps(record)
        assert record['scores'] == [None] * 10
        assert record['mean'] is None

    def test_coefficient_bootstrap(self, linear_table):
        record = to_record(bootstrap_coefficients(linear_table, "y ~ x1", 20, 1))
        dumps(record)
        assert [t['term'] for t in record['terms']] == ["(Intercept)", "x1"]

    def test_comparison(self, linear_table):
        res = compare_models(
            linear_table, {'a': "y ~ x1", 'b': "y ~ x1 + x2"},
            scheme=Bootstrap(5), metric='mae', seed=2,
        )
        record = to_record(res)
        dumps(record)
        assert record['ranking'][0] == 'b'
        assert [c['name'] for c in record['candidates']] == ['a', 'b']


class TestDiagnosticRecords:

    def test_heteroscedasticity(self, heteroscedastic_table):
        model = fit(heteroscedastic_table, "y ~ x")
        record = to_record(test_heteroscedasticity(model, heteroscedastic_table))
        dumps(record)
        assert record['reject'] is True
        assert record['df_num'] == 1

    def test_collinearity(self):
        record = to_record(find_collinear(Table.from_columns(a=[1, 2, 3], b=[2, 4, 6])))
        dumps(record)
        assert record['flagged'] == ['a']
        assert np.allclose(record['correlation'], 1.0)

    def test_adjustment(self, quarterly_table):
        record = to_record(deseasonalize(quarterly_table, 'sales', ['d2', 'd3', 'd4']))
        dumps(record)
        assert record['kind'] == 'deseasonalization'
        assert len(record['adjusted']) == 40


def test_unknown_type():
    with pytest.raises(TypeError):
        to_record({'not': 'a result'})
