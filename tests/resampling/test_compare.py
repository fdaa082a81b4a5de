"""
Tests for compare_models(): several candidates scored on identical resamples.
"""

import numpy as np
import pytest

from pyeconometrics.core.exceptions import InvalidParameterError
from pyeconometrics.regression import Formula
from pyeconometrics.resampling import Bootstrap, RepeatedKFold, compare_models, evaluate


@pytest.fixture
def candidates():
    return {
        'full': "y ~ x1 + x2 + region",
        'x1 only': Formula.build("y", ["x1"]),
        'forest': ("y ~ x1 + x2 + region", 'forest', {'n_estimators': 30}),
    }


class TestRanking:

    def test_error_metric_ranks_ascending(self, linear_table, candidates):
        res = compare_models(
            linear_table, candidates,
            scheme=RepeatedKFold(5), metric='rmse', seed=42,
        )
        assert res.best == 'full'
        means = res.means
        assert means['full'] < means['forest']
        assert means['full'] < means['x1 only']
        assert res.higher_is_better is False

    def test_r2_ranks_descending(self, linear_table, candidates):
        res = compare_models(
            linear_table, candidates,
            scheme=RepeatedKFold(5), metric='r2', seed=42,
        )
        assert res.higher_is_better is True
        assert res.best == 'full'
        ordered = [res.means[name] for name in res.ranking]
        assert ordered == sorted(ordered, reverse=True)

    def test_names_keep_input_order(self, linear_table, candidates):
        res = compare_models(
            linear_table, candidates,
            scheme=Bootstrap(10), metric='mae', seed=1,
        )
        assert res.names == ('full', 'x1 only', 'forest')


class TestSharedResamples:

    def test_candidates_see_identical_folds(self, linear_table, candidates):
        scheme = RepeatedKFold(4, 2)
        res = compare_models(linear_table, candidates, scheme=scheme, metric='rmse', seed=9)
        alone = evaluate(linear_table, "y ~ x1", scheme=scheme, metric='rmse', seed=9)
        np.testing.assert_array_equal(res['x1 only'].scores, alone.scores)
        for name in res.names:
            np.testing.assert_array_equal(res[name].task_indices, np.arange(8))

    def test_reproducible(self, linear_table, candidates):
        kwargs = dict(scheme=RepeatedKFold(3), metric='rmse', seed=5)
        a = compare_models(linear_table, candidates, **kwargs)
        b = compare_models(linear_table, candidates, **kwargs)
        assert a.ranking == b.ranking
        for name in a.names:
            np.testing.assert_array_equal(a[name].scores, b[name].scores)


class TestArguments:

    def test_empty_candidates(self, linear_table):
        with pytest.raises(InvalidParameterError, match="at least one candidate"):
            compare_models(linear_table, {}, scheme=RepeatedKFold(5), metric='rmse', seed=1)

    def test_malformed_candidate(self, linear_table):
        with pytest.raises(InvalidParameterError, match="candidate 'bad'"):
            compare_models(
                linear_table, {'bad': ["y ~ x1"]},
                scheme=RepeatedKFold(5), metric='rmse', seed=1,
            )

    def test_seed_in_fit_options(self, linear_table):
        with pytest.raises(InvalidParameterError) as exc_info:
            compare_models(
                linear_table, {'rf': ("y ~ x1", 'forest', {'seed': 3})},
                scheme=RepeatedKFold(5), metric='rmse', seed=1,
            )
        assert exc_info.value.parameter == 'seed'

    def test_metric_required(self, linear_table, candidates):
        with pytest.raises(InvalidParameterError):
            compare_models(linear_table, candidates, scheme=RepeatedKFold(5), metric=None, seed=1)


def test_summary(linear_table, candidates):
    res = compare_models(linear_table, candidates, scheme=RepeatedKFold(5), metric='rmse', seed=2)
    text = res.summary()
    assert "Model Comparison" in text
    assert "lower is better" in text
    assert text.index('full') < text.index('x1 only')
    assert repr(res) == "ComparisonSolution(candidates=3, best='full')"
    assert set(res.evaluations) == {'full', 'x1 only', 'forest'}
