"""
Tests for design-matrix construction and encoding replay.

Validates:
    - Dummy encoding (first sorted level is the reference)
    - Interaction columns, including categorical x numeric
    - Transforms and their data errors
    - Encoding replay on new tables, SchemaMismatchError on drift
"""

import numpy as np
import pytest

from pyeconometrics.core.exceptions import SchemaMismatchError, ValidationError
from pyeconometrics.core.table import Table
from pyeconometrics.regression.design import INTERCEPT, Encoding, RegressionDesign
from pyeconometrics.regression.formula import Formula, interact, log, poly, reciprocal, scale


# ═══════════════════════════════════════════════════════════════════════
# Column layout
# ═══════════════════════════════════════════════════════════════════════


class TestColumnLayout:

    def test_dummy_names(self, linear_table):
        design = RegressionDesign.build(linear_table, Formula.build("y", ["x1", "region"]))
        assert design.column_names == (INTERCEPT, "x1", "regionsouth", "regionwest")
        assert design.has_intercept

    def test_dummy_values(self):
        tbl = Table.from_columns(y=[1, 2, 3, 4], g=['b', 'a', 'c', 'b'])
        X = RegressionDesign.build(tbl, Formula.build("y", ["g"])).X
        np.testing.assert_array_equal(X, [
            [1, 1, 0],
            [1, 0, 0],
            [1, 0, 1],
            [1, 1, 0],
        ])

    def test_categorical_numeric_interaction(self, linear_table):
        f = Formula.build("y", ["x1", "region", interact("region", "x1")])
        design = RegressionDesign.build(linear_table, f)
        assert design.column_names[-2:] == ("regionsouth:x1", "regionwest:x1")
        south = (linear_table['region'] == 'south').astype(float)
        np.testing.assert_allclose(design.X[:, -2], south * linear_table['x1'])

    def test_numeric_interaction_is_product(self, linear_table):
        design = RegressionDesign.build(
            linear_table, Formula.build("y", [interact("x1", "x2")], intercept=False)
        )
        np.testing.assert_allclose(design.X[:, 0], linear_table['x1'] * linear_table['x2'])

    def test_intercept_override(self, linear_table):
        design = RegressionDesign.build(
            linear_table, Formula.build("y", ["x1"]), intercept=False
        )
        assert design.column_names == ("x1",)

    def test_from_arrays_default_names(self):
        design = RegressionDesign.from_arrays(np.ones((3, 2)), np.zeros(3))
        assert design.column_names == ("x0", "x1")
        assert design.encoding is None
        assert not design.has_intercept


# ═══════════════════════════════════════════════════════════════════════
# Transforms
# ═══════════════════════════════════════════════════════════════════════


class TestTransforms:

    def test_log_and_power(self, positive_table):
        design = RegressionDesign.build(
            positive_table, Formula.build(log("sales"), [log("income"), poly("price", 2)])
        )
        np.testing.assert_allclose(design.y, np.log(positive_table['sales']))
        np.testing.assert_allclose(design.X[:, 1], np.log(positive_table['income']))
        np.testing.assert_allclose(design.X[:, 2], positive_table['price'] ** 2)

    def test_reciprocal(self, positive_table):
        design = RegressionDesign.build(positive_table, Formula.build("sales", [reciprocal("price")]))
        np.testing.assert_allclose(design.X[:, 1], 1.0 / positive_table['price'])

    def test_scale_learned_on_training_table(self):
        train = Table.from_columns(y=[1, 2, 3], x=[1.0, 2.0, 3.0])
        encoding = Encoding.learn(train, Formula.build("y", [scale("x")]))
        assert encoding.scales["x"] == pytest.approx((2.0, 1.0))
        new = Table.from_columns(y=[0.0], x=[4.0])
        np.testing.assert_allclose(encoding.matrix(new), [[1.0, 2.0]])

    def test_log_non_positive(self):
        tbl = Table.from_columns(y=[1, 2, 3], x=[1.0, 0.0, -1.0])
        with pytest.raises(ValidationError, match="2 are <= 0"):
            RegressionDesign.build(tbl, Formula.build("y", [log("x")]))

    def test_reciprocal_of_zero(self):
        tbl = Table.from_columns(y=[1, 2, 3], x=[1.0, 0.0, 2.0])
        with pytest.raises(ValidationError, match="reciprocal undefined"):
            RegressionDesign.build(tbl, Formula.build("y", [reciprocal("x")]))

    def test_scale_constant_column(self):
        tbl = Table.from_columns(y=[1, 2, 3], x=[5.0, 5.0, 5.0])
        with pytest.raises(ValidationError, match="zero variance"):
            RegressionDesign.build(tbl, Formula.build("y", [scale("x")]))

    def test_transform_on_categorical(self, linear_table):
        with pytest.raises(ValidationError, match="numeric columns only"):
            RegressionDesign.build(linear_table, Formula.build("y", [log("region")]))


# ═══════════════════════════════════════════════════════════════════════
# Input errors
# ═══════════════════════════════════════════════════════════════════════


class TestInputErrors:

    def test_missing_column(self, linear_table):
        with pytest.raises(ValidationError, match="missing column"):
            RegressionDesign.build(linear_table, Formula.build("y", ["nope"]))

    def test_categorical_outcome(self, linear_table):
        with pytest.raises(ValidationError, match="categorical"):
            RegressionDesign.build(linear_table, Formula.build("region", ["x1"]))

    def test_missing_categorical_value(self):
        tbl = Table.from_columns(y=[1, 2, 3], g=['a', None, 'b'])
        with pytest.raises(ValidationError, match="missing categorical"):
            RegressionDesign.build(tbl, Formula.build("y", ["g"]))

    def test_nan_in_numeric(self):
        tbl = Table.from_columns(y=[1.0, 2.0, 3.0], x=[1.0, np.nan, 2.0])
        with pytest.raises(ValidationError, match="non-finite"):
            RegressionDesign.build(tbl, Formula.build("y", ["x"]))


# ═══════════════════════════════════════════════════════════════════════
# Replay on new tables
# ═══════════════════════════════════════════════════════════════════════


class TestSchemaReplay:

    def test_subset_of_levels_keeps_columns(self, linear_table):
        encoding = Encoding.learn(linear_table, Formula.build("y", ["region"]))
        only_north = Table.from_columns(y=[0.0], region=['north'])
        np.testing.assert_array_equal(encoding.matrix(only_north), [[1.0, 0.0, 0.0]])

    def test_unseen_level(self, linear_table):
        encoding = Encoding.learn(linear_table, Formula.build("y", ["x1", "region"]))
        new = Table.from_columns(y=[0.0], x1=[0.0], region=['east'])
        with pytest.raises(SchemaMismatchError) as exc_info:
            encoding.matrix(new)
        assert exc_info.value.unseen_levels == {'region': ('east',)}

    def test_missing_predictor(self, linear_table):
        encoding = Encoding.learn(linear_table, Formula.build("y", ["x1", "x2"]))
        with pytest.raises(SchemaMismatchError) as exc_info:
            encoding.matrix(linear_table.drop(["x2"]))
        assert exc_info.value.missing == ("x2",)

    def test_missing_outcome(self, linear_table):
        encoding = Encoding.learn(linear_table, Formula.build("y", ["x1"]))
        with pytest.raises(SchemaMismatchError):
            encoding.response(linear_table.drop(["y"]))

    def test_from_encoding_reuses_columns(self, linear_table):
        encoding = Encoding.learn(linear_table, Formula.build("y", ["x1", "region"]))
        design = RegressionDesign.from_encoding(encoding, linear_table.take(range(10)))
        assert design.column_names == encoding.column_names
        assert design.n == 10
