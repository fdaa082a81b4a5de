"""
Linear regression and its tree-ensemble alternative.

Public API:
    fit(table, formula, method='ols' | 'forest') -> LinearSolution | ForestSolution

Formulas are structured values built from combinators (col, log,
reciprocal, poly, scale, interact) or parsed from R-style text.

Example:
    >>> from pyeconometrics import Table
    >>> from pyeconometrics.regression import fit, Formula, log
    >>> tbl = Table.from_file("Table2_1.dta")
    >>> model = fit(tbl, Formula.build("lnoutput", ["lnlabor", "lncapital"]))
    >>> print(model.summary())
"""

from pyeconometrics.regression.design import INTERCEPT, Encoding, RegressionDesign
from pyeconometrics.regression.formula import (
    Formula,
    Interaction,
    Term,
    col,
    interact,
    log,
    poly,
    reciprocal,
    scale,
)
from pyeconometrics.regression.solution import (
    Coefficient,
    FittedModel,
    ForestParams,
    ForestSolution,
    LinearParams,
    LinearSolution,
)
from pyeconometrics.regression.solvers import fit

__all__ = [
    "fit",
    "Formula",
    "Term",
    "Interaction",
    "col",
    "log",
    "reciprocal",
    "poly",
    "scale",
    "interact",
    "RegressionDesign",
    "Encoding",
    "INTERCEPT",
    "FittedModel",
    "Coefficient",
    "LinearSolution",
    "LinearParams",
    "ForestSolution",
    "ForestParams",
]
