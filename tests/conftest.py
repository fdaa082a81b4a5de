"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from pyeconometrics.core.table import Table


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def identity_table():
    """y equals x exactly: slope 1, intercept 0, zero residuals."""
    x = np.arange(1.0, 11.0)
    return Table.from_columns(y=x.copy(), x=x)


@pytest.fixture
def linear_table(rng):
    """
    Two continuous regressors and a three-level categorical.

    y = 1 + 2*x1 - 0.5*x2 + 1.5*[region == south] - 1.0*[region == west] + e
    """
    n = 120
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    region = np.array(['north', 'south', 'west'])[np.arange(n) % 3]
    effect = np.select([region == 'south', region == 'west'], [1.5, -1.0], 0.0)
    y = 1.0 + 2.0 * x1 - 0.5 * x2 + effect + rng.standard_normal(n) * 0.3
    return Table.from_columns(y=y, x1=x1, x2=x2, region=region)


@pytest.fixture
def positive_table(rng):
    """Strictly positive columns for log and reciprocal transforms."""
    n = 80
    income = rng.uniform(10.0, 50.0, n)
    price = rng.uniform(1.0, 5.0, n)
    sales = np.exp(0.5 + 0.8 * np.log(income) - 0.3 * np.log(price) + rng.standard_normal(n) * 0.05)
    return Table.from_columns(sales=sales, income=income, price=price)


@pytest.fixture
def quarterly_table(rng):
    """Ten years of quarterly data with a seasonal pattern."""
    n = 40
    quarter = np.array(['Q1', 'Q2', 'Q3', 'Q4'])[np.arange(n) % 4]
    season = np.select([quarter == 'Q2', quarter == 'Q3', quarter == 'Q4'], [5.0, -3.0, 8.0], 0.0)
    sales = 100.0 + season + rng.standard_normal(n)
    dummies = {f"d{q}": (quarter == f"Q{q}").astype(float) for q in (2, 3, 4)}
    return Table.from_columns({'sales': sales, 'quarter': quarter, **dummies})


@pytest.fixture
def heteroscedastic_table(rng):
    """Error variance grows with x."""
    n = 200
    x = rng.uniform(1.0, 10.0, n)
    y = 2.0 + 3.0 * x + rng.standard_normal(n) * x
    return Table.from_columns(y=y, x=x)


@pytest.fixture
def homoscedastic_table(rng):
    """Constant error variance."""
    n = 200
    x = rng.uniform(1.0, 10.0, n)
    y = 2.0 + 3.0 * x + rng.standard_normal(n)
    return Table.from_columns(y=y, x=x)
