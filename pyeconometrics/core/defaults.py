"""
Numeric defaults shared across PyEconometrics.

Single source of truth for default thresholds. Import from here rather than
repeating literals in signatures.
"""

# Significance level for heteroscedasticity decisions
DEFAULT_ALPHA = 0.05

# Absolute pairwise correlation above which predictors count as collinear
DEFAULT_COLLINEARITY_THRESHOLD = 0.75

# Quantile bins used to stratify a continuous outcome in split()
DEFAULT_QUANTILE_BINS = 5

# Relative tolerance on |diag(R)| when deciding numerical rank
RANK_TOLERANCE_FACTOR = 1.0

# Random forest defaults (scikit-learn's, with OOB scoring switched on)
DEFAULT_FOREST_TREES = 500

__all__ = [
    'DEFAULT_ALPHA',
    'DEFAULT_COLLINEARITY_THRESHOLD',
    'DEFAULT_QUANTILE_BINS',
    'RANK_TOLERANCE_FACTOR',
    'DEFAULT_FOREST_TREES',
]
