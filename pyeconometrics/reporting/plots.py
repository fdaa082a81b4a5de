"""
Residual and adjustment plots.

matplotlib is an optional dependency (the ``plot`` extra); it is imported
when a plot is drawn. Every function draws on the given Axes, or on a new
figure when ax is None, and returns the Axes.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from matplotlib.axes import Axes

    from pyeconometrics.diagnostics.solution import AdjustmentSolution
    from pyeconometrics.regression.solution import FittedModel
    from pyeconometrics.resampling.solution import ComparisonSolution


def _pyplot() -> Any:
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install with: pip install pyeconometrics[plot]"
        )
    return plt


def _axes(ax: 'Axes | None') -> 'Axes':
    if ax is not None:
        return ax
    _, ax = _pyplot().subplots()
    return ax


def residual_histogram(model: 'FittedModel', *, bins: int = 30, ax: 'Axes | None' = None) -> 'Axes':
    """Histogram of a model's in-sample residuals."""
    ax = _axes(ax)
    residuals = model.residuals
    ax.hist(residuals, bins=bins, edgecolor="black", alpha=0.7)
    ax.axvline(0.0, color="r", linestyle="--")
    ax.set_xlabel("Residual")
    ax.set_ylabel("Frequency")
    ax.set_title(f"Residuals (n={len(residuals)})")
    return ax


def residuals_vs_fitted(model: 'FittedModel', *, ax: 'Axes | None' = None) -> 'Axes':
    """Residuals against fitted values; a funnel shape suggests heteroscedasticity."""
    ax = _axes(ax)
    ax.scatter(model.fitted_values, model.residuals, alpha=0.6, s=12)
    ax.axhline(0.0, color="r", linestyle="--", alpha=0.5)
    ax.set_xlabel("Fitted value")
    ax.set_ylabel("Residual")
    ax.set_title("Residuals vs Fitted")
    return ax


def residual_series(model: 'FittedModel', *, ax: 'Axes | None' = None) -> 'Axes':
    """Residuals in row order, for time-ordered data."""
    ax = _axes(ax)
    residuals = model.residuals
    ax.plot(np.arange(1, len(residuals) + 1), residuals, marker="o", markersize=3)
    ax.axhline(0.0, color="r", linestyle="--", alpha=0.5)
    ax.set_xlabel("Observation")
    ax.set_ylabel("Residual")
    ax.set_title("Residuals over time")
    return ax


def adjusted_series(adjustment: 'AdjustmentSolution', *, ax: 'Axes | None' = None) -> 'Axes':
    """Original and adjusted series on one set of axes."""
    ax = _axes(ax)
    t = np.arange(1, len(adjustment.original) + 1)
    ax.plot(t, adjustment.original, label="original")
    ax.plot(t, adjustment.adjusted, label="adjusted")
    ax.set_xlabel("Observation")
    ax.set_ylabel(adjustment.column)
    ax.set_title(f"{adjustment.column}: original vs adjusted")
    ax.legend()
    return ax


def comparison_boxplot(comparison: 'ComparisonSolution', *, ax: 'Axes | None' = None) -> 'Axes':
    """Distribution of resampled scores per candidate, best first."""
    ax = _axes(ax)
    names = list(comparison.ranking)
    ax.boxplot([comparison[name].scores for name in names])
    ax.set_xticks(range(1, len(names) + 1))
    ax.set_xticklabels(names)
    ax.set_ylabel(comparison.info.get('metric', 'score'))
    ax.set_title("Resampled scores by model")
    return ax
