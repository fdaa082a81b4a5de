"""
Shared numeric infrastructure: timing and linear algebra kernels.

Domain backends live in {domain}/backends/; this package only holds the
pieces they share.
"""

from pyeconometrics.core.compute.timing import Timer

__all__ = [
    "Timer",
]
