"""
Regression backends.

Available backends:
    CPUQRBackend: OLS reference implementation using QR decomposition
    ForestBackend: Random forest via scikit-learn
"""

from pyeconometrics.regression.backends.cpu import CPUQRBackend
from pyeconometrics.regression.backends.forest import ForestBackend

__all__ = [
    "CPUQRBackend",
    "ForestBackend",
]
