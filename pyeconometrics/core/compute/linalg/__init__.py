"""
Linear algebra kernels.

All functions use NumPy/SciPy (LAPACK under the hood), return structured
result dataclasses and raise immediately with clear messages.
"""

from pyeconometrics.core.compute.linalg.qr import (
    QRResult,
    qr_decompose,
    qr_solve,
)

__all__ = [
    "QRResult",
    "qr_decompose",
    "qr_solve",
]
