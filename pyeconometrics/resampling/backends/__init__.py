"""Resampling backends."""

from pyeconometrics.resampling.backends.cpu import (
    CPUCoefficientBootstrapBackend,
    CPUResamplingBackend,
)

__all__ = ['CPUResamplingBackend', 'CPUCoefficientBootstrapBackend']
