"""
Report emitters: JSON-safe records, pandas tables and matplotlib plots.

Public API:
    to_record(result)  - JSON-safe dict (NaN/inf -> None)
    to_frame(result)   - pandas DataFrame
    plots              - residual and adjustment plots (needs matplotlib)
"""

from pyeconometrics.reporting.frames import to_frame
from pyeconometrics.reporting.records import json_safe, to_record

__all__ = ['to_record', 'to_frame', 'json_safe']
