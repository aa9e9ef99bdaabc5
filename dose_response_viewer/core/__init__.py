"""Core dataclasses for dose-response viewing.

Provides the fundamental data structures used throughout the package:
- ColumnMapping: Raw column -> semantic role assignment
- CleanedSample: A validated observation
- FittedModelResult / FitReport: Fitting engine output
- ReferenceQuantities / CurveGeometry / CompoundMetrics: Derived plot values

Example:
    >>> from dose_response_viewer.core import ColumnMapping, CleanedSample
    >>> 
    >>> mapping = ColumnMapping(compound="Compound", concentration="Conc", response="Rab10")
    >>> sample = CleanedSample("MP-1-008", 0.1, 0.95)
"""

from .dataclasses import (
    RawRow,
    ColumnMapping,
    CleanedSample,
    FittedModelResult,
    FitReport,
    ReferenceQuantities,
    CurveGeometry,
    CompoundMetrics,
)

__all__ = [
    "RawRow",
    "ColumnMapping",
    "CleanedSample",
    "FittedModelResult",
    "FitReport",
    "ReferenceQuantities",
    "CurveGeometry",
    "CompoundMetrics",
]
