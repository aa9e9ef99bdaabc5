"""Core dataclasses for dose-response data.

These are the fundamental data structures passed between the ingestion,
fitting and plotting layers:
- ColumnMapping: Which raw columns hold compound, concentration and response
- CleanedSample: One validated (compound, concentration, response) observation
- FittedModelResult: Per-compound output of a fitting engine
- FitReport: Best fits per compound plus every candidate model fit
- ReferenceQuantities: IC50 / Dmax values derived from a fit
- CurveGeometry: Sampled fitted curve and its x-axis range
- CompoundMetrics: Model, IC50, RMSE and AIC shown next to a plot

Serializable classes support to_dict()/from_dict().
"""

from dataclasses import dataclass, field
from typing import Any
import math


# One row of the uploaded table: column name -> raw cell value
RawRow = dict[str, Any]


@dataclass(frozen=True)
class ColumnMapping:
    """Assignment of raw column names to the three semantic roles.
    
    Empty strings mean "undetected". A mapping is replaced as a whole,
    never patched field by field.
    
    Attributes
    ----------
    compound : str
        Column holding the compound identifier
    concentration : str
        Column holding the tested concentration
    response : str
        Column holding the measured response
    """
    compound: str = ""
    concentration: str = ""
    response: str = ""
    
    @property
    def is_resolved(self) -> bool:
        """Whether all three roles point at a column."""
        return bool(self.compound and self.concentration and self.response)
    
    def missing_columns(self, columns: list[str]) -> list[str]:
        """Configured column names that are not present in ``columns``."""
        available = set(columns)
        return [
            name for name in (self.compound, self.concentration, self.response)
            if name and name not in available
        ]
    
    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {
            "compound": self.compound,
            "concentration": self.concentration,
            "response": self.response,
        }
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnMapping":
        """Create from dictionary."""
        return cls(
            compound=data.get("compound", "") or "",
            concentration=data.get("concentration", "") or "",
            response=data.get("response", "") or "",
        )


@dataclass(frozen=True)
class CleanedSample:
    """A numeric, compound-tagged observation ready for fitting.
    
    Invariant: ``concentration > 0`` and both numbers are finite.
    """
    compound: str
    concentration: float
    response: float
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "compound": self.compound,
            "concentration": self.concentration,
            "response": self.response,
        }


@dataclass
class FittedModelResult:
    """Fit of one compound as reported by a fitting engine.
    
    Attributes
    ----------
    compound : str
        Compound the fit belongs to
    model_name : str
        Identifier of the fitted model ("none" when every model failed)
    fitted_params : list[float]
        Positional parameters ``[hillslope, bottom, top, ic50]``
    ic50 : float
        Fitted IC50 concentration (NaN when unavailable)
    rmse : float
        Root mean square error of the fit
    aic : float, optional
        Akaike information criterion
    r_squared : float, optional
        Coefficient of determination
    y_predicted : list[float], optional
        Predicted responses aligned index-for-index with the compound's samples
    success : bool
        Whether a model could be fitted
    errors : list[str]
        Failure messages collected while fitting
    """
    compound: str
    model_name: str
    fitted_params: list[float] = field(default_factory=list)
    ic50: float = math.nan
    rmse: float = math.nan
    aic: float | None = None
    r_squared: float | None = None
    y_predicted: list[float] | None = None
    success: bool = True
    errors: list[str] = field(default_factory=list)
    
    @property
    def n_params(self) -> int:
        """Number of positional parameters."""
        return len(self.fitted_params)
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "compound": self.compound,
            "model_name": self.model_name,
            "fitted_params": list(self.fitted_params),
            "ic50": self.ic50,
            "rmse": self.rmse,
            "aic": self.aic,
            "r_squared": self.r_squared,
            "y_predicted": list(self.y_predicted) if self.y_predicted is not None else None,
            "success": self.success,
            "errors": list(self.errors),
        }
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FittedModelResult":
        """Create from dictionary."""
        return cls(
            compound=data["compound"],
            model_name=data.get("model_name", "none"),
            fitted_params=list(data.get("fitted_params", [])),
            ic50=data.get("ic50", math.nan),
            rmse=data.get("rmse", math.nan),
            aic=data.get("aic"),
            r_squared=data.get("r_squared"),
            y_predicted=data.get("y_predicted"),
            success=data.get("success", True),
            errors=list(data.get("errors", [])),
        )


@dataclass
class FitReport:
    """Output of fitting a whole dataset.
    
    Attributes
    ----------
    best : dict[str, FittedModelResult]
        Best model per compound (failed compounds carry ``success=False``)
    summary : list[FittedModelResult]
        Every candidate model fit, for the summary table
    """
    best: dict[str, FittedModelResult] = field(default_factory=dict)
    summary: list[FittedModelResult] = field(default_factory=list)
    
    @property
    def compounds(self) -> list[str]:
        """Compounds present in the report."""
        return list(self.best.keys())
    
    @property
    def failed_compounds(self) -> list[str]:
        """Compounds for which no model could be fitted."""
        return [name for name, result in self.best.items() if not result.success]
    
    def get(self, compound: str) -> FittedModelResult | None:
        """Best result for ``compound`` or None."""
        return self.best.get(compound)


@dataclass(frozen=True)
class ReferenceQuantities:
    """Scalars used for IC50 / Dmax reference lines.
    
    ``None`` means absent; absence is never replaced by zero.
    """
    ic50_concentration: float | None = None
    ic50_response_level: float | None = None
    observed_dmax: float | None = None
    predicted_dmax: float | None = None
    
    @property
    def has_ic50(self) -> bool:
        return self.ic50_concentration is not None and self.ic50_response_level is not None
    
    def to_dict(self) -> dict[str, float | None]:
        """Convert to dictionary for serialization."""
        return {
            "ic50_concentration": self.ic50_concentration,
            "ic50_response_level": self.ic50_response_level,
            "observed_dmax": self.observed_dmax,
            "predicted_dmax": self.predicted_dmax,
        }


@dataclass(frozen=True)
class CurveGeometry:
    """Evenly sampled fitted curve in ascending concentration order."""
    sample_points: tuple[tuple[float, float], ...]
    x_axis_min: float
    x_axis_max: float
    
    @property
    def concentrations(self) -> list[float]:
        return [x for x, _ in self.sample_points]
    
    @property
    def responses(self) -> list[float]:
        return [y for _, y in self.sample_points]


@dataclass(frozen=True)
class CompoundMetrics:
    """Fit metrics displayed alongside a compound plot."""
    model: str
    ic50: float | None
    rmse: float | None
    aic: float | None
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "model": self.model,
            "ic50": self.ic50,
            "rmse": self.rmse,
            "aic": self.aic,
        }
