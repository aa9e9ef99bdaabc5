"""Dose-response fitting.

Provides:
- FittingEngine: Abstract interface consumed by the plotting core
- HillModelFitter: Default engine (scipy curve_fit, AIC model selection)
- Hill model registry

Example:
    >>> from dose_response_viewer.fitting import HillModelFitter
    >>> fitter = HillModelFitter()
    >>> report = fitter.fit(samples)
    >>> for compound, result in report.best.items():
    ...     print(compound, result.model_name, result.ic50)
"""

from .interfaces import FittingEngine
from .models import (
    PARAMETER_ORDER,
    HillModel,
    MODEL_REGISTRY,
    hill_curve,
    hill_curve_log10,
    get_model,
    list_models,
)
from .fitter import HillModelFitter

__all__ = [
    # Interface
    "FittingEngine",
    # Models
    "PARAMETER_ORDER",
    "HillModel",
    "MODEL_REGISTRY",
    "hill_curve",
    "hill_curve_log10",
    "get_model",
    "list_models",
    # Default engine
    "HillModelFitter",
]
