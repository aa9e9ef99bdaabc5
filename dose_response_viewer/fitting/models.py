"""Hill-type dose-response models.

Every model reports its parameters as the positional vector
``[hillslope, bottom, top, ic50]``; parameters a model keeps fixed are
filled in with their fixed value so consumers can read the vector the
same way regardless of model.

    y = bottom + (top - bottom) / (1 + (x / ic50) ** hillslope)

With a positive hill slope the response falls from ``top`` at low
concentration to ``bottom`` at high concentration.
"""

from dataclasses import dataclass, field
from typing import Callable

import numpy as np


PARAMETER_ORDER = ("hillslope", "bottom", "top", "ic50")


def hill_curve(
    concentration: np.ndarray,
    hillslope: float,
    bottom: float,
    top: float,
    ic50: float,
) -> np.ndarray:
    """Four-parameter Hill equation on linear concentration."""
    x = np.asarray(concentration, dtype=float)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return bottom + (top - bottom) / (1.0 + np.power(x / ic50, hillslope))


def hill_curve_log10(
    log_concentration: np.ndarray,
    hillslope: float,
    bottom: float,
    top: float,
    log_ic50: float,
) -> np.ndarray:
    """Hill equation parameterized on log10 concentration and log10 IC50."""
    with np.errstate(over="ignore", invalid="ignore"):
        exponent = hillslope * (np.asarray(log_concentration, dtype=float) - log_ic50)
        return bottom + (top - bottom) / (1.0 + np.power(10.0, exponent))


@dataclass(frozen=True)
class HillModel:
    """A Hill model variant with some parameters held fixed.
    
    Attributes
    ----------
    name : str
        Model identifier reported in results
    description : str
        Human-readable description
    fixed : dict[str, float]
        Parameters held constant (subset of "bottom", "top")
    """
    name: str
    description: str
    fixed: dict[str, float] = field(default_factory=dict)
    
    @property
    def free_parameters(self) -> list[str]:
        """Fitted parameters, in positional order (ic50 fitted as log10)."""
        return [p for p in PARAMETER_ORDER if p not in self.fixed]
    
    @property
    def n_free(self) -> int:
        return len(self.free_parameters)
    
    def expand(self, free_values: dict[str, float]) -> list[float]:
        """Full ``[hillslope, bottom, top, ic50]`` vector."""
        values = {**self.fixed, **free_values}
        return [float(values[p]) for p in PARAMETER_ORDER]
    
    def log_function(self) -> Callable[..., np.ndarray]:
        """Callable ``f(log_x, *free)`` for curve_fit, with log10 IC50."""
        names = self.free_parameters
        fixed = self.fixed
        
        def f(log_x, *free):
            values = {**fixed, **dict(zip(names, free))}
            return hill_curve_log10(
                log_x,
                values["hillslope"],
                values["bottom"],
                values["top"],
                values["ic50"],
            )
        
        return f
    
    def predict(self, params: list[float], concentration: np.ndarray) -> np.ndarray:
        """Evaluate the model from a positional parameter vector."""
        hillslope, bottom, top, ic50 = params
        return hill_curve(concentration, hillslope, bottom, top, ic50)


MODEL_REGISTRY: dict[str, HillModel] = {
    "Hill_4P": HillModel(
        name="Hill_4P",
        description="Four-parameter logistic (free bottom and top)",
    ),
    "Hill_3P_Bottom0": HillModel(
        name="Hill_3P_Bottom0",
        description="Three-parameter logistic with bottom fixed at 0",
        fixed={"bottom": 0.0},
    ),
    "Hill_3P_Top1": HillModel(
        name="Hill_3P_Top1",
        description="Three-parameter logistic with top fixed at 1",
        fixed={"top": 1.0},
    ),
    "Hill_2P": HillModel(
        name="Hill_2P",
        description="Two-parameter logistic (bottom 0, top 1)",
        fixed={"bottom": 0.0, "top": 1.0},
    ),
}


def get_model(name: str) -> HillModel:
    """Get a model by name.
    
    Raises
    ------
    ValueError
        If the model is not registered
    """
    if name not in MODEL_REGISTRY:
        raise ValueError(f"Unknown model: {name}. Available: {list_models()}")
    return MODEL_REGISTRY[name]


def list_models() -> list[str]:
    """List registered model names."""
    return list(MODEL_REGISTRY.keys())
