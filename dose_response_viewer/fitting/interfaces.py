"""Abstract interface for dose-response fitting engines.

The plotting core only needs two things from a fitting engine: per-compound
fits of cleaned samples, and predictions along a concentration range.
Keeping this contract narrow lets the default scipy engine be swapped for
another regression backend.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from ..core import CleanedSample, FitReport, FittedModelResult


class FittingEngine(ABC):
    """Abstract interface for nonlinear dose-response fitting.
    
    Implementations must contain failures per compound: a compound that
    cannot be fitted is reported with ``success=False`` and never prevents
    other compounds from being fitted.
    """
    
    @abstractmethod
    def fit(self, samples: Sequence[CleanedSample]) -> FitReport:
        """Fit every compound present in ``samples``.
        
        Parameters
        ----------
        samples : sequence of CleanedSample
            Cleaned samples for one or more compounds
            
        Returns
        -------
        FitReport
            Best model per compound plus all candidate fits
        """
        pass
    
    @abstractmethod
    def predict_curve(
        self,
        result: FittedModelResult,
        n_points: int = 200,
        concentration_range: tuple[float, float] | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Evaluate a fitted model on a log-spaced concentration grid.
        
        Parameters
        ----------
        result : FittedModelResult
            A successful fit
        n_points : int, default=200
            Number of grid points
        concentration_range : tuple[float, float], optional
            (min, max) concentration; engine default when None
            
        Returns
        -------
        tuple[np.ndarray, np.ndarray]
            (concentrations ascending, predicted responses)
            
        Raises
        ------
        ValueError
            If the result cannot be evaluated
        """
        pass
