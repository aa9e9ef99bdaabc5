"""HillModelFitter - default scipy-based fitting engine.

Example
-------
    from dose_response_viewer.fitting import HillModelFitter

    fitter = HillModelFitter(max_iterations=10000)
    report = fitter.fit(samples)

    best = report.best["MP-1-008"]
    print(best.model_name, best.ic50, best.rmse)

    conc, resp = fitter.predict_curve(best, n_points=200, concentration_range=(0.01, 1000))
"""

from dataclasses import dataclass, field
from typing import Sequence
import logging
import math
import warnings

import numpy as np
from scipy.optimize import OptimizeWarning, curve_fit

from ..core import CleanedSample, FitReport, FittedModelResult
from .interfaces import FittingEngine
from .models import HillModel, get_model, list_models

logger = logging.getLogger(__name__)


def _aic(ss_res: float, n: int, k: int) -> float:
    """Akaike information criterion for least squares fits."""
    ss_res = max(ss_res, np.finfo(float).tiny)
    return n * math.log(ss_res / n) + 2 * k


@dataclass
class HillModelFitter(FittingEngine):
    """Fits a family of Hill models per compound and keeps the lowest AIC.

    Attributes
    ----------
    max_iterations : int
        Maximum function evaluations per curve_fit call
    models : list[str]
        Candidate model names, in tie-breaking order
    hill_bounds : tuple[float, float]
        Allowed hill slope range
    """

    max_iterations: int = 10000
    models: list[str] = field(default_factory=list_models)
    hill_bounds: tuple[float, float] = (0.01, 20.0)

    def __post_init__(self):
        """Validate candidate models."""
        for name in self.models:
            get_model(name)
        if not self.models:
            raise ValueError("At least one candidate model is required")

    def fit(self, samples: Sequence[CleanedSample]) -> FitReport:
        """Fit every compound independently.

        Parameters
        ----------
        samples : sequence of CleanedSample
            Cleaned samples, any number of compounds

        Returns
        -------
        FitReport
            Best fit per compound and every successful candidate fit
        """
        groups: dict[str, list[CleanedSample]] = {}
        for sample in samples:
            groups.setdefault(sample.compound, []).append(sample)

        logger.info(f"Fitting {len(groups)} compound(s) with models {self.models}")

        report = FitReport()
        for compound, compound_samples in groups.items():
            try:
                best, candidates = self.fit_compound(compound, compound_samples)
            except Exception as e:
                logger.error(f"Unexpected fitting error for {compound}: {e}")
                best = FittedModelResult(
                    compound=compound,
                    model_name="none",
                    success=False,
                    errors=[f"Fitting failed: {e}"],
                )
                candidates = []

            if not best.success:
                logger.warning(f"No model could be fitted for {compound}: {best.errors}")

            report.best[compound] = best
            report.summary.extend(candidates)

        return report

    def fit_compound(
        self,
        compound: str,
        samples: Sequence[CleanedSample],
    ) -> tuple[FittedModelResult, list[FittedModelResult]]:
        """Fit all candidate models to one compound.

        Returns
        -------
        tuple[FittedModelResult, list[FittedModelResult]]
            (best result, all successful candidate results). When no model
            converges the best result has ``success=False``.
        """
        # Log-space fitting needs strictly positive concentrations
        usable = [s for s in samples if s.concentration > 0]
        x = np.array([s.concentration for s in usable], dtype=float)
        y = np.array([s.response for s in usable], dtype=float)

        candidates = []
        errors = []
        if len(usable) < len(samples):
            logger.debug(
                f"{compound}: ignoring {len(samples) - len(usable)} sample(s) "
                f"with non-positive concentration"
            )
        for name in self.models:
            model = get_model(name)
            if len(x) < model.n_free:
                errors.append(
                    f"{name}: needs at least {model.n_free} samples, got {len(x)}"
                )
                continue
            try:
                candidates.append(self._fit_model(compound, model, x, y))
            except (RuntimeError, ValueError, TypeError) as e:
                errors.append(f"{name}: {e}")

        if not candidates:
            failed = FittedModelResult(
                compound=compound,
                model_name="none",
                success=False,
                errors=errors or ["No samples to fit"],
            )
            return failed, []

        best = min(candidates, key=lambda r: r.aic)
        logger.info(
            f"{compound}: best model {best.model_name} "
            f"(IC50={best.ic50:.4g}, RMSE={best.rmse:.4g}, AIC={best.aic:.4g})"
        )
        return best, candidates

    def _fit_model(
        self,
        compound: str,
        model: HillModel,
        x: np.ndarray,
        y: np.ndarray,
    ) -> FittedModelResult:
        """Fit one model in log10 concentration space."""
        log_x = np.log10(x)
        y_min, y_max = float(np.min(y)), float(np.max(y))
        span = max(y_max - y_min, 1.0)

        initial = {
            "hillslope": 1.0,
            "bottom": y_min,
            "top": y_max,
            "ic50": float(np.median(log_x)),
        }
        bounds = {
            "hillslope": self.hill_bounds,
            "bottom": (y_min - span, y_max + span),
            "top": (y_min - span, y_max + span),
            "ic50": (float(np.min(log_x)) - 3.0, float(np.max(log_x)) + 3.0),
        }
        names = model.free_parameters
        p0 = [initial[p] for p in names]
        lower = [bounds[p][0] for p in names]
        upper = [bounds[p][1] for p in names]

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", OptimizeWarning)
            popt, _ = curve_fit(
                model.log_function(),
                log_x,
                y,
                p0=p0,
                bounds=(lower, upper),
                maxfev=self.max_iterations,
            )

        free = dict(zip(names, (float(v) for v in popt)))
        if "ic50" in free:
            free["ic50"] = 10 ** free["ic50"]
        params = model.expand(free)

        fitted = model.predict(params, x)
        ss_res = float(np.sum((y - fitted) ** 2))
        ss_tot = float(np.sum((y - np.mean(y)) ** 2))
        n = len(y)

        return FittedModelResult(
            compound=compound,
            model_name=model.name,
            fitted_params=params,
            ic50=params[3],
            rmse=math.sqrt(ss_res / n),
            aic=_aic(ss_res, n, model.n_free),
            r_squared=1 - ss_res / ss_tot if ss_tot > 0 else None,
            y_predicted=[float(v) for v in fitted],
            success=True,
        )

    def predict_curve(
        self,
        result: FittedModelResult,
        n_points: int = 200,
        concentration_range: tuple[float, float] | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Evaluate a fitted model on a log-spaced concentration grid.

        When ``concentration_range`` is None the grid spans three decades
        on either side of the fitted IC50.

        Raises
        ------
        ValueError
            If the fit failed, the model is unknown, the parameter vector is
            incomplete, or the range is not positive and finite
        """
        if not result.success:
            raise ValueError(f"Cannot predict from failed fit of {result.compound}")
        model = get_model(result.model_name)
        if result.n_params != 4:
            raise ValueError(
                f"Expected 4 parameters for {result.model_name}, got {result.n_params}"
            )
        if n_points < 2:
            raise ValueError("n_points must be >= 2")

        if concentration_range is None:
            ic50 = result.ic50
            if not (math.isfinite(ic50) and ic50 > 0):
                raise ValueError(f"No usable IC50 to centre the curve for {result.compound}")
            concentration_range = (ic50 / 1000.0, ic50 * 1000.0)

        low, high = concentration_range
        if not (math.isfinite(low) and math.isfinite(high) and 0 < low <= high):
            raise ValueError(f"Invalid concentration range: {concentration_range}")

        concentrations = np.logspace(math.log10(low), math.log10(high), n_points)
        responses = model.predict(result.fitted_params, concentrations)
        if not np.any(np.isfinite(responses)):
            raise ValueError(f"Model {result.model_name} produced no finite predictions")
        return concentrations, responses
