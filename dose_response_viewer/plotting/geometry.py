"""Curve geometry and reference quantities for compound plots.

Turns a compound's cleaned samples and fit into numbers the plot needs:
the log-axis range, the sampled fitted curve and the IC50 / Dmax values.

Example:
    >>> x_min, x_max = resolve_axis_range(samples)
    >>> curve = resolve_curve(fitter, result, samples, n_points=200)
    >>> quantities = derive_reference_quantities(result, samples)
"""

from typing import TYPE_CHECKING, Sequence
import math

import numpy as np

from ..core import CleanedSample, CurveGeometry, FittedModelResult, ReferenceQuantities

if TYPE_CHECKING:
    from ..fitting import FittingEngine


# Log-axis bounds never extend beyond these values
AXIS_FLOOR = 1e-6
AXIS_CEILING = 1e6

# One decade of padding on each side of the observed concentrations
AXIS_PADDING_FACTOR = 10.0

DEFAULT_CURVE_POINTS = 200


class GeometryError(ValueError):
    """Axis bounds cannot be resolved from the samples."""


class CurveResolutionError(ValueError):
    """The fitting engine could not produce a curve."""


def resolve_axis_range(samples: Sequence[CleanedSample]) -> tuple[float, float]:
    """Resolve the x-axis range for a log-scaled plot.

    Only strictly positive concentrations are considered. The observed
    range is padded by one decade on each side and clamped to
    ``[1e-6, 1e6]``.

    Parameters
    ----------
    samples : sequence of CleanedSample
        Samples of one compound

    Returns
    -------
    tuple[float, float]
        (x_min, x_max) in concentration units

    Raises
    ------
    GeometryError
        If no finite positive concentration is available
    """
    positive = [
        s.concentration for s in samples
        if s.concentration > 0 and math.isfinite(s.concentration)
    ]
    if not positive:
        raise GeometryError("No positive finite concentrations to size the axis")

    raw_min = min(positive)
    raw_max = max(positive)

    x_min = max(raw_min / AXIS_PADDING_FACTOR, AXIS_FLOOR)
    x_max = min(raw_max * AXIS_PADDING_FACTOR, AXIS_CEILING)
    return x_min, x_max


def resolve_curve(
    engine: "FittingEngine",
    result: FittedModelResult,
    samples: Sequence[CleanedSample],
    n_points: int = DEFAULT_CURVE_POINTS,
    axis_range: tuple[float, float] | None = None,
) -> CurveGeometry:
    """Sample the fitted curve across the resolved axis range.

    Parameters
    ----------
    engine : FittingEngine
        Engine providing ``predict_curve``
    result : FittedModelResult
        Fit of the compound
    samples : sequence of CleanedSample
        Samples of the compound (used for the axis range)
    n_points : int, default=200
        Number of log-spaced curve points
    axis_range : tuple[float, float], optional
        Precomputed axis range (resolved from samples when None)

    Returns
    -------
    CurveGeometry
        Curve points in ascending concentration and the axis range

    Raises
    ------
    GeometryError
        If the axis range cannot be resolved
    CurveResolutionError
        If the engine fails to predict the curve
    """
    x_min, x_max = axis_range if axis_range is not None else resolve_axis_range(samples)

    try:
        concentrations, responses = engine.predict_curve(
            result,
            n_points=n_points,
            concentration_range=(x_min, x_max),
        )
    except Exception as e:
        raise CurveResolutionError(
            f"Curve prediction failed for {result.compound}: {e}"
        ) from e

    concentrations = np.asarray(concentrations, dtype=float)
    responses = np.asarray(responses, dtype=float)
    if concentrations.shape != responses.shape:
        raise CurveResolutionError(
            f"Curve prediction returned {concentrations.size} concentrations "
            f"and {responses.size} responses"
        )

    order = np.argsort(concentrations, kind="stable")
    points = tuple(
        (float(concentrations[i]), float(responses[i])) for i in order
    )
    return CurveGeometry(sample_points=points, x_axis_min=x_min, x_axis_max=x_max)


def _finite_or_none(value: float | None) -> float | None:
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def observed_dmax(samples: Sequence[CleanedSample]) -> float | None:
    """Mean response over every sample at the highest concentration."""
    if not samples:
        return None
    max_concentration = max(s.concentration for s in samples)
    at_max = [s.response for s in samples if s.concentration == max_concentration]
    if not at_max:
        return None
    return _finite_or_none(sum(at_max) / len(at_max))


def derive_reference_quantities(
    result: FittedModelResult | None,
    samples: Sequence[CleanedSample],
) -> ReferenceQuantities:
    """Derive IC50 and Dmax reference values from a fit.

    ``fitted_params`` is read as ``[hillslope, bottom, top, ic50]``:
    bottom defaults to 0.0 and top to 1.0 when the vector is too short.
    The IC50 response level is the midpoint of top and bottom, the
    predicted Dmax is bottom, and the observed Dmax is the mean response
    at the highest tested concentration.

    Parameters
    ----------
    result : FittedModelResult or None
        Fit of the compound
    samples : sequence of CleanedSample
        Samples of the compound

    Returns
    -------
    ReferenceQuantities
        All fields None when there is no successful fit; individual fields
        None when their arithmetic is not finite
    """
    if result is None or not result.success:
        return ReferenceQuantities()

    params = list(result.fitted_params)
    bottom = float(params[1]) if len(params) >= 2 else 0.0
    top = float(params[2]) if len(params) >= 3 else 1.0

    return ReferenceQuantities(
        ic50_concentration=_finite_or_none(result.ic50),
        ic50_response_level=_finite_or_none((top + bottom) / 2),
        observed_dmax=observed_dmax(samples),
        predicted_dmax=_finite_or_none(bottom),
    )
