"""Tests for curve geometry and reference quantities.

Covers:
- Axis range padding and clamping
- Curve sampling through a fitting engine
- IC50 / Dmax derivation and absence propagation
"""

import math
from dataclasses import replace
from unittest.mock import MagicMock

import numpy as np
import pytest


# --- Tests for axis range ---

class TestAxisRange:
    """Tests for resolve_axis_range()."""

    def test_padding_one_decade(self, samples_a):
        """Test one decade of padding on each side."""
        from dose_response_viewer.plotting import resolve_axis_range

        x_min, x_max = resolve_axis_range(samples_a)

        assert x_min == pytest.approx(0.01)
        assert x_max == pytest.approx(1000.0)

    def test_clamped_to_bounds(self):
        """Test the 1e-6 / 1e6 clamps."""
        from dose_response_viewer.core import CleanedSample
        from dose_response_viewer.plotting import resolve_axis_range

        samples = [CleanedSample("A", 1e-6, 1.0), CleanedSample("A", 1e6, 0.1)]

        assert resolve_axis_range(samples) == (1e-6, 1e6)

    def test_non_positive_concentrations_excluded(self):
        """Test that non-positive values do not shape the range."""
        from dose_response_viewer.core import CleanedSample
        from dose_response_viewer.plotting import resolve_axis_range

        samples = [
            CleanedSample("A", -5.0, 1.0),
            CleanedSample("A", 1.0, 0.5),
            CleanedSample("A", 10.0, 0.2),
        ]

        assert resolve_axis_range(samples) == pytest.approx((0.1, 100.0))

    @pytest.mark.parametrize("concentrations", [[], [0.0], [-1.0, -2.0], [math.inf]])
    def test_unresolvable_range_raises(self, concentrations):
        """Test GeometryError when no positive finite concentration exists."""
        from dose_response_viewer.core import CleanedSample
        from dose_response_viewer.plotting import GeometryError, resolve_axis_range

        samples = [CleanedSample("A", c, 0.5) for c in concentrations]

        with pytest.raises(GeometryError):
            resolve_axis_range(samples)

    def test_geometry_error_is_value_error(self):
        """Test the error hierarchy."""
        from dose_response_viewer.plotting import CurveResolutionError, GeometryError

        assert issubclass(GeometryError, ValueError)
        assert issubclass(CurveResolutionError, ValueError)


# --- Tests for curve sampling ---

class TestResolveCurve:
    """Tests for resolve_curve()."""

    def test_curve_spans_axis_range(self, fitted_result, samples_a):
        """Test the default engine samples 200 points across the axis."""
        from dose_response_viewer.fitting import HillModelFitter
        from dose_response_viewer.plotting import resolve_curve

        curve = resolve_curve(HillModelFitter(), fitted_result, samples_a)

        assert len(curve.sample_points) == 200
        assert curve.x_axis_min == pytest.approx(0.01)
        assert curve.x_axis_max == pytest.approx(1000.0)
        assert curve.concentrations[0] == pytest.approx(0.01)
        assert curve.concentrations[-1] == pytest.approx(1000.0)

    def test_points_sorted_ascending(self, fitted_result, samples_a):
        """Test points are returned in ascending concentration."""
        from dose_response_viewer.fitting import FittingEngine
        from dose_response_viewer.plotting import resolve_curve

        engine = MagicMock(spec=FittingEngine)
        engine.predict_curve.return_value = (
            np.array([100.0, 10.0, 1.0]),
            np.array([0.1, 0.5, 0.9]),
        )

        curve = resolve_curve(engine, fitted_result, samples_a, n_points=3)

        assert curve.sample_points == ((1.0, 0.9), (10.0, 0.5), (100.0, 0.1))
        _, kwargs = engine.predict_curve.call_args
        assert kwargs["n_points"] == 3
        assert kwargs["concentration_range"] == pytest.approx((0.01, 1000.0))

    def test_engine_failure_wrapped(self, fitted_result, samples_a, failing_engine):
        """Test any engine failure becomes CurveResolutionError."""
        from dose_response_viewer.plotting import CurveResolutionError, resolve_curve

        with pytest.raises(CurveResolutionError, match="solver exploded"):
            resolve_curve(failing_engine, fitted_result, samples_a)

    def test_mismatched_lengths_rejected(self, fitted_result, samples_a):
        """Test predictions of the wrong length."""
        from dose_response_viewer.fitting import FittingEngine
        from dose_response_viewer.plotting import CurveResolutionError, resolve_curve

        engine = MagicMock(spec=FittingEngine)
        engine.predict_curve.return_value = (np.array([1.0, 2.0]), np.array([0.5]))

        with pytest.raises(CurveResolutionError):
            resolve_curve(engine, fitted_result, samples_a)


# --- Tests for reference quantities ---

class TestReferenceQuantities:
    """Tests for derive_reference_quantities() and observed_dmax()."""

    def test_quantities_from_parameters(self, fitted_result, samples_a):
        """Test bottom/top interpretation of [1.2, 0.1, 0.9, 5.0]."""
        from dose_response_viewer.plotting import derive_reference_quantities

        q = derive_reference_quantities(fitted_result, samples_a)

        assert q.ic50_concentration == 5.0
        assert q.ic50_response_level == pytest.approx(0.5)
        assert q.predicted_dmax == pytest.approx(0.1)
        assert q.observed_dmax == pytest.approx(0.2)

    @pytest.mark.parametrize("params, level, predicted", [
        ([1.0], 0.5, 0.0),
        ([1.0, 0.2], 0.6, 0.2),
        ([1.0, 0.2, 0.8], 0.5, 0.2),
    ])
    def test_short_parameter_vectors(self, fitted_result, samples_a, params, level, predicted):
        """Test defaults bottom=0.0 and top=1.0 for short vectors."""
        from dose_response_viewer.plotting import derive_reference_quantities

        q = derive_reference_quantities(replace(fitted_result, fitted_params=params), samples_a)

        assert q.ic50_response_level == pytest.approx(level)
        assert q.predicted_dmax == pytest.approx(predicted)

    def test_absent_without_fit(self, samples_a, failed_result):
        """Test every quantity is absent (not zero) without a fit."""
        from dose_response_viewer.core import ReferenceQuantities
        from dose_response_viewer.plotting import derive_reference_quantities

        assert derive_reference_quantities(None, samples_a) == ReferenceQuantities()
        assert derive_reference_quantities(failed_result, samples_a) == ReferenceQuantities()

    def test_non_finite_values_absent(self, fitted_result, samples_a):
        """Test NaN IC50 and bottom propagate as absence."""
        from dose_response_viewer.plotting import derive_reference_quantities

        result = replace(fitted_result, ic50=math.nan, fitted_params=[1.0, math.nan, 0.9, 5.0])
        q = derive_reference_quantities(result, samples_a)

        assert q.ic50_concentration is None
        assert q.ic50_response_level is None
        assert q.predicted_dmax is None
        assert q.observed_dmax == pytest.approx(0.2)
        assert not q.has_ic50

    def test_observed_dmax_averages_ties(self):
        """Test all samples at the maximum concentration are averaged."""
        from dose_response_viewer.core import CleanedSample
        from dose_response_viewer.plotting import observed_dmax

        samples = [
            CleanedSample("A", 1.0, 0.9),
            CleanedSample("A", 100.0, 0.2),
            CleanedSample("A", 100.0, 0.3),
        ]

        assert observed_dmax(samples) == pytest.approx(0.25)
        assert observed_dmax([]) is None
