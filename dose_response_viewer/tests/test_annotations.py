"""Tests for IC50 / Dmax reference lines and labels."""

import pytest


@pytest.fixture
def quantities():
    """Quantities with every reference value present."""
    from dose_response_viewer.core import ReferenceQuantities

    return ReferenceQuantities(
        ic50_concentration=5.0,
        ic50_response_level=0.5,
        observed_dmax=0.25,
        predicted_dmax=0.1,
    )


AXIS_RANGE = (0.01, 1000.0)


class TestShapes:
    """Tests for build_shapes()."""

    def test_all_lines_in_order(self, quantities, default_config):
        """Test IC50 vertical, IC50 horizontal, observed and predicted Dmax."""
        from dose_response_viewer.plotting import build_shapes

        shapes = build_shapes(quantities, AXIS_RANGE, default_config)

        assert [s.role for s in shapes] == [
            "ic50_vertical",
            "ic50_horizontal",
            "observed_dmax",
            "predicted_dmax",
        ]

    def test_ic50_vertical_spans_plot_height(self, quantities, default_config):
        """Test the vertical line uses data x and paper y."""
        from dose_response_viewer.plotting import build_shapes

        vertical = build_shapes(quantities, AXIS_RANGE, default_config)[0]

        assert (vertical.x0, vertical.x1) == (5.0, 5.0)
        assert (vertical.y0, vertical.y1) == (0.0, 1.0)
        assert (vertical.xref, vertical.yref) == ("x", "paper")
        assert vertical.color == default_config.ic50_vertical_line_color

    def test_horizontal_lines_span_axis(self, quantities, default_config):
        """Test horizontal lines run across the x-axis range."""
        from dose_response_viewer.plotting import build_shapes

        shapes = build_shapes(quantities, AXIS_RANGE, default_config)[1:]

        for shape in shapes:
            assert (shape.x0, shape.x1) == AXIS_RANGE
            assert shape.y0 == shape.y1
            assert (shape.xref, shape.yref) == ("x", "y")
        assert [s.y0 for s in shapes] == [0.5, 0.25, 0.1]
        assert shapes[1].color == default_config.observed_dmax_color
        assert shapes[2].color == default_config.predicted_dmax_color

    def test_toggles_disable_lines(self, quantities, default_config):
        """Test show_ic50_lines and show_dmax_lines."""
        from dose_response_viewer.plotting import build_shapes

        no_ic50 = default_config.updated(show_ic50_lines=False)
        no_dmax = default_config.updated(show_dmax_lines=False)
        neither = default_config.updated(show_ic50_lines=False, show_dmax_lines=False)

        assert [s.role for s in build_shapes(quantities, AXIS_RANGE, no_ic50)] == [
            "observed_dmax", "predicted_dmax",
        ]
        assert [s.role for s in build_shapes(quantities, AXIS_RANGE, no_dmax)] == [
            "ic50_vertical", "ic50_horizontal",
        ]
        assert build_shapes(quantities, AXIS_RANGE, neither) == []

    def test_absent_ic50_skips_ic50_lines(self, quantities, default_config):
        """Test that missing IC50 values draw no IC50 lines."""
        from dataclasses import replace
        from dose_response_viewer.plotting import build_shapes

        shapes = build_shapes(replace(quantities, ic50_concentration=None), AXIS_RANGE, default_config)

        assert [s.role for s in shapes] == ["observed_dmax", "predicted_dmax"]

    def test_non_positive_ic50_skips_ic50_lines(self, quantities, default_config):
        """Test IC50 values that cannot sit on a log axis."""
        from dataclasses import replace
        from dose_response_viewer.plotting import build_shapes

        shapes = build_shapes(replace(quantities, ic50_concentration=0.0), AXIS_RANGE, default_config)

        assert "ic50_vertical" not in [s.role for s in shapes]

    def test_no_quantities_no_shapes(self, default_config):
        """Test empty quantities give no shapes."""
        from dose_response_viewer.core import ReferenceQuantities
        from dose_response_viewer.plotting import build_shapes

        assert build_shapes(ReferenceQuantities(), AXIS_RANGE, default_config) == []


class TestPredictedDmax:
    """Tests for the predicted Dmax visibility rule."""

    @pytest.mark.parametrize("observed, predicted, expected", [
        (0.25, 0.1, True),
        (0.12, 0.10, False),   # difference at the threshold
        (0.10, 0.11, False),   # too close
        (0.1, 0.3, False),     # predicted above observed
        (None, 0.1, False),
        (0.25, None, False),
    ])
    def test_show_predicted_dmax(self, observed, predicted, expected):
        """Test threshold and direction of the Dmax comparison."""
        from dose_response_viewer.plotting import show_predicted_dmax

        assert show_predicted_dmax(observed, predicted) is expected

    def test_predicted_line_hidden_near_observed(self, quantities, default_config):
        """Test the predicted line is dropped within the threshold."""
        from dataclasses import replace
        from dose_response_viewer.plotting import build_shapes

        close = replace(quantities, observed_dmax=0.11, predicted_dmax=0.1)
        roles = [s.role for s in build_shapes(close, AXIS_RANGE, default_config)]

        assert "observed_dmax" in roles
        assert "predicted_dmax" not in roles


class TestAnnotations:
    """Tests for build_annotations()."""

    def test_ic50_labels(self, quantities, default_config):
        """Test the value label and the explanation label."""
        from dose_response_viewer.plotting import build_annotations

        value, explanation = build_annotations(quantities, AXIS_RANGE, default_config)

        assert value.text == "IC₅₀ = 5.0"
        assert value.x == pytest.approx(5.5)
        assert (value.y, value.yref) == (0.95, "paper")
        assert value.font_size == default_config.text_size
        assert value.font_color == default_config.line_color

        assert explanation.text == "50% of maximum inhibition"
        assert explanation.x == AXIS_RANGE[0]
        assert explanation.y == pytest.approx(0.45)
        assert explanation.yref == "y"
        assert explanation.font_size == default_config.text_size - 3

    def test_no_labels_when_disabled(self, quantities, default_config):
        """Test labels follow the IC50 toggle."""
        from dose_response_viewer.plotting import build_annotations

        config = default_config.updated(show_ic50_lines=False)

        assert build_annotations(quantities, AXIS_RANGE, config) == []

    def test_no_labels_without_ic50(self, default_config):
        """Test labels require IC50 values."""
        from dose_response_viewer.core import ReferenceQuantities
        from dose_response_viewer.plotting import build_annotations

        assert build_annotations(ReferenceQuantities(), AXIS_RANGE, default_config) == []

    def test_to_dict(self, quantities, default_config):
        """Test layout dictionaries of shapes and labels."""
        from dose_response_viewer.plotting import build_annotations, build_shapes

        shape = build_shapes(quantities, AXIS_RANGE, default_config)[0].to_dict()
        label = build_annotations(quantities, AXIS_RANGE, default_config)[0].to_dict()

        assert shape["type"] == "line"
        assert shape["line"]["dash"] == "dash"
        assert label["showarrow"] is False
        assert label["font"]["weight"] == "bold"
