"""Reference lines and labels for IC50 and Dmax.

Builds declarative shape and annotation descriptors in plot coordinates.
``xref``/``yref`` say whether a coordinate is in data units ("x", "y") or
a fraction of the plotting area ("paper").
"""

from dataclasses import dataclass
from typing import Any, Sequence

from ..configs import PlotConfig
from ..core import ReferenceQuantities


# Predicted Dmax is only drawn when it differs from observed by more than this
DMAX_DIFFERENCE_THRESHOLD = 0.02

# IC50 value label sits right of the vertical line by this factor
IC50_LABEL_OFFSET = 1.1
IC50_LABEL_PAPER_Y = 0.95
IC50_EXPLANATION = "50% of maximum inhibition"
IC50_EXPLANATION_OFFSET = 0.05

REFERENCE_LINE_WIDTH = 2
REFERENCE_LINE_DASH = "dash"


@dataclass(frozen=True)
class ShapeDescriptor:
    """A straight reference line.

    Attributes
    ----------
    role : str
        What the line marks ("ic50_vertical", "ic50_horizontal",
        "observed_dmax", "predicted_dmax")
    x0, y0, x1, y1 : float
        End points in the coordinate systems given by xref / yref
    xref, yref : str
        "x"/"y" for data coordinates, "paper" for plot-area fractions
    color : str
        Line colour
    width : float
        Line width
    dash : str
        Dash pattern
    """
    role: str
    x0: float
    y0: float
    x1: float
    y1: float
    xref: str
    yref: str
    color: str
    width: float = REFERENCE_LINE_WIDTH
    dash: str = REFERENCE_LINE_DASH

    def to_dict(self) -> dict[str, Any]:
        """Convert to a layout-style shape dictionary."""
        return {
            "type": "line",
            "name": self.role,
            "xref": self.xref,
            "yref": self.yref,
            "x0": self.x0,
            "y0": self.y0,
            "x1": self.x1,
            "y1": self.y1,
            "line": {"color": self.color, "width": self.width, "dash": self.dash},
        }


@dataclass(frozen=True)
class AnnotationDescriptor:
    """A text label positioned on the plot."""
    role: str
    text: str
    x: float
    y: float
    xref: str
    yref: str
    font_color: str
    font_size: float
    bold: bool = False
    bgcolor: str | None = None
    bordercolor: str | None = None
    borderwidth: float = 0
    borderpad: float = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a layout-style annotation dictionary."""
        data = {
            "name": self.role,
            "x": self.x,
            "y": self.y,
            "xref": self.xref,
            "yref": self.yref,
            "text": self.text,
            "showarrow": False,
            "font": {"color": self.font_color, "size": self.font_size},
            "borderwidth": self.borderwidth,
        }
        if self.bold:
            data["font"]["weight"] = "bold"
        if self.bgcolor is not None:
            data["bgcolor"] = self.bgcolor
        if self.bordercolor is not None:
            data["bordercolor"] = self.bordercolor
        if self.borderpad:
            data["borderpad"] = self.borderpad
        return data


def _ic50_drawable(quantities: ReferenceQuantities) -> bool:
    return quantities.has_ic50 and quantities.ic50_concentration > 0


def show_predicted_dmax(observed: float | None, predicted: float | None) -> bool:
    """Whether the predicted Dmax line adds information.

    Requires a difference strictly above the threshold and a predicted
    value at or below the observed one.
    """
    if observed is None or predicted is None:
        return False
    return abs(observed - predicted) > DMAX_DIFFERENCE_THRESHOLD and predicted <= observed


def _horizontal(role: str, y: float, axis_range: Sequence[float], color: str) -> ShapeDescriptor:
    x_min, x_max = axis_range
    return ShapeDescriptor(
        role=role, x0=x_min, y0=y, x1=x_max, y1=y,
        xref="x", yref="y", color=color,
    )


def build_shapes(
    quantities: ReferenceQuantities,
    axis_range: Sequence[float],
    config: PlotConfig,
) -> list[ShapeDescriptor]:
    """Build IC50 and Dmax reference lines.

    Parameters
    ----------
    quantities : ReferenceQuantities
        Derived IC50 / Dmax values
    axis_range : (float, float)
        Resolved x-axis range in concentration units
    config : PlotConfig
        Toggles and colours

    Returns
    -------
    list[ShapeDescriptor]
        IC50 vertical, IC50 horizontal, observed Dmax, predicted Dmax;
        each only when enabled and its values are present
    """
    shapes = []

    if config.show_ic50_lines and _ic50_drawable(quantities):
        ic50 = quantities.ic50_concentration
        shapes.append(ShapeDescriptor(
            role="ic50_vertical",
            x0=ic50, y0=0.0, x1=ic50, y1=1.0,
            xref="x", yref="paper",
            color=config.ic50_vertical_line_color,
        ))
        shapes.append(_horizontal(
            "ic50_horizontal",
            quantities.ic50_response_level,
            axis_range,
            config.ic50_horizontal_line_color,
        ))

    if config.show_dmax_lines and quantities.observed_dmax is not None:
        shapes.append(_horizontal(
            "observed_dmax",
            quantities.observed_dmax,
            axis_range,
            config.observed_dmax_color,
        ))
        if show_predicted_dmax(quantities.observed_dmax, quantities.predicted_dmax):
            shapes.append(_horizontal(
                "predicted_dmax",
                quantities.predicted_dmax,
                axis_range,
                config.predicted_dmax_color,
            ))

    return shapes


def build_annotations(
    quantities: ReferenceQuantities,
    axis_range: Sequence[float],
    config: PlotConfig,
) -> list[AnnotationDescriptor]:
    """Build the IC50 value label and the 50% explanation label.

    Returns an empty list unless IC50 lines are enabled and drawable.
    """
    if not (config.show_ic50_lines and _ic50_drawable(quantities)):
        return []

    ic50 = quantities.ic50_concentration
    level = quantities.ic50_response_level
    x_min = axis_range[0]

    return [
        AnnotationDescriptor(
            role="ic50_value",
            text=f"IC₅₀ = {ic50:.1f}",
            x=ic50 * IC50_LABEL_OFFSET,
            y=IC50_LABEL_PAPER_Y,
            xref="x",
            yref="paper",
            font_color=config.line_color,
            font_size=config.text_size,
            bold=True,
            bgcolor="rgba(255, 255, 255, 0.9)",
            bordercolor=config.line_color,
            borderwidth=1,
            borderpad=3,
        ),
        AnnotationDescriptor(
            role="ic50_explanation",
            text=IC50_EXPLANATION,
            x=x_min,
            y=level - IC50_EXPLANATION_OFFSET,
            xref="x",
            yref="y",
            font_color=config.ic50_horizontal_line_color,
            font_size=config.text_size - 3,
            bgcolor="rgba(255, 255, 255, 0.8)",
        ),
    ]
