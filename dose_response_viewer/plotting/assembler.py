"""Plot assembly: one complete, renderer-agnostic description per compound.

The assembler composes the geometry, reference annotations and style
resolution into an immutable PlotDescription. Each compound is assembled
independently; a missing or broken fit degrades that compound's plot to a
scatter of its samples and leaves every other compound untouched.

Example:
    >>> from dose_response_viewer.plotting import PlotAssembler
    >>> assembler = PlotAssembler(engine=fitter)
    >>> description = assembler.assemble(
    ...     "MP-1-008", samples, report.get("MP-1-008"), config, ambient_is_dark=False
    ... )
    >>> description.status, description.revision
    >>> figure = description.to_dict()  # {"data": [...], "layout": {...}}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence
import logging
import math

from ..configs import PlotConfig, StyleColors
from ..core import (
    CleanedSample,
    CompoundMetrics,
    FitReport,
    FittedModelResult,
    ReferenceQuantities,
)
from ..fitting import FittingEngine, HillModelFitter
from ..ingestion.cleaner import group_by_compound, samples_for_compound
from .annotations import (
    AnnotationDescriptor,
    ShapeDescriptor,
    build_annotations,
    build_shapes,
)
from .geometry import (
    DEFAULT_CURVE_POINTS,
    CurveResolutionError,
    GeometryError,
    _finite_or_none,
    derive_reference_quantities,
    resolve_axis_range,
    resolve_curve,
)
from .styles import (
    FONT_FAMILY,
    LegendDescriptor,
    axis_line_color,
    grid_color,
    is_effective_dark,
    line_dash,
    marker_symbol,
    resolve_colors,
    resolve_legend,
)

logger = logging.getLogger(__name__)


# X range used when the samples do not define one
DEFAULT_X_RANGE = (1e-3, 1e3)
# Responses are assumed normalized
Y_RANGE = (0.0, 1.1)

X_AXIS_TITLE = "Log Concentration"
Y_AXIS_TITLE = "Response"
MARGIN = {"l": 60, "r": 60, "t": 80, "b": 60}


class PlotStatus(Enum):
    """How much of a compound plot could be built."""
    UNFITTED = "unfitted"               # no fit: data points only
    FITTED = "fitted"                   # data, curve and reference lines
    FITTED_NO_CURVE = "fitted_no_curve" # fit metrics, but curve prediction failed
    NO_GEOMETRY = "no_geometry"         # no usable axis range: data points only


@dataclass(frozen=True)
class TraceDescriptor:
    """A data series: measured points ("markers") or fitted curve ("lines")."""
    name: str
    mode: str
    x: tuple[float, ...]
    y: tuple[float, ...]
    color: str
    size: float
    opacity: float
    symbol: str | None = None
    dash: str | None = None
    showlegend: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to a scatter-trace dictionary."""
        data = {
            "type": "scatter",
            "mode": self.mode,
            "name": self.name,
            "x": list(self.x),
            "y": list(self.y),
            "showlegend": self.showlegend,
        }
        if self.mode == "markers":
            data["marker"] = {
                "color": self.color,
                "size": self.size,
                "opacity": self.opacity,
                "symbol": self.symbol,
            }
        else:
            data["line"] = {
                "color": self.color,
                "width": self.size,
                "dash": self.dash,
            }
            data["opacity"] = self.opacity
        return data


@dataclass(frozen=True)
class AxisSpec:
    """One axis of the plot.

    For log axes ``range`` is expressed in log10 units.
    """
    title: str
    scale: str
    range: tuple[float, float]
    showgrid: bool
    gridcolor: str
    linecolor: str
    font_size: float

    @property
    def limits(self) -> tuple[float, float]:
        """Range in data units."""
        if self.scale == "log":
            return (10 ** self.range[0], 10 ** self.range[1])
        return self.range

    def to_dict(self) -> dict[str, Any]:
        """Convert to a layout-style axis dictionary."""
        return {
            "title": {"text": self.title, "font": {"size": self.font_size}},
            "type": self.scale,
            "range": list(self.range),
            "showgrid": self.showgrid,
            "gridcolor": self.gridcolor,
            "showline": True,
            "linecolor": self.linecolor,
            "linewidth": 1,
            "zeroline": False,
        }


@dataclass(frozen=True)
class StyleBlock:
    """Resolved colours, legend, fonts and figure size."""
    colors: StyleColors
    legend: LegendDescriptor
    is_dark: bool
    width: int
    height: int
    title_size: float
    text_size: float
    grid_style: str
    font_family: str = FONT_FAMILY
    margin: dict[str, int] = field(default_factory=lambda: dict(MARGIN))


@dataclass(frozen=True)
class PlotDescription:
    """Complete description of one compound's chart.

    Immutable; a new description is produced on every recomputation and
    ``revision`` increases with each one.
    """
    compound: str
    title: str
    status: PlotStatus
    traces: tuple[TraceDescriptor, ...]
    x_axis: AxisSpec
    y_axis: AxisSpec
    shapes: tuple[ShapeDescriptor, ...]
    annotations: tuple[AnnotationDescriptor, ...]
    style: StyleBlock
    metrics: CompoundMetrics | None
    quantities: ReferenceQuantities
    messages: tuple[str, ...] = ()
    revision: int = 0

    @property
    def has_curve(self) -> bool:
        return any(t.mode == "lines" for t in self.traces)

    def to_dict(self) -> dict[str, Any]:
        """Figure dictionary with ``data`` and ``layout`` entries."""
        colors = self.style.colors
        return {
            "data": [t.to_dict() for t in self.traces],
            "layout": {
                "title": {"text": self.title, "font": {"size": self.style.title_size}},
                "xaxis": self.x_axis.to_dict(),
                "yaxis": self.y_axis.to_dict(),
                "width": self.style.width,
                "height": self.style.height,
                "margin": dict(self.style.margin),
                "plot_bgcolor": colors.background,
                "paper_bgcolor": colors.paper_background,
                "font": {"color": colors.font_color, "family": self.style.font_family},
                "legend": self.style.legend.to_dict(),
                "shapes": [s.to_dict() for s in self.shapes],
                "annotations": [a.to_dict() for a in self.annotations],
            },
            "revision": self.revision,
        }


def compound_metrics(result: FittedModelResult) -> CompoundMetrics:
    """Metrics reported by a fit, with non-finite values as None."""
    return CompoundMetrics(
        model=result.model_name or "N/A",
        ic50=_finite_or_none(result.ic50),
        rmse=_finite_or_none(result.rmse),
        aic=_finite_or_none(result.aic),
    )


class PlotAssembler:
    """Builds PlotDescriptions and counts recomputations.

    Parameters
    ----------
    engine : FittingEngine, optional
        Engine used to predict fitted curves (HillModelFitter by default)
    n_points : int, default=200
        Number of points on each fitted curve
    """

    def __init__(self, engine: FittingEngine | None = None, n_points: int = DEFAULT_CURVE_POINTS):
        self.engine = engine if engine is not None else HillModelFitter()
        self.n_points = n_points
        self._revision = 0

    @property
    def revision(self) -> int:
        """Revision number of the most recent description."""
        return self._revision

    def assemble(
        self,
        compound: str,
        samples: Sequence[CleanedSample],
        fitted_result: FittedModelResult | None,
        config: PlotConfig,
        ambient_is_dark: bool = False,
    ) -> PlotDescription:
        """Assemble the plot description for one compound.

        Parameters
        ----------
        compound : str
            Compound to plot
        samples : sequence of CleanedSample
            Cleaned samples (other compounds are ignored)
        fitted_result : FittedModelResult or None
            Fit of the compound, if any
        config : PlotConfig
            Visual configuration
        ambient_is_dark : bool
            Whether the application theme is dark

        Returns
        -------
        PlotDescription
            New description with an incremented revision
        """
        self._revision += 1
        compound_samples = samples_for_compound(samples, compound)

        traces = [self._data_trace(compound, compound_samples, config)]
        shapes: list[ShapeDescriptor] = []
        annotations: list[AnnotationDescriptor] = []
        messages: list[str] = []
        metrics = None
        quantities = ReferenceQuantities()

        try:
            axis_range = resolve_axis_range(compound_samples)
            has_geometry = True
        except GeometryError as e:
            axis_range = DEFAULT_X_RANGE
            has_geometry = False
            messages.append(str(e))

        if fitted_result is not None and fitted_result.success:
            metrics = compound_metrics(fitted_result)
            quantities = derive_reference_quantities(fitted_result, compound_samples)
            if not has_geometry:
                status = PlotStatus.NO_GEOMETRY
            else:
                try:
                    curve = resolve_curve(
                        self.engine,
                        fitted_result,
                        compound_samples,
                        n_points=self.n_points,
                        axis_range=axis_range,
                    )
                except CurveResolutionError as e:
                    logger.warning(str(e))
                    messages.append(str(e))
                    status = PlotStatus.FITTED_NO_CURVE
                else:
                    traces.append(self._curve_trace(
                        compound, fitted_result.model_name, curve.concentrations,
                        curve.responses, config,
                    ))
                    shapes = build_shapes(quantities, axis_range, config)
                    annotations = build_annotations(quantities, axis_range, config)
                    status = PlotStatus.FITTED
        else:
            if fitted_result is not None:
                metrics = compound_metrics(fitted_result)
                messages.extend(fitted_result.errors)
            status = PlotStatus.UNFITTED if has_geometry else PlotStatus.NO_GEOMETRY

        dark = is_effective_dark(config.plot_style, ambient_is_dark)
        line_color = axis_line_color(config.plot_style, ambient_is_dark)
        gridcolor = grid_color(config.grid_alpha)

        return PlotDescription(
            compound=compound,
            title=f"Dose-Response Curve: {compound}",
            status=status,
            traces=tuple(traces),
            x_axis=AxisSpec(
                title=X_AXIS_TITLE,
                scale="log",
                range=(math.log10(axis_range[0]), math.log10(axis_range[1])),
                showgrid=config.grid_enabled,
                gridcolor=gridcolor,
                linecolor=line_color,
                font_size=config.text_size,
            ),
            y_axis=AxisSpec(
                title=Y_AXIS_TITLE,
                scale="linear",
                range=Y_RANGE,
                showgrid=config.grid_enabled,
                gridcolor=gridcolor,
                linecolor=line_color,
                font_size=config.text_size,
            ),
            shapes=tuple(shapes),
            annotations=tuple(annotations),
            style=StyleBlock(
                colors=resolve_colors(config.plot_style, ambient_is_dark),
                legend=resolve_legend(config.legend_position, config.plot_style, ambient_is_dark),
                is_dark=dark,
                width=config.plot_width,
                height=config.plot_height,
                title_size=config.title_size,
                text_size=config.text_size,
                grid_style=line_dash(config.grid_style),
            ),
            metrics=metrics,
            quantities=quantities,
            messages=tuple(messages),
            revision=self._revision,
        )

    def assemble_all(
        self,
        samples: Sequence[CleanedSample],
        report: FitReport | None,
        config: PlotConfig,
        ambient_is_dark: bool = False,
    ) -> dict[str, PlotDescription]:
        """Assemble every compound present in ``samples``.

        Compounds are evaluated independently; an unexpected error in one
        is logged and leaves the others intact.
        """
        descriptions = {}
        for compound in group_by_compound(samples):
            result = report.get(compound) if report is not None else None
            try:
                descriptions[compound] = self.assemble(
                    compound, samples, result, config, ambient_is_dark
                )
            except Exception as e:
                logger.error(f"Failed to assemble plot for {compound}: {e}")
        return descriptions

    def _data_trace(
        self,
        compound: str,
        samples: Sequence[CleanedSample],
        config: PlotConfig,
    ) -> TraceDescriptor:
        return TraceDescriptor(
            name=f"{compound} (data)",
            mode="markers",
            x=tuple(s.concentration for s in samples),
            y=tuple(s.response for s in samples),
            color=config.data_point_color,
            size=config.data_point_size,
            opacity=config.data_point_alpha,
            symbol=marker_symbol(config.point_marker_style),
        )

    def _curve_trace(
        self,
        compound: str,
        model_name: str,
        concentrations: Sequence[float],
        responses: Sequence[float],
        config: PlotConfig,
    ) -> TraceDescriptor:
        return TraceDescriptor(
            name=f"{compound} ({model_name or 'fitted'})",
            mode="lines",
            x=tuple(concentrations),
            y=tuple(responses),
            color=config.line_color,
            size=config.line_thickness,
            opacity=config.line_alpha,
            dash=line_dash(config.line_style),
        )
