"""Plot description and rendering for dose-response curves.

Builds a complete, renderer-agnostic PlotDescription per compound and
renders it with HoloViews for notebooks and the Panel application.

Example - Single compound:
    >>> from dose_response_viewer.plotting import PlotAssembler, to_holoviews
    >>> assembler = PlotAssembler(engine=fitter)
    >>> description = assembler.assemble("MP-1-008", samples, result, config)
    >>> to_holoviews(description)  # Display in notebook

Example - Every compound of a fit report:
    >>> descriptions = assembler.assemble_all(samples, report, config)
    >>> figure = descriptions["MP-1-008"].to_dict()  # {"data": ..., "layout": ...}

Example - Geometry helpers:
    >>> from dose_response_viewer.plotting import resolve_axis_range
    >>> x_min, x_max = resolve_axis_range(samples)
"""

from .geometry import (
    # Errors
    GeometryError,
    CurveResolutionError,
    # Geometry
    AXIS_FLOOR,
    AXIS_CEILING,
    resolve_axis_range,
    resolve_curve,
    # Reference quantities
    observed_dmax,
    derive_reference_quantities,
)

from .annotations import (
    DMAX_DIFFERENCE_THRESHOLD,
    ShapeDescriptor,
    AnnotationDescriptor,
    show_predicted_dmax,
    build_shapes,
    build_annotations,
)

from .styles import (
    LegendDescriptor,
    LEGEND_POSITIONS,
    is_effective_dark,
    resolve_colors,
    resolve_legend,
)

from .assembler import (
    PlotStatus,
    TraceDescriptor,
    AxisSpec,
    StyleBlock,
    PlotDescription,
    PlotAssembler,
    compound_metrics,
)

from .render import to_holoviews

__all__ = [
    # Errors
    "GeometryError",
    "CurveResolutionError",
    # Geometry
    "AXIS_FLOOR",
    "AXIS_CEILING",
    "resolve_axis_range",
    "resolve_curve",
    # Reference quantities
    "observed_dmax",
    "derive_reference_quantities",
    # Annotations
    "DMAX_DIFFERENCE_THRESHOLD",
    "ShapeDescriptor",
    "AnnotationDescriptor",
    "show_predicted_dmax",
    "build_shapes",
    "build_annotations",
    # Styles
    "LegendDescriptor",
    "LEGEND_POSITIONS",
    "is_effective_dark",
    "resolve_colors",
    "resolve_legend",
    # Assembly
    "PlotStatus",
    "TraceDescriptor",
    "AxisSpec",
    "StyleBlock",
    "PlotDescription",
    "PlotAssembler",
    "compound_metrics",
    # Rendering
    "to_holoviews",
]
