"""HoloViews rendering of plot descriptions.

Turns a PlotDescription into a HoloViews overlay (bokeh backend) for
notebooks and the Panel application:

   >>> from dose_response_viewer.plotting import to_holoviews
   >>> plot = to_holoviews(description)
   >>> plot  # Display in notebook
"""

import pandas as pd
import holoviews as hv

from .assembler import PlotDescription, TraceDescriptor
from .annotations import AnnotationDescriptor, ShapeDescriptor

hv.extension("bokeh")


# Legend keyword -> HoloViews legend_position
HV_LEGEND_POSITIONS = {
    "upper right": "top_right",
    "upper left": "top_left",
    "lower right": "bottom_right",
    "lower left": "bottom_left",
    "upper center": "top",
    "lower center": "bottom",
    "center": "right",
}

# Marker keyword -> bokeh marker
HV_MARKERS = {
    "circle": "circle",
    "square": "square",
    "diamond": "diamond",
    "cross": "cross",
    "x": "x",
    "triangle-up": "triangle",
    "triangle-down": "inverted_triangle",
    "star": "star",
}

# Dash keyword -> bokeh line_dash
HV_DASHES = {
    "solid": "solid",
    "dash": "dashed",
    "dot": "dotted",
    "dashdot": "dashdot",
    "longdash": "dashed",
    "longdashdot": "dotdash",
}


def _trace_frame(trace: TraceDescriptor) -> pd.DataFrame:
    return pd.DataFrame({"concentration": trace.x, "response": trace.y})


def _trace_element(trace: TraceDescriptor):
    import hvplot.pandas  # noqa: F401

    df = _trace_frame(trace)
    if trace.mode == "markers":
        return df.hvplot.scatter(
            x="concentration",
            y="response",
            label=trace.name,
        ).opts(
            color=trace.color,
            size=trace.size,
            alpha=trace.opacity,
            marker=HV_MARKERS.get(trace.symbol, "circle"),
        )
    return df.hvplot.line(
        x="concentration",
        y="response",
        label=trace.name,
    ).opts(
        color=trace.color,
        line_width=trace.size,
        alpha=trace.opacity,
        line_dash=HV_DASHES.get(trace.dash, "solid"),
    )


def _shape_element(shape: ShapeDescriptor):
    opts_kwargs = {
        "color": shape.color,
        "line_width": shape.width,
        "line_dash": HV_DASHES.get(shape.dash, "dashed"),
    }
    if shape.x0 == shape.x1 and shape.yref == "paper":
        return hv.VLine(shape.x0).opts(**opts_kwargs)
    return hv.Segments(
        [(shape.x0, shape.y0, shape.x1, shape.y1)],
        kdims=["concentration", "response", "concentration_end", "response_end"],
    ).opts(**opts_kwargs)


def _annotation_element(annotation: AnnotationDescriptor, y_limits: tuple[float, float]):
    y = annotation.y
    if annotation.yref == "paper":
        y = y_limits[0] + annotation.y * (y_limits[1] - y_limits[0])
    return hv.Text(
        annotation.x,
        y,
        annotation.text,
        halign="left",
    ).opts(
        text_color=annotation.font_color,
        text_font_size=f"{annotation.font_size}pt",
        text_font_style="bold" if annotation.bold else "normal",
    )


def apply_figure_style(figure, description: PlotDescription) -> None:
    """Apply outer figure and legend colours to a bokeh figure."""
    colors = description.style.colors
    legend = description.style.legend

    figure.border_fill_color = colors.paper_background
    figure.title.text_color = colors.font_color
    for axis in figure.axis:
        axis.axis_label_text_color = colors.font_color
        axis.major_label_text_color = colors.font_color
        axis.axis_line_color = description.x_axis.linecolor
    for box in figure.legend:
        box.background_fill_color = legend.bgcolor
        box.border_line_color = legend.bordercolor
        box.label_text_color = legend.font_color


def to_holoviews(description: PlotDescription) -> hv.Overlay:
    """Render a PlotDescription as a HoloViews overlay.

    Parameters
    ----------
    description : PlotDescription
        Assembled description of one compound

    Returns
    -------
    hv.Overlay
        Data points, fitted curve, reference lines and labels on a
        log-scaled concentration axis
    """
    style = description.style
    x_limits = description.x_axis.limits
    y_limits = description.y_axis.limits

    elements = [_trace_element(t) for t in description.traces]
    elements.extend(_shape_element(s) for s in description.shapes)
    elements.extend(_annotation_element(a, y_limits) for a in description.annotations)

    overlay = hv.Overlay(elements)

    def _paper_hook(plot, element):
        # Outer figure and legend colours are not covered by the overlay options
        apply_figure_style(plot.state, description)

    return overlay.opts(
        hv.opts.Overlay(
            title=description.title,
            xlabel=description.x_axis.title,
            ylabel=description.y_axis.title,
            logx=True,
            xlim=x_limits,
            ylim=y_limits,
            width=style.width,
            height=style.height,
            show_grid=description.x_axis.showgrid,
            gridstyle={
                "grid_line_color": description.x_axis.gridcolor,
                "grid_line_dash": HV_DASHES.get(style.grid_style, "solid"),
            },
            bgcolor=style.colors.background,
            legend_position=HV_LEGEND_POSITIONS.get(style.legend.position, "top_right"),
            show_legend=True,
            fontsize={"title": style.title_size, "labels": style.text_size},
            tools=["hover", "pan", "wheel_zoom", "box_zoom", "reset", "save"],
            active_tools=["wheel_zoom"],
            hooks=[_paper_hook],
        )
    )
