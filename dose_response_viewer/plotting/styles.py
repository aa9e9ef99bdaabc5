"""Style resolution for compound plots.

Maps the named plot style and the application's light/dark theme to
concrete colours, and legend position keywords to anchor coordinates.
Every lookup has an explicit default: unknown styles resolve as
"classic", unknown legend positions as "upper right".
"""

from dataclasses import dataclass
from typing import Any

from ..configs import StyleColors, get_plot_style, list_plot_styles


DEFAULT_STYLE = "classic"
DARK_STYLE = "dark_background"
DEFAULT_LEGEND_POSITION = "upper right"
DEFAULT_MARKER = "circle"
DEFAULT_DASH = "solid"

FONT_FAMILY = "Roboto, sans-serif"


@dataclass(frozen=True)
class LegendDescriptor:
    """Legend placement and colours.

    Coordinates are fractions of the plotting area; anchors name which
    side of the legend box sits on (x, y).
    """
    orientation: str
    x: float
    y: float
    xanchor: str
    yanchor: str
    bgcolor: str
    bordercolor: str
    borderwidth: int = 1
    font_size: int = 12
    font_color: str = "#333333"
    position: str = DEFAULT_LEGEND_POSITION

    def to_dict(self) -> dict[str, Any]:
        """Convert to a layout-style dictionary."""
        return {
            "orientation": self.orientation,
            "x": self.x,
            "y": self.y,
            "xanchor": self.xanchor,
            "yanchor": self.yanchor,
            "bgcolor": self.bgcolor,
            "bordercolor": self.bordercolor,
            "borderwidth": self.borderwidth,
            "font": {"size": self.font_size, "color": self.font_color},
        }


# keyword -> (orientation, x, y, xanchor, yanchor)
LEGEND_POSITIONS: dict[str, tuple[str, float, float, str, str]] = {
    "upper right": ("v", 1.0, 1.0, "right", "top"),
    "upper left": ("v", 0.0, 1.0, "left", "top"),
    "lower right": ("v", 1.0, 0.0, "right", "bottom"),
    "lower left": ("v", 0.0, 0.0, "left", "bottom"),
    "upper center": ("h", 0.5, 1.02, "center", "bottom"),
    "lower center": ("h", 0.5, -0.1, "center", "top"),
    "center": ("v", 0.5, 0.5, "center", "middle"),
}

MARKER_SYMBOLS = {
    "circle": "circle",
    "square": "square",
    "diamond": "diamond",
    "cross": "cross",
    "x": "x",
    "triangle-up": "triangle-up",
    "triangle-down": "triangle-down",
    "star": "star",
}

LINE_DASHES = {
    "solid": "solid",
    "dash": "dash",
    "dot": "dot",
    "dashdot": "dashdot",
    "longdash": "longdash",
    "longdashdot": "longdashdot",
}


def known_style(plot_style: str) -> str:
    """``plot_style`` if it is defined, else the default style."""
    if plot_style in list_plot_styles():
        return plot_style
    return DEFAULT_STYLE


def is_effective_dark(plot_style: str, is_dark_mode: bool) -> bool:
    """Whether the style renders dark.

    True for the explicit dark style, and for "classic" (or an unknown
    style, which falls back to it) under a dark application theme.
    """
    style = get_plot_style(known_style(plot_style))
    if style.always_dark:
        return True
    return style.name == DEFAULT_STYLE and is_dark_mode


def resolve_colors(plot_style: str, is_dark_mode: bool) -> StyleColors:
    """Resolve background, paper background and font colour.

    Parameters
    ----------
    plot_style : str
        Named style; unknown names fall back to "classic"
    is_dark_mode : bool
        Whether the application theme is dark. Only "classic" follows it.

    Returns
    -------
    StyleColors
        Concrete colour triple
    """
    style = get_plot_style(known_style(plot_style))
    if is_effective_dark(style.name, is_dark_mode):
        return style.dark
    return style.light


def resolve_legend(
    position: str,
    plot_style: str = DEFAULT_STYLE,
    is_dark_mode: bool = False,
) -> LegendDescriptor:
    """Resolve a legend position keyword into a LegendDescriptor.

    Parameters
    ----------
    position : str
        One of the seven position keywords; unknown values fall back to
        "upper right"
    plot_style : str
        Named style, used for the legend colours
    is_dark_mode : bool
        Application theme

    Returns
    -------
    LegendDescriptor
        Placement plus background, border and font colours
    """
    if position not in LEGEND_POSITIONS:
        position = DEFAULT_LEGEND_POSITION
    orientation, x, y, xanchor, yanchor = LEGEND_POSITIONS[position]

    dark = is_effective_dark(plot_style, is_dark_mode)
    return LegendDescriptor(
        orientation=orientation,
        x=x,
        y=y,
        xanchor=xanchor,
        yanchor=yanchor,
        bgcolor="rgba(45, 45, 45, 0.95)" if dark else "rgba(255, 255, 255, 0.9)",
        bordercolor="#666666" if dark else "#cccccc",
        font_color="#e0e0e0" if dark else "#333333",
        position=position,
    )


def marker_symbol(name: str) -> str:
    """Marker symbol for a keyword ("circle" when unknown)."""
    return MARKER_SYMBOLS.get(name, DEFAULT_MARKER)


def line_dash(name: str) -> str:
    """Dash pattern for a keyword ("solid" when unknown)."""
    return LINE_DASHES.get(name, DEFAULT_DASH)


def axis_line_color(plot_style: str, is_dark_mode: bool) -> str:
    """Axis line colour for the effective theme."""
    return "#666666" if is_effective_dark(plot_style, is_dark_mode) else "#333333"


def grid_color(alpha: float) -> str:
    """Neutral grey grid colour with the given opacity."""
    return f"rgba(128, 128, 128, {alpha})"
