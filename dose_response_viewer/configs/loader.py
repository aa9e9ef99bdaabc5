"""Configuration loader for plot settings and visual styles.

Loads the default plot configuration and the named style palettes from
JSON files shipped with the package. This provides a single source of
truth for defaults used by the session, the plot assembler and the GUI.

Usage:
    >>> from dose_response_viewer.configs import get_default_plot_config, get_plot_style
    >>> config = get_default_plot_config()
    >>> print(config.plot_style, config.legend_position)
    >>> style = get_plot_style("ggplot")
    >>> print(style.light.background)
"""

from dataclasses import dataclass, fields, asdict, replace
from pathlib import Path
from typing import Any
import json


@dataclass(frozen=True)
class PlotConfig:
    """Visual configuration of a compound plot.

    Treated as a value: updates go through :meth:`updated`, which returns
    a new instance, and every update triggers a full re-resolution.

    Attributes
    ----------
    plot_width, plot_height : int
        Figure size in pixels
    data_point_size, data_point_alpha, data_point_color
        Marker styling for measured samples
    line_thickness, line_alpha, line_color
        Styling of the fitted curve (line_color also colours the IC50 label)
    show_ic50_lines, show_dmax_lines : bool
        Reference line toggles
    grid_enabled : bool
        Show grid lines
    ic50_vertical_line_color, ic50_horizontal_line_color : str
        IC50 reference line colours
    observed_dmax_color, predicted_dmax_color : str
        Dmax reference line colours
    plot_style : str
        Named visual style (see ``plot_styles.json``)
    point_marker_style : str
        Marker keyword ("circle", "square", ...)
    line_style : str
        Dash keyword ("solid", "dash", ...)
    legend_position : str
        Legend keyword ("upper right", "lower center", ...)
    text_size, title_size : int
        Font sizes
    grid_alpha : float
        Grid line opacity
    grid_style : str
        Grid dash keyword
    """
    plot_width: int = 800
    plot_height: int = 600
    data_point_size: float = 8
    data_point_alpha: float = 0.8
    data_point_color: str = "#1f77b4"
    line_thickness: float = 2
    line_alpha: float = 0.9
    line_color: str = "#ff7f0e"
    show_ic50_lines: bool = True
    show_dmax_lines: bool = True
    grid_enabled: bool = True
    ic50_vertical_line_color: str = "#d62728"
    ic50_horizontal_line_color: str = "#d62728"
    observed_dmax_color: str = "#2ca02c"
    predicted_dmax_color: str = "#ff7f0e"
    plot_style: str = "seaborn-v0_8"
    point_marker_style: str = "circle"
    line_style: str = "solid"
    legend_position: str = "upper right"
    text_size: int = 12
    title_size: int = 16
    grid_alpha: float = 0.3
    grid_style: str = "solid"

    def updated(self, **changes: Any) -> "PlotConfig":
        """Return a copy with ``changes`` shallow-merged in.

        Raises
        ------
        ValueError
            If a key is not a PlotConfig field
        """
        _check_keys(changes)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlotConfig":
        """Create from dictionary, starting from the dataclass defaults.

        Raises
        ------
        ValueError
            If the dictionary contains unknown keys
        """
        _check_keys(data)
        return cls(**data)

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


def _check_keys(data: dict[str, Any]) -> None:
    unknown = sorted(set(data) - set(PlotConfig.field_names()))
    if unknown:
        raise ValueError(f"Unknown plot config keys: {unknown}")


@dataclass(frozen=True)
class StyleColors:
    """Background, paper and font colours of a style in one mode."""
    background: str
    paper_background: str
    font_color: str

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "StyleColors":
        """Create from dictionary (JSON)."""
        return cls(
            background=data["background"],
            paper_background=data["paper_background"],
            font_color=data["font_color"],
        )


@dataclass(frozen=True)
class PlotStyle:
    """A named visual style with its light and dark palettes.

    Attributes
    ----------
    name : str
        Style keyword
    description : str
        Human-readable description
    light, dark : StyleColors
        Palettes for light and dark rendering
    always_dark : bool
        Style renders with its dark palette regardless of the app theme
    """
    name: str
    description: str
    light: StyleColors
    dark: StyleColors
    always_dark: bool = False

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "PlotStyle":
        """Create from dictionary (JSON)."""
        return cls(
            name=name,
            description=data.get("description", ""),
            light=StyleColors.from_dict(data["light"]),
            dark=StyleColors.from_dict(data["dark"]),
            always_dark=bool(data.get("always_dark", False)),
        )


# Module-level cache for loaded configs
_style_cache: dict[str, PlotStyle] = {}
_default_config_cache: dict[str, PlotConfig] = {}


def _get_configs_dir() -> Path:
    """Get the configs directory path."""
    return Path(__file__).parent


def _load_json_config(path: Path) -> dict:
    """Load a JSON config file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_styles() -> dict[str, PlotStyle]:
    if not _style_cache:
        data = _load_json_config(_get_configs_dir() / "plot_styles.json")
        for name, entry in data.items():
            _style_cache[name] = PlotStyle.from_dict(name, entry)
    return _style_cache


def get_default_plot_config() -> PlotConfig:
    """Get the default plot configuration from ``plot_defaults.json``.

    Returns
    -------
    PlotConfig
        Default configuration (shared immutable instance)
    """
    if "default" not in _default_config_cache:
        data = _load_json_config(_get_configs_dir() / "plot_defaults.json")
        _default_config_cache["default"] = PlotConfig.from_dict(data)
    return _default_config_cache["default"]


def get_plot_style(name: str) -> PlotStyle:
    """Get a named plot style.

    Parameters
    ----------
    name : str
        Style keyword (e.g., "classic", "ggplot")

    Returns
    -------
    PlotStyle
        Style definition

    Raises
    ------
    ValueError
        If the style is not defined
    """
    styles = _load_styles()
    if name not in styles:
        raise ValueError(f"Unknown plot style: {name}. Available: {list_plot_styles()}")
    return styles[name]


def list_plot_styles() -> list[str]:
    """List all available plot style names, in file order."""
    return list(_load_styles().keys())


def clear_cache() -> None:
    """Clear the config cache (useful for testing)."""
    _style_cache.clear()
    _default_config_cache.clear()
