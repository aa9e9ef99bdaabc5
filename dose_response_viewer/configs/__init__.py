"""Plot configuration and visual styles from JSON files.

This module provides the PlotConfig value type and the named style
palettes, loaded from JSON config files shipped with the package.

Example:
    >>> from dose_response_viewer.configs import get_default_plot_config
    >>> config = get_default_plot_config().updated(plot_style="ggplot")
    >>> print(config.plot_style)
"""

from .loader import (
    PlotConfig,
    StyleColors,
    PlotStyle,
    get_default_plot_config,
    get_plot_style,
    list_plot_styles,
    clear_cache,
)

__all__ = [
    "PlotConfig",
    "StyleColors",
    "PlotStyle",
    "get_default_plot_config",
    "get_plot_style",
    "list_plot_styles",
    "clear_cache",
]
