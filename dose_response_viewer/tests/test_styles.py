"""Tests for style resolution and the config loader."""

import pytest


class TestColors:
    """Tests for resolve_colors() and is_effective_dark()."""

    def test_unknown_style_falls_back_to_classic_light(self):
        """Test unknown style names resolve as classic."""
        from dose_response_viewer.configs import get_plot_style
        from dose_response_viewer.plotting import resolve_colors

        assert resolve_colors("unknown_style", False) == get_plot_style("classic").light

    def test_classic_follows_ambient_theme(self):
        """Test classic switches palettes with the app theme."""
        from dose_response_viewer.configs import get_plot_style
        from dose_response_viewer.plotting import resolve_colors

        classic = get_plot_style("classic")

        assert resolve_colors("classic", False) == classic.light
        assert resolve_colors("classic", True) == classic.dark

    @pytest.mark.parametrize("style", ["seaborn-v0_8", "ggplot", "bmh", "fivethirtyeight", "grayscale"])
    def test_named_styles_ignore_ambient_theme(self, style):
        """Test non-classic styles keep one palette."""
        from dose_response_viewer.plotting import resolve_colors

        assert resolve_colors(style, True) == resolve_colors(style, False)

    def test_dark_style_always_dark(self):
        """Test the explicit dark style in both themes."""
        from dose_response_viewer.plotting import is_effective_dark, resolve_colors

        assert is_effective_dark("dark_background", False)
        assert resolve_colors("dark_background", False).background == "#2f3136"

    @pytest.mark.parametrize("style, ambient, expected", [
        ("classic", False, False),
        ("classic", True, True),
        ("ggplot", True, False),
        ("dark_background", False, True),
        ("unknown_style", True, True),
    ])
    def test_is_effective_dark(self, style, ambient, expected):
        """Test effective darkness across styles and themes."""
        from dose_response_viewer.plotting import is_effective_dark

        assert is_effective_dark(style, ambient) is expected


class TestLegend:
    """Tests for resolve_legend()."""

    def test_unknown_position_falls_back(self):
        """Test unknown keywords resolve as upper right."""
        from dose_response_viewer.plotting import resolve_legend

        fallback = resolve_legend("nonexistent")
        upper_right = resolve_legend("upper right")

        assert fallback == upper_right
        assert (fallback.orientation, fallback.x, fallback.y) == ("v", 1.0, 1.0)
        assert (fallback.xanchor, fallback.yanchor) == ("right", "top")

    def test_seven_positions(self):
        """Test every position keyword has a distinct anchor."""
        from dose_response_viewer.plotting import LEGEND_POSITIONS, resolve_legend

        anchors = {
            (legend.x, legend.y, legend.xanchor, legend.yanchor)
            for legend in (resolve_legend(p) for p in LEGEND_POSITIONS)
        }

        assert len(LEGEND_POSITIONS) == 7
        assert len(anchors) == 7

    def test_horizontal_center_positions(self):
        """Test centered-edge legends are horizontal."""
        from dose_response_viewer.plotting import resolve_legend

        assert resolve_legend("upper center").orientation == "h"
        assert resolve_legend("lower center").orientation == "h"
        assert resolve_legend("center").orientation == "v"

    def test_legend_colors_follow_effective_darkness(self):
        """Test legend colours for light and dark rendering."""
        from dose_response_viewer.plotting import resolve_legend

        light = resolve_legend("upper left", "classic", False)
        dark = resolve_legend("upper left", "classic", True)
        fixed_dark = resolve_legend("upper left", "dark_background", False)

        assert light.bgcolor == "rgba(255, 255, 255, 0.9)"
        assert light.font_color == "#333333"
        assert dark.bgcolor == "rgba(45, 45, 45, 0.95)"
        assert dark.bordercolor == "#666666"
        assert fixed_dark == dark


class TestStyleHelpers:
    """Tests for marker, dash and grid helpers."""

    def test_marker_and_dash_defaults(self):
        """Test fallbacks for unknown keywords."""
        from dose_response_viewer.plotting.styles import line_dash, marker_symbol

        assert marker_symbol("square") == "square"
        assert marker_symbol("blob") == "circle"
        assert line_dash("dot") == "dot"
        assert line_dash("wavy") == "solid"

    def test_grid_and_axis_colors(self):
        """Test grid opacity and axis line colours."""
        from dose_response_viewer.plotting.styles import axis_line_color, grid_color

        assert grid_color(0.3) == "rgba(128, 128, 128, 0.3)"
        assert axis_line_color("classic", False) == "#333333"
        assert axis_line_color("classic", True) == "#666666"


class TestConfigLoader:
    """Tests for the JSON-backed configuration."""

    def test_default_config_matches_dataclass(self, default_config):
        """Test the JSON defaults."""
        from dose_response_viewer.configs import PlotConfig

        assert default_config == PlotConfig()
        assert default_config.plot_style == "seaborn-v0_8"
        assert default_config.legend_position == "upper right"

    def test_updated_is_shallow_merge(self, default_config):
        """Test updates return a new config and leave the original."""
        updated = default_config.updated(line_color="#000000", text_size=14)

        assert updated.line_color == "#000000"
        assert updated.text_size == 14
        assert updated.plot_width == default_config.plot_width
        assert default_config.line_color == "#ff7f0e"

    def test_unknown_keys_rejected(self, default_config):
        """Test unknown config keys raise ValueError."""
        from dose_response_viewer.configs import PlotConfig

        with pytest.raises(ValueError, match="Unknown plot config keys"):
            default_config.updated(colour="red")
        with pytest.raises(ValueError):
            PlotConfig.from_dict({"bogus": 1})

    def test_dict_round_trip(self, default_config):
        """Test to_dict/from_dict."""
        from dose_response_viewer.configs import PlotConfig

        assert PlotConfig.from_dict(default_config.to_dict()) == default_config

    def test_styles_listed(self):
        """Test the style catalogue."""
        from dose_response_viewer.configs import get_plot_style, list_plot_styles

        assert list_plot_styles() == [
            "classic", "seaborn-v0_8", "ggplot", "bmh",
            "fivethirtyeight", "grayscale", "dark_background",
        ]
        with pytest.raises(ValueError):
            get_plot_style("unknown_style")

    def test_clear_cache(self):
        """Test the cache can be cleared and reloaded."""
        from dose_response_viewer.configs import clear_cache, get_default_plot_config

        first = get_default_plot_config()
        clear_cache()
        second = get_default_plot_config()

        assert first == second
