"""
Theme manager for consistent styling of advisor charts.

Both renderers (SVG and matplotlib) read their colours, stroke widths and
marker sizes from the same named theme so a chart looks the same whichever
way it is produced.
"""

from typing import Any, Dict, List


class ThemeManager:
    """
    Manages themes for the chart renderers.

    Features:
        - Predefined ``default`` (light) and ``dark`` themes
        - One colour per overlay line plus BUY/SELL marker colours
        - A colour cycle for extra indicator lines declared in the config
        - Custom theme registration on top of the default values

    Example:
        ```python
        from advisor_chart.visual.theme_manager import ThemeManager

        theme_manager = ThemeManager()
        dark = theme_manager.get_theme("dark")

        theme_manager.register_theme("print", {
            "background_color": "#FFFFFF",
            "text_color": "#000000",
            "buy_color": "#000000",
            "sell_color": "#777777",
        })
        ```
    """

    def __init__(self):
        """Initialize the theme manager with predefined themes."""
        self._themes = self._create_default_themes()

    def _create_default_themes(self) -> Dict[str, Dict[str, Any]]:
        return {
            "default": {
                "background_color": "#F8FAFC",
                "text_color": "#475569",
                "grid_color": "#E2E8F0",
                "price_color": "#2563EB",
                "fast_color": "#9333EA",
                "slow_color": "#EA580C",
                "band_color": "#0EA5E9",
                "extra_colors": ["#0D9488", "#CA8A04", "#DB2777", "#4B5563"],
                "buy_color": "#16A34A",
                "sell_color": "#DC2626",
                "price_width": 2.0,
                "average_width": 1.8,
                "band_width": 1.4,
                "band_dash": "3 3",
                "band_fill_alpha": 0.08,
                "marker_radius": 4.5,
                "font_family": "DejaVu Sans",
                "font_size": 10,
                "title_font_size": 14,
                "grid_alpha": 0.5,
            },
            "dark": {
                "background_color": "#0F172A",
                "text_color": "#CBD5E1",
                "grid_color": "#334155",
                "price_color": "#60A5FA",
                "fast_color": "#C084FC",
                "slow_color": "#FB923C",
                "band_color": "#38BDF8",
                "extra_colors": ["#2DD4BF", "#FACC15", "#F472B6", "#9CA3AF"],
                "buy_color": "#4ADE80",
                "sell_color": "#F87171",
                "price_width": 2.0,
                "average_width": 1.8,
                "band_width": 1.4,
                "band_dash": "3 3",
                "band_fill_alpha": 0.12,
                "marker_radius": 4.5,
                "font_family": "DejaVu Sans",
                "font_size": 10,
                "title_font_size": 14,
                "grid_alpha": 0.3,
            },
        }

    def get_theme(self, theme_name: str) -> Dict[str, Any]:
        """
        Get a theme configuration by name.

        Raises:
            ValueError: If theme_name is not found
        """
        if theme_name not in self._themes:
            available_themes = list(self._themes.keys())
            raise ValueError(f"Theme '{theme_name}' not found. Available themes: {available_themes}")

        return self._themes[theme_name].copy()

    def register_theme(self, theme_name: str, theme_config: Dict[str, Any]) -> None:
        """
        Register a new custom theme.

        Missing values are taken from the default theme.

        Raises:
            ValueError: If background, text or marker colours are missing
        """
        required_keys = ["background_color", "text_color", "buy_color", "sell_color"]
        missing_keys = [key for key in required_keys if key not in theme_config]
        if missing_keys:
            raise ValueError(f"Theme config missing required keys: {missing_keys}")

        self._themes[theme_name] = {**self._themes["default"], **theme_config}

    def list_themes(self) -> List[str]:
        return list(self._themes.keys())

    def matplotlib_style(self, theme_name: str) -> Dict[str, Any]:
        """
        Matplotlib rc settings for a theme.

        Meant for ``plt.rc_context`` so the styling stays scoped to one figure.
        """
        theme = self.get_theme(theme_name)
        return {
            "figure.facecolor": theme["background_color"],
            "savefig.facecolor": theme["background_color"],
            "axes.facecolor": theme["background_color"],
            "axes.edgecolor": theme["grid_color"],
            "axes.labelcolor": theme["text_color"],
            "xtick.color": theme["text_color"],
            "ytick.color": theme["text_color"],
            "text.color": theme["text_color"],
            "legend.fontsize": theme["font_size"],
            "font.family": theme["font_family"],
            "font.size": theme["font_size"],
            "figure.titlesize": theme["title_font_size"],
            "figure.titleweight": "bold",
            "axes.grid": True,
            "grid.color": theme["grid_color"],
            "grid.alpha": theme["grid_alpha"],
        }
