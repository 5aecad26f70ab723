"""Theme utilities for the Plotly chart."""

from __future__ import annotations

from enum import Enum
from typing import Union


class ThemeMode(str, Enum):
    """UI theme mode, shared by the header toggle and the chart view."""

    DARK = "dark"
    LIGHT = "light"


def resolve_theme(theme: Union[str, ThemeMode, None]) -> ThemeMode:
    """Convert str to ThemeMode. Default to LIGHT."""
    if isinstance(theme, ThemeMode):
        return theme
    s = str(theme).lower()
    if s in ("dark", "plotly_dark"):
        return ThemeMode.DARK
    return ThemeMode.LIGHT


def get_theme_colors(theme: ThemeMode) -> tuple[str, str]:
    """Background and foreground colors for a theme."""
    if theme is ThemeMode.DARK:
        return "#222222", "#dddddd"
    return "#ffffff", "#222222"


def get_theme_template(theme: ThemeMode) -> str:
    """Plotly template name for a theme."""
    if theme is ThemeMode.DARK:
        return "plotly_dark"
    return "plotly_white"


def get_grid_color(theme: ThemeMode) -> str:
    return "#555555" if theme is ThemeMode.DARK else "#cccccc"
