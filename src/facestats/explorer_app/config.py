"""Explorer app configuration.

ExplorerConfig holds display settings shared by the views. Values come from
the dataclass defaults, optionally overridden by environment variables:

    FACESTATS_THEME: "dark" or "light" (default "light")
    FACESTATS_STATS_DIGITS: decimals shown in the statistics table (default 4)

Runtime flags for ui.run (native window, reload, host, port) are read in
facestats.explorer_app.app with the same _env_bool / _env_int helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from facestats.dataset.conventions import LINE_COLORS
from facestats.utils.logging import get_logger
from facestats.views.chart_view import Y_PADDING_FRACTION
from facestats.views.theme import ThemeMode, resolve_theme

logger = get_logger(__name__)

THEME_ENV = "FACESTATS_THEME"
STATS_DIGITS_ENV = "FACESTATS_STATS_DIGITS"


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ExplorerConfig:
    """Display settings for the explorer views.

    Attributes:
        title: Page and header title.
        line_colors: Palette for attribute lines and table swatches.
        stats_digits: Decimals shown in the statistics table.
        y_padding_fraction: Chart y-axis padding as a fraction of the value range.
        theme: Initial Plotly theme.
    """
    title: str = "Face Stats"
    line_colors: tuple[str, ...] = LINE_COLORS
    stats_digits: int = 4
    y_padding_fraction: float = Y_PADDING_FRACTION
    theme: ThemeMode = ThemeMode.LIGHT

    def __post_init__(self) -> None:
        if not self.line_colors:
            raise ValueError("line_colors must not be empty")
        if self.stats_digits < 0:
            raise ValueError(f"stats_digits must be >= 0, got {self.stats_digits}")
        if self.y_padding_fraction < 0:
            raise ValueError(f"y_padding_fraction must be >= 0, got {self.y_padding_fraction}")

    @classmethod
    def from_env(cls, base: Optional["ExplorerConfig"] = None) -> "ExplorerConfig":
        """Return base (or defaults) with environment overrides applied.

        Invalid values are ignored with a warning.
        """
        cfg = base if base is not None else cls()

        raw_theme = os.getenv(THEME_ENV)
        if raw_theme is not None:
            if raw_theme.strip().lower() in {m.value for m in ThemeMode}:
                cfg = replace(cfg, theme=resolve_theme(raw_theme.strip()))
            else:
                logger.warning("ignoring %s=%r (expected dark or light)", THEME_ENV, raw_theme)

        digits = _env_int(STATS_DIGITS_ENV, cfg.stats_digits)
        if digits < 0:
            logger.warning("ignoring %s=%r (must be >= 0)", STATS_DIGITS_ENV, digits)
        else:
            cfg = replace(cfg, stats_digits=digits)
        return cfg
