"""Time-series line chart of dataset attributes.

line_chart_plotly returns a Plotly figure dict (never go.Figure) for
ui.plotly / update_figure; ChartView wraps it with an attribute select.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import plotly.graph_objects as go
from nicegui import ui

from facestats.algorithms.aggregate import is_finite_number
from facestats.dataset.conventions import (
    ALL_ATTRIBUTES,
    DATE_COLUMN,
    LINE_COLORS,
    attr_label,
    attribute_keys,
    color_for_index,
    selected_attributes,
)
from facestats.dataset.dataset import Dataset
from facestats.views.theme import ThemeMode, get_grid_color, get_theme_colors, get_theme_template, resolve_theme
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

# Fraction of the value range added above and below the data on the y axis.
Y_PADDING_FRACTION = 0.1


def y_domain(
    rows: Sequence[Mapping[str, Any]],
    attributes: Iterable[str],
    padding: float = Y_PADDING_FRACTION,
) -> Optional[tuple[float, float]]:
    """Padded y-axis range over all finite values of attributes.

    The pad is padding * (max - min); a zero range pads by padding * 1.

    Returns:
        (low, high), or None when there is no finite value (autorange).
    """
    attributes = list(attributes)
    lo = math.inf
    hi = -math.inf
    for row in rows:
        for attr in attributes:
            v = row.get(attr)
            if is_finite_number(v):
                lo = min(lo, float(v))
                hi = max(hi, float(v))
    if lo == math.inf:
        return None
    value_range = (hi - lo) or 1.0
    pad = value_range * padding
    return lo - pad, hi + pad


def line_chart_plotly(
    dataset: Dataset,
    attributes: Sequence[str],
    *,
    theme: Optional[Union[str, ThemeMode]] = None,
    palette: Sequence[str] = LINE_COLORS,
    padding: float = Y_PADDING_FRACTION,
) -> dict:
    """Line chart with one trace per attribute against the date column.

    Missing cells are gaps in the line. Trace colors follow the attribute's
    position among all dataset attributes, so an attribute keeps its color
    when shown alone.
    """
    theme_mode = resolve_theme(theme)
    bg_color, fg_color = get_theme_colors(theme_mode)
    grid_color = get_grid_color(theme_mode)

    fig = go.Figure()
    all_keys = attribute_keys(dataset.rows)
    x = [row.get(DATE_COLUMN, "") for row in dataset.rows]

    for attr in attributes:
        index = all_keys.index(attr) if attr in all_keys else len(fig.data)
        y = [row.get(attr) if is_finite_number(row.get(attr)) else None for row in dataset.rows]
        fig.add_trace(
            go.Scatter(
                x=x,
                y=y,
                mode="lines",
                name=attr_label(attr, dataset.header_map),
                line=dict(color=color_for_index(index, palette), width=2),
                connectgaps=False,
            )
        )

    date_label = attr_label(DATE_COLUMN, dataset.header_map)
    domain = y_domain(dataset.rows, attributes, padding)
    yaxis: dict[str, Any] = dict(title="Value", color=fg_color, gridcolor=grid_color)
    if domain is not None:
        yaxis["range"] = list(domain)

    fig.update_layout(
        template=get_theme_template(theme_mode),
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        font=dict(color=fg_color),
        xaxis=dict(
            title=date_label,
            type="category",
            color=fg_color,
            showgrid=False,
            rangeslider=dict(visible=True),
        ),
        yaxis=yaxis,
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="center", x=0.5),
        margin=dict(l=10, r=30, t=30, b=10),
    )
    return fig.to_dict()


class ChartView:
    """Attribute select + Plotly line chart for one dataset."""

    def __init__(
        self,
        dataset: Dataset,
        *,
        theme: Union[str, ThemeMode] = ThemeMode.LIGHT,
        palette: Sequence[str] = LINE_COLORS,
        padding: float = Y_PADDING_FRACTION,
    ) -> None:
        self.dataset = dataset
        self._theme = resolve_theme(theme)
        self._palette = palette
        self._padding = padding
        self._selection = ALL_ATTRIBUTES
        self._plot: Optional[ui.plotly] = None

    @property
    def attribute_keys(self) -> list[str]:
        return attribute_keys(self.dataset.rows)

    def select_options(self) -> dict[str, str]:
        """Select options: value -> label, 'all' first."""
        options = {ALL_ATTRIBUTES: "All attributes"}
        for attr in self.attribute_keys:
            options[attr] = attr_label(attr, self.dataset.header_map)
        return options

    def figure(self) -> dict:
        attrs = selected_attributes(self._selection, self.attribute_keys)
        return line_chart_plotly(
            self.dataset,
            attrs,
            theme=self._theme,
            palette=self._palette,
            padding=self._padding,
        )

    def render(self) -> None:
        """Create the chart UI inside the current container."""
        if self.dataset.is_empty:
            ui.label("No data. Load a file first.")
            return
        if not self.attribute_keys:
            ui.label("No numeric attributes to plot.")
            return

        ui.select(
            self.select_options(),
            value=self._selection,
            label="Attribute",
            on_change=lambda e: self.set_selection(e.value),
        ).classes("w-64")
        self._plot = ui.plotly(self.figure()).classes("w-full h-[420px]")

    def set_selection(self, selection: Optional[str]) -> None:
        self._selection = selection or ALL_ATTRIBUTES
        logger.debug("chart selection -> %s", self._selection)
        if self._plot is not None:
            self._plot.update_figure(self.figure())

    def set_theme(self, theme: Union[str, ThemeMode]) -> None:
        self._theme = resolve_theme(theme)
        if self._plot is not None:
            self._plot.update_figure(self.figure())
