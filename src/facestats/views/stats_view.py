"""Descriptive statistics table for dataset attributes.

stats_table_rows builds display rows (no UI); StatsView renders them with
ui.table and an attribute select.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from nicegui import ui

from facestats.algorithms.aggregate import aggregate_stats
from facestats.algorithms.descriptive_stats import StatisticsSummary
from facestats.dataset.conventions import (
    ALL_ATTRIBUTES,
    LINE_COLORS,
    attr_label,
    attribute_keys,
    color_for_index,
    format_number,
    selected_attributes,
)
from facestats.dataset.dataset import Dataset
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

# (field, column header) in display order; "attribute" and "count" are not formatted.
STATS_TABLE_COLUMNS: list[tuple[str, str]] = [
    ("attribute", "Attribute"),
    ("count", "n"),
    ("mean", "Mean"),
    ("median", "Median"),
    ("mode", "Mode"),
    ("std_dev", "Std. dev."),
    ("q1", "Q1"),
    ("q2", "Q2"),
    ("q3", "Q3"),
    ("min", "Min"),
    ("max", "Max"),
    ("range", "Range"),
    ("skewness", "Skewness"),
    ("kurtosis", "Kurtosis"),
]


def stats_table_rows(
    dataset: Dataset,
    summaries: Mapping[str, Optional[StatisticsSummary]],
    selection: Optional[str] = ALL_ATTRIBUTES,
    *,
    digits: int = 4,
    palette: Sequence[str] = LINE_COLORS,
) -> list[dict[str, Any]]:
    """One formatted row per selected attribute that has a summary.

    Attributes with no finite values (summary None) are left out. Each row
    carries a "color" key: the attribute's palette color by position among
    all dataset attributes.
    """
    keys = attribute_keys(dataset.rows)
    rows: list[dict[str, Any]] = []
    for attr in selected_attributes(selection, keys):
        summary = summaries.get(attr)
        if summary is None:
            continue
        values = summary.to_dict()
        row: dict[str, Any] = {
            "key": attr,
            "attribute": attr_label(attr, dataset.header_map),
            "color": color_for_index(keys.index(attr) if attr in keys else 0, palette),
            "count": summary.count,
        }
        for field, _ in STATS_TABLE_COLUMNS[2:]:
            row[field] = format_number(values[field], digits)
        rows.append(row)
    return rows


class StatsView:
    """Attribute select + descriptive statistics table for one dataset.

    Summaries are computed once per dataset via aggregate_stats.
    """

    def __init__(
        self,
        dataset: Dataset,
        *,
        digits: int = 4,
        palette: Sequence[str] = LINE_COLORS,
    ) -> None:
        self.dataset = dataset
        self._digits = digits
        self._palette = palette
        self._selection = ALL_ATTRIBUTES
        self._table: Optional[ui.table] = None
        self.summaries = aggregate_stats(dataset.rows, attribute_keys(dataset.rows))

    def rows(self) -> list[dict[str, Any]]:
        return stats_table_rows(
            self.dataset,
            self.summaries,
            self._selection,
            digits=self._digits,
            palette=self._palette,
        )

    def render(self) -> None:
        """Create the statistics UI inside the current container."""
        if self.dataset.is_empty:
            ui.label("No data. Load a file first.")
            return
        keys = attribute_keys(self.dataset.rows)
        if not keys:
            ui.label("No numeric attributes to analyse.")
            return

        options = {ALL_ATTRIBUTES: "All attributes"}
        options.update({k: attr_label(k, self.dataset.header_map) for k in keys})
        ui.select(
            options,
            value=self._selection,
            label="Attribute",
            on_change=lambda e: self.set_selection(e.value),
        ).classes("w-64")

        columns = [
            {"name": field, "label": header, "field": field, "align": "left" if field == "attribute" else "right"}
            for field, header in STATS_TABLE_COLUMNS
        ]
        self._table = ui.table(columns=columns, rows=self.rows(), row_key="key").classes("w-full")
        self._table.add_slot(
            "body-cell-attribute",
            r'''
            <q-td :props="props">
              <span :style="{display: 'inline-block', width: '12px', height: '12px',
                             borderRadius: '2px', marginRight: '6px',
                             backgroundColor: props.row.color}"></span>
              <span :style="{color: props.row.color}">{{ props.value }}</span>
            </q-td>
            ''',
        )

    def set_selection(self, selection: Optional[str]) -> None:
        self._selection = selection or ALL_ATTRIBUTES
        logger.debug("stats selection -> %s", self._selection)
        if self._table is not None:
            self._table.rows = self.rows()
            self._table.update()
