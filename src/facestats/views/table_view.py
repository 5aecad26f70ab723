"""Raw data table for a loaded dataset (NiceGUI AG Grid).

Columns keep file order; headers show the original column names next to
the generic keys (see attr_label). Right-click toggles column visibility.
"""

from __future__ import annotations

from typing import Any, Optional

from nicegui import ui

from facestats.dataset.conventions import DATE_COLUMN, attr_label
from facestats.dataset.dataset import Dataset
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

CHECK_MARK = "✓"


def table_column_defs(dataset: Dataset) -> list[dict[str, Any]]:
    """AG Grid columnDefs for dataset.columns.

    The date column is pinned left; attribute columns are right-aligned
    numeric columns.
    """
    defs: list[dict[str, Any]] = []
    for col in dataset.columns:
        col_def: dict[str, Any] = {
            "headerName": attr_label(col, dataset.header_map),
            "field": col,
            "sortable": True,
            "resizable": True,
        }
        if col == DATE_COLUMN:
            col_def["pinned"] = "left"
        else:
            col_def["type"] = "numericColumn"
        defs.append(col_def)
    return defs


class TableView:
    """Read-only AG Grid of all rows.

    Attributes:
        dataset: The dataset shown.
        grid: The ui.aggrid (set after render()).
    """

    def __init__(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.grid: Optional[ui.aggrid] = None
        self._visible: dict[str, bool] = {c: True for c in dataset.columns}

    def render(self) -> None:
        """Create the grid inside the current container."""
        if self.dataset.is_empty:
            ui.label("No data. Load a file first.")
            return

        with ui.column().classes("w-full h-[480px] min-h-0") as container:
            self.grid = ui.aggrid.from_pandas(self.dataset.to_frame()).classes("w-full h-full")
            self.grid.options["columnDefs"] = table_column_defs(self.dataset)
            self.grid.options["rowSelection"] = "single"
            self.grid.update()

            with ui.context_menu() as self._menu:
                pass
            container.on("contextmenu", self._rebuild_menu)
            self._rebuild_menu()

        logger.debug("table rendered: %d rows x %d columns", len(self.dataset.rows), len(self.dataset.columns))

    def set_column_visible(self, column: str, visible: bool) -> None:
        if column not in self._visible:
            raise KeyError(column)
        self._visible[column] = visible
        if self.grid is not None:
            self.grid.run_grid_method("setColumnsVisible", [column], visible)

    def set_all_visible(self, visible: bool) -> None:
        for col in self._visible:
            self._visible[col] = visible
        if self.grid is not None:
            self.grid.run_grid_method("setColumnsVisible", list(self._visible), visible)

    def _rebuild_menu(self) -> None:
        with self._menu.clear():
            for col, vis in self._visible.items():
                text = attr_label(col, self.dataset.header_map)
                label = f"{CHECK_MARK} {text}" if vis else f"   {text}"
                ui.menu_item(label, on_click=lambda c=col: self.set_column_visible(c, not self._visible[c]))
            ui.separator()
            ui.menu_item("Show all", on_click=lambda: self.set_all_visible(True))
            ui.menu_item("Hide all", on_click=lambda: self.set_all_visible(False))
