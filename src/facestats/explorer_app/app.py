"""Face Stats explorer: standalone NiceGUI application.

Upload a CSV or Excel file, then browse it as a table, a line chart, a
descriptive statistics table and a Chernoff face. Uses @ui.page("/").

Run:
    uv run python -m facestats.explorer_app.app

Env vars:
    FACESTATS_GUI_NATIVE: 1/0 (default 0)
    FACESTATS_GUI_RELOAD: 1/0 (default 0)
    FACESTATS_THEME: dark/light (see facestats.explorer_app.config)
    FACESTATS_LOG_LEVEL: logging level (default INFO)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import multiprocessing as mp
import os
from dataclasses import dataclass, field
from multiprocessing import freeze_support
from pathlib import Path
from typing import Optional

from nicegui import run, ui

from facestats.dataset.dataset import Dataset
from facestats.dataset.ingest import load_dataset
from facestats.explorer_app.config import ExplorerConfig, _env_bool, _env_int
from facestats.explorer_app.header import build_explorer_header
from facestats.upload_widget import CancelToken, UploadWidget
from facestats.utils.gui_defaults import setUpGuiDefaults
from facestats.utils.logging import configure_logging, get_logger
from facestats.views.chart_view import ChartView
from facestats.views.faces_view import FacesView
from facestats.views.stats_view import StatsView
from facestats.views.table_view import TableView
from facestats.views.theme import ThemeMode

logger = get_logger(__name__)

STORAGE_SECRET = "facestats-explorer-session-secret"

TAB_UPLOAD = "Upload"
TAB_CHART = "Chart"
TAB_STATS = "Statistics"
TAB_FACES = "Faces"


@dataclass
class ExplorerState:
    """Per-page state: the loaded dataset and the views built from it."""
    config: ExplorerConfig
    dataset: Dataset = field(default_factory=Dataset)
    chart: Optional[ChartView] = None

    def set_dark(self, dark: bool) -> None:
        if self.chart is not None:
            self.chart.set_theme(ThemeMode.DARK if dark else ThemeMode.LIGHT)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
def home() -> None:
    """Home page: header, tabs, and one panel per view."""

    setUpGuiDefaults("text-sm")

    config = ExplorerConfig.from_env()
    state = ExplorerState(config=config)

    ui.page_title(config.title)

    dark_mode, source_label = build_explorer_header(
        config.title,
        dark_default=config.theme is ThemeMode.DARK,
        on_theme_change=state.set_dark,
    )

    with ui.tabs().classes("w-full") as tabs:
        upload_tab = ui.tab(TAB_UPLOAD, icon="upload_file")
        chart_tab = ui.tab(TAB_CHART, icon="show_chart")
        stats_tab = ui.tab(TAB_STATS, icon="table_chart")
        faces_tab = ui.tab(TAB_FACES, icon="face")
    data_tabs = (chart_tab, stats_tab, faces_tab)
    for tab in data_tabs:
        tab.props("disable")

    with ui.tab_panels(tabs, value=upload_tab).classes("w-full"):
        with ui.tab_panel(upload_tab):
            upload_slot = ui.column().classes("w-full")
            table_container = ui.column().classes("w-full")
        with ui.tab_panel(chart_tab):
            chart_container = ui.column().classes("w-full")
        with ui.tab_panel(stats_tab):
            stats_container = ui.column().classes("w-full")
        with ui.tab_panel(faces_tab):
            faces_container = ui.column().classes("w-full")

    def _render_views(dataset: Dataset) -> None:
        theme = ThemeMode.DARK if dark_mode.value else ThemeMode.LIGHT
        state.chart = ChartView(
            dataset,
            theme=theme,
            palette=config.line_colors,
            padding=config.y_padding_fraction,
        )
        for container in (table_container, chart_container, stats_container, faces_container):
            container.clear()
        with table_container:
            TableView(dataset).render()
        with chart_container:
            state.chart.render()
        with stats_container:
            StatsView(dataset, digits=config.stats_digits, palette=config.line_colors).render()
        with faces_container:
            FacesView(dataset).render()

    async def _on_path_ready(path: Path, cancel: CancelToken) -> None:
        try:
            dataset = await run.io_bound(load_dataset, path)
        except Exception as e:
            logger.exception("Failed to load %s: %s", path, e)
            ui.notify(f"Failed to load file: {e}", type="negative")
            return
        if cancel.cancelled:
            logger.info("load of %s cancelled", path)
            return
        if dataset.is_empty:
            ui.notify("The file contains no data rows.", type="warning")
            return

        state.dataset = dataset
        source_label.text = dataset.source_name
        _render_views(dataset)
        for tab in data_tabs:
            tab.props(remove="disable")
        tabs.set_value(chart_tab)
        ui.notify(f"Loaded {len(dataset.rows)} rows from {dataset.source_name}", type="positive")

    with upload_slot:
        ui.label("Load a CSV or Excel (.xlsx) file. The first column holds dates, the rest numeric attributes.")
        UploadWidget(label="Data file", on_path_ready=_on_path_ready)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the explorer application.

    Defaults (no env vars, no args):
      - native=False
      - reload=False

    Env vars (used when arg is None):
      - FACESTATS_GUI_NATIVE: 1/0
      - FACESTATS_GUI_RELOAD: 1/0
      - HOST: bind host
      - PORT: bind port
    """
    configure_logging()

    native_bool = _env_bool("FACESTATS_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("FACESTATS_GUI_RELOAD", False) if reload is None else reload

    from nicegui import native as native_module
    if native_bool:
        port = _env_int("PORT", native_module.find_open_port())
    else:
        port = _env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting Face Stats explorer: host=%s port=%s reload=%s native=%s",
        host,
        port,
        reload,
        native_bool,
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "storage_secret": STORAGE_SECRET,
        "title": ExplorerConfig().title,
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 800)
    ui.run(**run_kwargs)


if __name__ == "__main__":
    freeze_support()
    if mp.current_process().name == "MainProcess":
        main()
    else:
        logger.debug("Skipping GUI startup in worker process: %s", mp.current_process().name)
