"""NiceGUI views over a loaded Dataset: table, chart, statistics and faces."""

from facestats.views.chart_view import ChartView, Y_PADDING_FRACTION, line_chart_plotly, y_domain
from facestats.views.faces_view import (
    FACE_PARTS,
    FaceConfigError,
    FacePart,
    FacesView,
    build_face_config,
    face_svg,
)
from facestats.views.stats_view import STATS_TABLE_COLUMNS, StatsView, stats_table_rows
from facestats.views.table_view import TableView, table_column_defs
from facestats.views.theme import ThemeMode, resolve_theme

__all__ = [
    "ChartView",
    "FACE_PARTS",
    "FaceConfigError",
    "FacePart",
    "FacesView",
    "STATS_TABLE_COLUMNS",
    "StatsView",
    "TableView",
    "ThemeMode",
    "Y_PADDING_FRACTION",
    "build_face_config",
    "face_svg",
    "line_chart_plotly",
    "resolve_theme",
    "stats_table_rows",
    "table_column_defs",
    "y_domain",
]
