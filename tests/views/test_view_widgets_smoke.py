"""Smoke tests: views render against a mocked nicegui.ui and react to changes."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

import facestats.views.chart_view as chart_mod
import facestats.views.faces_view as faces_mod
import facestats.views.stats_view as stats_mod
import facestats.views.table_view as table_mod
from facestats.dataset.dataset import Dataset, HeaderEntry

pytestmark = pytest.mark.requires_nicegui


@pytest.fixture()
def dataset() -> Dataset:
    n = 5
    header = [HeaderEntry("Data", "Date")] + [HeaderEntry(f"A{i}", f"M{i}") for i in range(1, n + 1)]
    rows = [
        {"Data": f"2024-02-0{d}", **{f"A{i}": float(d * i) for i in range(1, n + 1)}}
        for d in range(1, 6)
    ]
    return Dataset(rows=rows, header_map=header, source_name="m.csv")


@pytest.fixture()
def fake_ui(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    ui = MagicMock()
    for mod in (chart_mod, faces_mod, stats_mod, table_mod):
        monkeypatch.setattr(mod, "ui", ui, raising=True)
    return ui


def test_chart_view_render_and_update(dataset: Dataset, fake_ui: MagicMock) -> None:
    view = chart_mod.ChartView(dataset)
    view.render()

    fake_ui.plotly.assert_called_once()
    plot = fake_ui.plotly.return_value.classes.return_value
    view.set_selection("A3")
    plot.update_figure.assert_called_once()
    fig = plot.update_figure.call_args.args[0]
    assert [t["name"] for t in fig["data"]] == ["A3 (M3)"]


def test_chart_view_empty_dataset_shows_label(fake_ui: MagicMock) -> None:
    chart_mod.ChartView(Dataset()).render()
    fake_ui.label.assert_called_once()
    fake_ui.plotly.assert_not_called()


def test_stats_view_render_and_select(dataset: Dataset, fake_ui: MagicMock) -> None:
    view = stats_mod.StatsView(dataset)
    view.render()

    table = fake_ui.table.return_value.classes.return_value
    rows = fake_ui.table.call_args.kwargs["rows"]
    assert [r["key"] for r in rows] == ["A1", "A2", "A3", "A4", "A5"]

    view.set_selection("A2")
    assert [r["key"] for r in table.rows] == ["A2"]
    table.update.assert_called_once()


def test_faces_view_render_and_toggle(dataset: Dataset, fake_ui: MagicMock) -> None:
    view = faces_mod.FacesView(dataset)
    view.render()

    svg_el = fake_ui.html.return_value
    initial = fake_ui.html.call_args.args[0]
    assert initial.count("<polygon") == 7  # every last value is the max -> high

    view.toggle_part("head", False)
    assert svg_el.content.count("<polygon") == 6


def test_faces_view_too_few_attributes_shows_error(fake_ui: MagicMock) -> None:
    ds = Dataset(
        rows=[{"Data": "d", "A1": 1.0}],
        header_map=[HeaderEntry("Data", "Date"), HeaderEntry("A1", "X")],
    )
    faces_mod.FacesView(ds).render()
    fake_ui.html.assert_not_called()
    assert "at least 5" in fake_ui.label.call_args.args[0]


def test_table_view_render_and_toggle_column(dataset: Dataset, fake_ui: MagicMock) -> None:
    view = table_mod.TableView(dataset)
    view.render()

    grid = fake_ui.aggrid.from_pandas.return_value.classes.return_value
    df = fake_ui.aggrid.from_pandas.call_args.args[0]
    assert list(df.columns) == ["Data", "A1", "A2", "A3", "A4", "A5"]

    view.set_column_visible("A2", False)
    grid.run_grid_method.assert_called_with("setColumnsVisible", ["A2"], False)
    with pytest.raises(KeyError):
        view.set_column_visible("A9", True)
