"""
Dataset ingestion: CSV text and Excel workbooks into a Dataset.

Column mapping:
  column 0      -> "Data" (stripped text; "" when the cell is empty)
  column i >= 1 -> "A{i}" (float, or None when the cell is not a finite number)

The original header text of every column is kept in Dataset.header_map. When
the header row is empty the originals are "Col1".."ColN".

Number parsing for text cells: the first "," is replaced by "." (decimal
comma) and the longest leading numeric prefix is used, so "12,5" -> 12.5 and
"7 kg" -> 7.0. Unparsable or non-finite text gives None.
"""

from __future__ import annotations

import datetime as _dt
import math
import numbers
import re
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import pandas as pd

from facestats.dataset.conventions import DATE_COLUMN, generic_key
from facestats.dataset.dataset import Dataset, HeaderEntry
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

CSV_SUFFIXES = frozenset({".csv"})
EXCEL_SUFFIXES = frozenset({".xlsx"})
SUPPORTED_SUFFIXES = CSV_SUFFIXES | EXCEL_SUFFIXES

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_NUMBER_PREFIX_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _is_missing(value: Any) -> bool:
    # None, NaN and NaT (empty Excel cells)
    if value is None:
        return True
    return pd.api.types.is_scalar(value) and not isinstance(value, str) and bool(pd.isna(value))


def parse_number(value: Any) -> Optional[float]:
    """Parse an attribute cell into a finite float, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        f = float(value)
        return f if math.isfinite(f) else None
    text = "" if value is None else str(value)
    text = text.replace(",", ".", 1).lstrip()
    m = _NUMBER_PREFIX_RE.match(text)
    if m is None:
        return None
    f = float(m.group(0).replace("Infinity", "inf"))
    return f if math.isfinite(f) else None


def _date_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, _dt.datetime):
        if value.time() == _dt.time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, _dt.date):
        return value.isoformat()
    return str(value).strip()


def map_rows_to_generic(
    header_row: Optional[Sequence[Any]],
    data_rows: Sequence[Sequence[Any]],
) -> Dataset:
    """Map raw header + data rows to generic keys.

    Args:
        header_row: Header cells (may be empty or None).
        data_rows: Data rows; short rows are padded with missing cells.

    Returns:
        Dataset; empty when there are no data rows.
    """
    if not data_rows:
        return Dataset()

    if header_row is not None and len(header_row) > 0:
        originals = ["" if _is_missing(h) else str(h).strip() for h in header_row]
    else:
        originals = [f"Col{i + 1}" for i in range(len(data_rows[0]))]

    header_map = [HeaderEntry(generic=generic_key(i), original=o) for i, o in enumerate(originals)]

    rows: list[dict[str, Any]] = []
    for cols in data_rows:
        row: dict[str, Any] = {}
        for i, h in enumerate(header_map):
            value = cols[i] if i < len(cols) else None
            if h.generic == DATE_COLUMN:
                row[h.generic] = _date_text(value)
            else:
                row[h.generic] = parse_number(value)
        rows.append(row)

    return Dataset(rows=rows, header_map=header_map)


def parse_csv_text(text: str) -> Dataset:
    """Parse comma-separated text (first line is the header).

    Blank lines are ignored; fewer than two non-blank lines gives an empty Dataset.
    No quoting is supported: every "," separates cells.
    """
    lines = [line.strip() for line in _LINE_SPLIT_RE.split(text)]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        return Dataset()

    header_row = [h.strip() for h in lines[0].split(",")]
    data_rows = [[c.strip() for c in line.split(",")] for line in lines[1:]]
    return map_rows_to_generic(header_row, data_rows)


def parse_excel(source: Union[str, Path, Any]) -> Dataset:
    """Parse the first sheet of an .xlsx workbook (first row is the header).

    Rows whose cells are all empty are skipped. Fewer than two rows gives an
    empty Dataset.
    """
    df = pd.read_excel(source, sheet_name=0, header=None, engine="openpyxl")
    sheet_rows = [row for row in df.values.tolist() if not all(_is_missing(v) for v in row)]
    if len(sheet_rows) < 2:
        return Dataset()
    return map_rows_to_generic(sheet_rows[0], sheet_rows[1:])


def load_dataset(path: Union[str, Path]) -> Dataset:
    """Load a CSV or Excel file into a Dataset.

    CSV is decoded as UTF-8 (BOM tolerated); undecodable bytes become U+FFFD.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If the file suffix is not supported.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Only CSV and Excel files are supported (.csv, .xlsx); got {path.name!r}"
        )
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    if suffix in CSV_SUFFIXES:
        dataset = parse_csv_text(path.read_text(encoding="utf-8-sig", errors="replace"))
    else:
        dataset = parse_excel(path)

    logger.info(
        "loaded %s: rows=%d columns=%d",
        path.name,
        len(dataset.rows),
        len(dataset.header_map),
    )
    return replace(dataset, source_name=path.name)
