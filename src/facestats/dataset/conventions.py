"""Column and display conventions shared by the explorer views.

Single source of truth for the date column key, the "all attributes"
selection sentinel, attribute discovery, labels, colors and number
formatting, so the table, chart, statistics and faces views agree.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional, Sequence

from facestats.dataset.dataset import HeaderEntry

# Generic key of the first (date-like) column.
DATE_COLUMN = "Data"

# Prefix of generic attribute keys: A1, A2, ...
ATTRIBUTE_PREFIX = "A"

# Sentinel value meaning "all attributes" in attribute select dropdowns.
ALL_ATTRIBUTES = "(all)"

# Default palette; attribute i is drawn with LINE_COLORS[i % len(LINE_COLORS)].
LINE_COLORS: tuple[str, ...] = ("#8884d8", "#82ca9d", "#ff7300", "#ff0000", "#0088fe")

# Placeholder shown for statistics that are not defined.
MISSING_TEXT = "–"


def generic_key(index: int) -> str:
    """Generic key for the column at index (0 -> 'Data', 1 -> 'A1', ...)."""
    return DATE_COLUMN if index == 0 else f"{ATTRIBUTE_PREFIX}{index}"


def attribute_keys(rows: Sequence[Mapping[str, Any]], *, date_column: str = DATE_COLUMN) -> list[str]:
    """Attribute keys: every key of the first row except the date column."""
    if not rows:
        return []
    return [k for k in rows[0].keys() if k != date_column]


def header_label_map(header_map: Iterable[HeaderEntry]) -> dict[str, str]:
    """Map generic key -> original header (generic key when the original is blank)."""
    result: dict[str, str] = {}
    for h in header_map:
        if not h.generic:
            continue
        result[h.generic] = h.original if h.original else h.generic
    return result


def attr_label(generic: str, header_map: Iterable[HeaderEntry]) -> str:
    """Display label 'A1 (EUR)', or just the generic key if there is no distinct original."""
    original = header_label_map(header_map).get(generic)
    if not original or original == generic:
        return generic
    return f"{generic} ({original})"


def selected_attributes(selection: Optional[str], keys: Sequence[str]) -> list[str]:
    """Attributes to show for a dropdown selection (ALL_ATTRIBUTES or one key)."""
    if selection is None or selection == ALL_ATTRIBUTES:
        return list(keys)
    return [selection]


def color_for_index(index: int, palette: Sequence[str] = LINE_COLORS) -> str:
    """Palette color for the attribute at index, cycling through the palette."""
    return palette[index % len(palette)]


def format_number(x: Optional[float], digits: int = 4) -> str:
    """Fixed-point text with digits decimals; MISSING_TEXT for None or NaN."""
    if x is None:
        return MISSING_TEXT
    if isinstance(x, float) and math.isnan(x):
        return MISSING_TEXT
    return f"{x:.{digits}f}"
