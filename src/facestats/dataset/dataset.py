"""In-memory dataset shared by all explorer views.

A Dataset holds row records keyed by generic column names ("Data", "A1",
"A2", ...) plus the header map back to the column names found in the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd


@dataclass(frozen=True)
class HeaderEntry:
    """One column of the source file: generic key and original header text."""
    generic: str
    original: str


@dataclass
class Dataset:
    """Rows and header map produced by facestats.dataset.ingest.

    Attributes:
        rows: One dict per data row. The date column holds a str; attribute
            columns hold a float or None (missing / non-numeric cell).
        header_map: Generic -> original column names, in file column order.
        source_name: File name the data was loaded from ("" if unknown).
    """
    rows: list[dict[str, Any]] = field(default_factory=list)
    header_map: list[HeaderEntry] = field(default_factory=list)
    source_name: str = ""

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0

    @property
    def columns(self) -> list[str]:
        """Generic column keys in file order."""
        return [h.generic for h in self.header_map]

    def original_name(self, generic: str) -> Optional[str]:
        """Original header text for a generic key, or None if unknown."""
        for h in self.header_map:
            if h.generic == generic:
                return h.original
        return None

    def to_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame with columns in file order (missing cells as NaN)."""
        if self.is_empty:
            return pd.DataFrame(columns=self.columns)
        return pd.DataFrame(self.rows, columns=self.columns or None)
