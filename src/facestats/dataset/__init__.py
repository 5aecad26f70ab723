"""Dataset model, ingestion and column conventions."""

from facestats.dataset.dataset import Dataset, HeaderEntry
from facestats.dataset.ingest import load_dataset, parse_csv_text, parse_excel

__all__ = [
    "Dataset",
    "HeaderEntry",
    "load_dataset",
    "parse_csv_text",
    "parse_excel",
]
