"""
facestats: descriptive statistics and Chernoff faces for tabular time series.

This package provides:
- algorithms: quantiles, mode, descriptive summaries and the quantile level classifier
- dataset: CSV / Excel ingestion into generic-keyed rows
- views: NiceGUI table, chart, statistics and faces views
- explorer_app: the standalone upload-and-explore application
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from facestats.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library (imported by other applications), logging is
automatically handled by the parent application's configuration.
"""

import logging

from facestats.utils.logging import configure_logging, get_logger

from facestats.algorithms import (
    StatisticsSummary,
    aggregate_stats,
    classify_level,
    classify_levels,
    compute_mode,
    compute_stats,
    quantile,
)
from facestats.dataset import Dataset, load_dataset

__version__ = "0.1.0"

# Ensure facestats logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("facestats")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "Dataset",
    "StatisticsSummary",
    "aggregate_stats",
    "classify_level",
    "classify_levels",
    "compute_mode",
    "compute_stats",
    "configure_logging",
    "get_logger",
    "load_dataset",
    "quantile",
]
