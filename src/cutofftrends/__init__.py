"""
cutofftrends: cascading filters and round-by-round rank trends for admission cutoff tables.

This package provides:
- TrendContext: owned records + selection + comparison state for a dataset
- Pure derivations: facet option resolution, filtering, round series,
  comparison alignment and first-vs-last deltas
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from cutofftrends.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the host application's configuration.
"""

import logging

from cutofftrends.utils.logging import configure_logging, get_logger

from cutofftrends.trend_engine import (
    FACET_NONE,
    ComparisonRegistry,
    FacetChain,
    TrendConfig,
    TrendContext,
    normalize_records,
)

# NullHandler so logs don't reach root when no application has configured logging.
_logger = logging.getLogger("cutofftrends")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "FACET_NONE",
    "ComparisonRegistry",
    "FacetChain",
    "TrendConfig",
    "TrendContext",
    "configure_logging",
    "get_logger",
    "normalize_records",
]

__version__ = "0.1.0"
