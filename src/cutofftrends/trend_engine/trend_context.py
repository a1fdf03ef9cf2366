"""Owned context for one dataset generation.

Provides TrendContext, the entry point for presentation layers: it owns the
normalized records, the facet chain, the current FilterState, the comparison
registry and the engine config. Every derived view (options, series, aligned
rows, deltas) is recomputed on demand from the pure functions in this package;
nothing derived is cached.

**Public API:**

- **__init__(records, ...)**: Normalize raw records and start with an empty selection.
- **select(facet, value)** / **clear(facet)**: Chain-aware selection updates.
- **facet_options(facet)** / **all_facet_options()**: Cascading option lists.
- **current_series()** / **has_trend()** / **current_delta()**: Single-selection trend.
- **add_to_comparison()** / **remove_from_comparison(key)** / **reset_comparison()**: Registry.
- **comparison_rows()** / **comparison_deltas()**: Multi-entity view.
- **update_records(records)**: Start a new dataset generation.
"""

from __future__ import annotations

from typing import Any, Optional

import pandas as pd

from cutofftrends.utils.logging import get_logger
from cutofftrends.trend_engine.comparison_aligner import (
    DeltaSummary,
    align,
    compute_deltas,
    series_delta,
)
from cutofftrends.trend_engine.comparison_registry import (
    AddResult,
    ComparisonEntry,
    ComparisonRegistry,
    short_program_name,
)
from cutofftrends.trend_engine.facet_chain import DEFAULT_FACET_CHAIN, FacetChain
from cutofftrends.trend_engine.facet_conventions import FilterState, format_filter_display
from cutofftrends.trend_engine.facet_resolver import resolve_all_facet_options, resolve_facet_options
from cutofftrends.trend_engine.filter_engine import apply_filters
from cutofftrends.trend_engine.records import normalize_records
from cutofftrends.trend_engine.round_series import RoundPoint, build_series, has_trend
from cutofftrends.trend_engine.trend_config import TrendConfig

logger = get_logger(__name__)


class TrendContext:
    """Records, selection and comparison state for one dataset generation."""

    def __init__(
        self,
        records: Any,
        *,
        chain: FacetChain = DEFAULT_FACET_CHAIN,
        config: Optional[TrendConfig] = None,
    ) -> None:
        """Initialize with raw or normalized records.

        Args:
            records: Anything normalize_records() accepts (DataFrame, rows, Record values).
            chain: Facet dependency order. Default is
                college_type -> institute -> program -> quota -> category -> gender.
            config: Engine settings; defaults to TrendConfig().
        """
        self.chain = chain
        self.config = config if config is not None else TrendConfig()
        self.records: pd.DataFrame = normalize_records(records)
        self.filter_state: FilterState = chain.empty_state()
        self.registry = ComparisonRegistry(chain=chain, config=self.config)
        logger.info(f"trend context ready with {len(self.records)} record(s)")

    def update_records(self, records: Any) -> None:
        """Replace the dataset; selection and comparison start over."""
        self.records = normalize_records(records)
        self.filter_state = self.chain.empty_state()
        self.registry.reset()
        logger.info(f"records replaced, {len(self.records)} record(s)")

    # -----------------------------
    # Selection
    # -----------------------------
    def select(self, facet: str, value: Any) -> FilterState:
        self.filter_state = self.chain.select(self.filter_state, facet, value)
        return dict(self.filter_state)

    def clear(self, facet: str) -> FilterState:
        self.filter_state = self.chain.clear(self.filter_state, facet)
        return dict(self.filter_state)

    def reset_selection(self) -> None:
        self.filter_state = self.chain.empty_state()

    @property
    def is_fully_specified(self) -> bool:
        return self.chain.is_fully_specified(self.filter_state)

    @property
    def selection_label(self) -> str:
        return format_filter_display(self.filter_state)

    def facet_options(self, facet: str) -> list[str]:
        return resolve_facet_options(self.records, self.chain, facet, self.filter_state)

    def all_facet_options(self) -> dict[str, list[str]]:
        return resolve_all_facet_options(self.records, self.chain, self.filter_state)

    # -----------------------------
    # Single selection trend
    # -----------------------------
    def filtered_records(self) -> pd.DataFrame:
        return apply_filters(self.records, self.filter_state)

    def current_series(self) -> tuple[RoundPoint, ...]:
        """Round series for the current selection; empty until it is fully specified.

        A partial selection mixes rows of different programs, quotas or
        categories, and their first-per-round points do not form one trend.
        """
        if not self.is_fully_specified:
            return ()
        return build_series(self.filtered_records())

    def has_trend(self) -> bool:
        """False for a partial selection, see current_series()."""
        return has_trend(self.current_series(), self.config.min_trend_points)

    def current_delta(self) -> Optional[DeltaSummary]:
        """Delta for the current selection, or None unless it is fully specified."""
        if not self.is_fully_specified:
            return None
        first_round, last_round, opening, closing = series_delta(
            self.current_series(), self.config.percent_decimals
        )
        return DeltaSummary(
            key=self.registry.key_for(self.filter_state),
            short_name=short_program_name(self.filter_state.get("program", "")),
            first_round=first_round,
            last_round=last_round,
            opening=opening,
            closing=closing,
        )

    # -----------------------------
    # Comparison
    # -----------------------------
    @property
    def comparison_active(self) -> bool:
        return self.registry.is_active

    def add_to_comparison(self) -> AddResult:
        """Pin the current selection; see ComparisonRegistry.add()."""
        return self.registry.add(self.records, self.filter_state)

    def remove_from_comparison(self, key: str) -> bool:
        return self.registry.remove(key)

    def reset_comparison(self) -> None:
        self.registry.reset()

    def comparison_entries(self) -> tuple[ComparisonEntry, ...]:
        return self.registry.entries()

    def comparison_rows(self) -> list[dict[str, Any]]:
        return align(self.registry.entries())

    def comparison_deltas(self) -> list[DeltaSummary]:
        return compute_deltas(self.registry.entries(), self.config.percent_decimals)
