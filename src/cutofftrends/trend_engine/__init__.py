"""Cascading facet resolution and round-trend derivation over cutoff records."""

from cutofftrends.trend_engine.comparison_aligner import DeltaSummary, RankDelta, align, compute_delta, compute_deltas
from cutofftrends.trend_engine.comparison_registry import AddResult, ComparisonEntry, ComparisonRegistry, RejectReason
from cutofftrends.trend_engine.facet_chain import DEFAULT_FACET_CHAIN, FacetChain
from cutofftrends.trend_engine.facet_conventions import FACET_NONE
from cutofftrends.trend_engine.facet_resolver import resolve_all_facet_options, resolve_facet_options
from cutofftrends.trend_engine.filter_engine import apply_filters
from cutofftrends.trend_engine.records import Record, normalize_records
from cutofftrends.trend_engine.round_series import RoundPoint, build_series, has_trend
from cutofftrends.trend_engine.trend_config import TrendConfig, TrendConfigStore
from cutofftrends.trend_engine.trend_context import TrendContext

__all__ = [
    "AddResult",
    "ComparisonEntry",
    "ComparisonRegistry",
    "DEFAULT_FACET_CHAIN",
    "DeltaSummary",
    "FACET_NONE",
    "FacetChain",
    "RankDelta",
    "Record",
    "RejectReason",
    "RoundPoint",
    "TrendConfig",
    "TrendConfigStore",
    "TrendContext",
    "align",
    "apply_filters",
    "build_series",
    "compute_delta",
    "compute_deltas",
    "has_trend",
    "normalize_records",
    "resolve_all_facet_options",
    "resolve_facet_options",
]
