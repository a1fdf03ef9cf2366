"""Facet selection conventions for the trend engine.

Single source of truth for the "unselected" sentinel and the FilterState
helpers, so FacetChain, the resolver, the filter engine and the registry all
agree on what a set facet is.
"""

from __future__ import annotations

from typing import Any, Iterable

# Sentinel value meaning "no selection" for a facet.
FACET_NONE = "(none)"

# A FilterState maps facet name -> selected value or FACET_NONE.
FilterState = dict[str, Any]


def is_set(value: Any) -> bool:
    """True if a facet value is an actual selection (not FACET_NONE, None or blank)."""
    if value is None or value == FACET_NONE:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def default_filter_state(facets: Iterable[str]) -> FilterState:
    """Build a FilterState with every facet unselected."""
    return {facet: FACET_NONE for facet in facets}


def active_selections(state: FilterState) -> dict[str, Any]:
    """Only the facets in ``state`` that hold a real value, in insertion order."""
    return {k: v for k, v in state.items() if is_set(v)}


def is_filtered(state: FilterState) -> bool:
    """True if any facet in ``state`` applies a filter."""
    return any(is_set(v) for v in state.values())


def format_filter_display(state: FilterState) -> str:
    """Short label for headers / tooltips: active selections or 'All'."""
    parts = [f"{k}={v}" for k, v in active_selections(state).items()]
    return ", ".join(parts) if parts else "All"
