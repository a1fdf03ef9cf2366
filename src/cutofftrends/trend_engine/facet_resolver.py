"""Cascading facet options: which values remain valid for the next facet.

Only facets strictly before the requested one are used as predicates, so a
stale downstream selection can never hide options for an upstream facet.
"""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from cutofftrends.utils.logging import get_logger
from cutofftrends.trend_engine.facet_chain import FacetChain
from cutofftrends.trend_engine.facet_conventions import is_set
from cutofftrends.trend_engine.filter_engine import equality_mask

logger = get_logger(__name__)


def resolve_facet_options(
    records: pd.DataFrame,
    chain: FacetChain,
    field: str,
    state: Mapping[str, Any],
) -> list[str]:
    """Sorted distinct values of ``field`` among rows matching the upstream selections.

    Args:
        records: Normalized record frame.
        chain: Facet chain defining what "upstream" means.
        field: Facet to resolve; must be in ``chain``.
        state: Current FilterState; values at or after ``field`` are ignored.

    Returns:
        Ascending list of non-absent values. Empty when nothing matches.

    Raises:
        ValueError: If ``field`` is not part of ``chain``.
    """
    upstream = {f: state[f] for f in chain.upstream(field) if is_set(state.get(f))}
    if not len(records) or field not in records.columns:
        return []
    if upstream:
        values = records.loc[equality_mask(records, upstream).to_numpy(dtype=bool), field]
    else:
        values = records[field]
    options = sorted({v for v in values.tolist() if v is not None})
    logger.debug(f"{field}: {len(options)} option(s) given {upstream}")
    return options


def resolve_all_facet_options(
    records: pd.DataFrame,
    chain: FacetChain,
    state: Mapping[str, Any],
) -> dict[str, list[str]]:
    """Options for every facet in chain order."""
    return {f: resolve_facet_options(records, chain, f, state) for f in chain}
