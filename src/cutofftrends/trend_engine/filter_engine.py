"""Apply a FilterState to the record frame."""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from cutofftrends.utils.logging import get_logger
from cutofftrends.trend_engine.facet_conventions import active_selections
from cutofftrends.trend_engine.records import FACET_COLUMNS

logger = get_logger(__name__)


def equality_mask(records: pd.DataFrame, selections: Mapping[str, Any]) -> pd.Series:
    """AND of ``records[col] == value`` over ``selections``.

    Absent cells (None) never equal a selection. Columns that are not facet
    columns of the record frame are ignored.
    """
    mask = pd.Series(True, index=records.index)
    for col, value in selections.items():
        if col not in FACET_COLUMNS or col not in records.columns:
            logger.debug(f"ignoring selection on unknown facet {col!r}")
            continue
        mask &= records[col] == str(value).strip()
    return mask


def apply_filters(records: pd.DataFrame, state: Mapping[str, Any]) -> pd.DataFrame:
    """Rows of ``records`` matching every set facet in ``state``.

    Unselected facets impose no constraint. Relative row order is preserved;
    the returned frame is a copy and never aliases ``records``.
    """
    selections = active_selections(dict(state))
    if not selections:
        return records.copy()
    df_f = records[equality_mask(records, selections).to_numpy(dtype=bool)].copy()
    logger.debug(f"filtered {len(records)} -> {len(df_f)} record(s) with {selections}")
    return df_f
