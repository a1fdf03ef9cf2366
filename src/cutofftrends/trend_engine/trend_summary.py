"""Tabular views of derived trend data.

Builds pandas DataFrames from series, aligned rows and delta summaries for
presentation layers that render tables or export text. Does not depend on
any plotting or UI library.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from cutofftrends.trend_engine.comparison_aligner import DeltaSummary, series_labels
from cutofftrends.trend_engine.comparison_registry import ComparisonEntry
from cutofftrends.trend_engine.round_series import RoundPoint

SERIES_COLUMNS = ["round", "opening_rank", "closing_rank"]

DELTA_COLUMNS = [
    "key",
    "short_name",
    "first_round",
    "last_round",
    "opening_first",
    "opening_last",
    "opening_diff",
    "opening_percent",
    "closing_first",
    "closing_last",
    "closing_diff",
    "closing_percent",
]


def series_frame(series: Sequence[RoundPoint]) -> pd.DataFrame:
    """One row per round; absent ranks are <NA>."""
    df = pd.DataFrame([p.to_dict() for p in series], columns=SERIES_COLUMNS)
    return df.astype({"round": "Int64", "opening_rank": "Int64", "closing_rank": "Int64"})


def aligned_frame(entries: Sequence[ComparisonEntry], rows: Sequence[dict]) -> pd.DataFrame:
    """Wide table of aligned rows indexed by round.

    Columns follow entry insertion order (opening then closing per entry);
    cells missing from a row become <NA>.
    """
    labels = series_labels(entries)
    columns = []
    for entry in entries:
        label = labels[entry.key]
        columns.extend([f"{label}-opening", f"{label}-closing"])
    df = pd.DataFrame(list(rows), columns=["round"] + columns)
    return df.astype("Int64").set_index("round")


def delta_frame(deltas: Sequence[DeltaSummary]) -> pd.DataFrame:
    """One row per entry with opening/closing first, last, diff and percent."""
    records = []
    for d in deltas:
        records.append({
            "key": d.key,
            "short_name": d.short_name,
            "first_round": d.first_round,
            "last_round": d.last_round,
            "opening_first": d.opening.first,
            "opening_last": d.opening.last,
            "opening_diff": d.opening.diff,
            "opening_percent": d.opening.percent,
            "closing_first": d.closing.first,
            "closing_last": d.closing.last,
            "closing_diff": d.closing.diff,
            "closing_percent": d.closing.percent,
        })
    df = pd.DataFrame(records, columns=DELTA_COLUMNS)
    int_cols = [c for c in DELTA_COLUMNS if c not in ("key", "short_name") and not c.endswith("_percent")]
    return df.astype({c: "Int64" for c in int_cols} | {"opening_percent": "Float64", "closing_percent": "Float64"})


def delta_report(deltas: Sequence[DeltaSummary]) -> str:
    """Tab-separated text of delta_frame(); unavailable values are 'n/a'."""
    if not deltas:
        return "(none)"
    df = delta_frame(deltas).astype(object).where(lambda x: x.notna(), "n/a")
    return df.to_csv(sep="\t", index=False).rstrip("\n")
