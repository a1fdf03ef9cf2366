"""Collapse a filtered record subset into one point per counseling round."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import pandas as pd

from cutofftrends.trend_engine.records import optional_int

# A trend needs at least two rounds to show a change.
MIN_TREND_POINTS = 2


@dataclass(frozen=True)
class RoundPoint:
    """Opening/closing rank for one round. Absent ranks are None."""
    round: int
    opening_rank: Optional[int] = None
    closing_rank: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "opening_rank": self.opening_rank,
            "closing_rank": self.closing_rank,
        }


def build_series(filtered: pd.DataFrame) -> tuple[RoundPoint, ...]:
    """One RoundPoint per distinct round, ascending by round.

    When several records share a round, the first one in frame order wins;
    values from later duplicates are not merged in.
    """
    if not len(filtered):
        return ()
    firsts = filtered.drop_duplicates(subset="round", keep="first")
    firsts = firsts.sort_values("round", kind="stable")
    return tuple(
        RoundPoint(
            round=int(row.round),
            opening_rank=optional_int(row.opening_rank),
            closing_rank=optional_int(row.closing_rank),
        )
        for row in firsts.itertuples(index=False)
    )


def has_trend(series: Sequence[RoundPoint], min_points: int = MIN_TREND_POINTS) -> bool:
    """True if ``series`` has enough rounds for a trend display."""
    return len(series) >= min_points


def series_rounds(series: Sequence[RoundPoint]) -> list[int]:
    return [p.round for p in series]
