"""Round-aligned comparison rows and first-vs-last rank deltas.

Rows cover the union of rounds present in the pinned series; there is no
fixed round count. A field is present in a row only when that entry has a
defined value for that round. Consumers treat a missing field as "no data".

Delta sign: ``diff = first - last``. A positive diff means the rank number
went down between the first and the last round.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from cutofftrends.trend_engine.comparison_registry import ComparisonEntry
from cutofftrends.trend_engine.round_series import RoundPoint
from cutofftrends.trend_engine.trend_config import DEFAULT_PERCENT_DECIMALS

OPENING_SUFFIX = "-opening"
CLOSING_SUFFIX = "-closing"


def series_labels(entries: Sequence[ComparisonEntry]) -> dict[str, str]:
    """Map entry key -> field label prefix.

    The label is the entry's short name; repeated short names get ' #2', ' #3'...
    in insertion order so fields from different entries never collide.
    """
    labels: dict[str, str] = {}
    seen: dict[str, int] = {}
    for entry in entries:
        n = seen.get(entry.short_name, 0) + 1
        seen[entry.short_name] = n
        labels[entry.key] = entry.short_name if n == 1 else f"{entry.short_name} #{n}"
    return labels


def align(entries: Sequence[ComparisonEntry]) -> list[dict[str, Any]]:
    """One row per round in the union of all entries' rounds, ascending.

    Each row is ``{"round": r, "<label>-opening": int, "<label>-closing": int, ...}``.
    """
    labels = series_labels(entries)
    rounds = sorted({p.round for entry in entries for p in entry.series})
    rows: dict[int, dict[str, Any]] = {r: {"round": r} for r in rounds}
    for entry in entries:
        label = labels[entry.key]
        for point in entry.series:
            row = rows[point.round]
            if point.opening_rank is not None:
                row[f"{label}{OPENING_SUFFIX}"] = point.opening_rank
            if point.closing_rank is not None:
                row[f"{label}{CLOSING_SUFFIX}"] = point.closing_rank
    return [rows[r] for r in rounds]


@dataclass(frozen=True)
class RankDelta:
    """Change of one rank kind between the first and the last round.

    ``diff`` is None when either endpoint is absent; ``percent`` is None when
    ``diff`` is None or the first value is 0.
    """
    first: Optional[int] = None
    last: Optional[int] = None
    diff: Optional[int] = None
    percent: Optional[float] = None

    @property
    def available(self) -> bool:
        return self.diff is not None

    @property
    def percent_available(self) -> bool:
        return self.percent is not None

    def to_dict(self) -> dict[str, Any]:
        return {"first": self.first, "last": self.last, "diff": self.diff, "percent": self.percent}


@dataclass(frozen=True)
class DeltaSummary:
    key: str
    short_name: str
    first_round: Optional[int]
    last_round: Optional[int]
    opening: RankDelta
    closing: RankDelta

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "short_name": self.short_name,
            "first_round": self.first_round,
            "last_round": self.last_round,
            "opening": self.opening.to_dict(),
            "closing": self.closing.to_dict(),
        }


def rank_delta(
    first: Optional[int],
    last: Optional[int],
    percent_decimals: int = DEFAULT_PERCENT_DECIMALS,
) -> RankDelta:
    if first is None or last is None:
        return RankDelta(first=first, last=last)
    diff = first - last
    percent = None if first == 0 else round(diff / first * 100, percent_decimals)
    return RankDelta(first=first, last=last, diff=diff, percent=percent)


def series_delta(
    series: Sequence[RoundPoint],
    percent_decimals: int = DEFAULT_PERCENT_DECIMALS,
) -> tuple[Optional[int], Optional[int], RankDelta, RankDelta]:
    """(first_round, last_round, opening delta, closing delta) for one series."""
    if not series:
        return None, None, RankDelta(), RankDelta()
    first = min(series, key=lambda p: p.round)
    last = max(series, key=lambda p: p.round)
    return (
        first.round,
        last.round,
        rank_delta(first.opening_rank, last.opening_rank, percent_decimals),
        rank_delta(first.closing_rank, last.closing_rank, percent_decimals),
    )


def compute_delta(entry: ComparisonEntry, percent_decimals: int = DEFAULT_PERCENT_DECIMALS) -> DeltaSummary:
    first_round, last_round, opening, closing = series_delta(entry.series, percent_decimals)
    return DeltaSummary(
        key=entry.key,
        short_name=entry.short_name,
        first_round=first_round,
        last_round=last_round,
        opening=opening,
        closing=closing,
    )


def compute_deltas(
    entries: Sequence[ComparisonEntry],
    percent_decimals: int = DEFAULT_PERCENT_DECIMALS,
) -> list[DeltaSummary]:
    return [compute_delta(e, percent_decimals) for e in entries]
