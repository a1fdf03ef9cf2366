"""Selections pinned for side-by-side comparison.

The registry is the only mutable state in the trend engine. add/remove/reset
are serialized with a lock, and an entry is fully built (series included)
before the lock is taken, so a reader never sees a half-inserted entry.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

import pandas as pd

from cutofftrends.utils.logging import get_logger
from cutofftrends.trend_engine.facet_chain import DEFAULT_FACET_CHAIN, FacetChain
from cutofftrends.trend_engine.filter_engine import apply_filters
from cutofftrends.trend_engine.round_series import RoundPoint, build_series, has_trend
from cutofftrends.trend_engine.trend_config import TrendConfig

logger = get_logger(__name__)

KEY_SEPARATOR = "|"


class RejectReason(Enum):
    """Why ComparisonRegistry.add() left the registry unchanged."""
    INCOMPLETE_SELECTION = "incomplete_selection"
    DUPLICATE_KEY = "duplicate_key"
    INSUFFICIENT_ROUNDS = "insufficient_rounds"


@dataclass(frozen=True)
class ComparisonEntry:
    """A fully specified selection with its round series.

    ``key`` is the identity; ``display_name`` and ``short_name`` are labels only.
    """
    key: str
    display_name: str
    short_name: str
    series: tuple[RoundPoint, ...]
    color_index: int
    selection: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "display_name": self.display_name,
            "short_name": self.short_name,
            "series": [p.to_dict() for p in self.series],
            "color_index": self.color_index,
            "selection": dict(self.selection),
        }


@dataclass(frozen=True)
class AddResult:
    """Outcome of ComparisonRegistry.add(); truthy when the entry was added."""
    entry: Optional[ComparisonEntry] = None
    reason: Optional[RejectReason] = None

    @property
    def added(self) -> bool:
        return self.entry is not None

    def __bool__(self) -> bool:
        return self.added


def short_program_name(program: str) -> str:
    """Program name up to its first parenthesis, e.g. 'Computer Science (4 Years...)' -> 'Computer Science'."""
    return str(program).split("(", 1)[0].strip()


def short_institute_name(institute: str) -> str:
    """Institute name up to its first comma."""
    return str(institute).split(",", 1)[0].strip()


def display_name_for(institute: str, program: str) -> str:
    return f"{short_institute_name(institute)} - {short_program_name(program)}"


class ComparisonRegistry:
    """Insertion-ordered set of ComparisonEntry, unique by key."""

    def __init__(
        self,
        *,
        chain: FacetChain = DEFAULT_FACET_CHAIN,
        config: Optional[TrendConfig] = None,
    ) -> None:
        self.chain = chain
        self.config = config if config is not None else TrendConfig()
        self._entries: dict[str, ComparisonEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def is_active(self) -> bool:
        """True while at least one entry is pinned (multi-entity view)."""
        return len(self._entries) > 0

    def key_for(self, state: Mapping[str, Any]) -> str:
        return self.chain.composite_key(dict(state), sep=KEY_SEPARATOR)

    def entries(self) -> tuple[ComparisonEntry, ...]:
        """Snapshot of the entries in insertion order."""
        with self._lock:
            return tuple(self._entries.values())

    def keys(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._entries.keys())

    def get(self, key: str) -> Optional[ComparisonEntry]:
        with self._lock:
            return self._entries.get(key)

    def add(self, records: pd.DataFrame, state: Mapping[str, Any]) -> AddResult:
        """Pin a fully specified selection.

        No-op (falsy AddResult with a reason) when the selection is incomplete,
        its key is already pinned, or its series has fewer than
        ``config.min_trend_points`` rounds.
        """
        state = dict(state)
        if not self.chain.is_fully_specified(state):
            logger.debug(f"rejecting comparison add: incomplete selection {state}")
            return AddResult(reason=RejectReason.INCOMPLETE_SELECTION)

        key = self.key_for(state)
        if key in self._entries:
            logger.debug(f"rejecting comparison add: duplicate key {key!r}")
            return AddResult(reason=RejectReason.DUPLICATE_KEY)

        selection = {f: state[f] for f in self.chain}
        series = build_series(apply_filters(records, selection))
        if not has_trend(series, self.config.min_trend_points):
            logger.debug(f"rejecting comparison add: {len(series)} round(s) for {key!r}")
            return AddResult(reason=RejectReason.INSUFFICIENT_ROUNDS)

        with self._lock:
            # re-check: another add may have won the race while the series was built
            if key in self._entries:
                return AddResult(reason=RejectReason.DUPLICATE_KEY)
            entry = ComparisonEntry(
                key=key,
                display_name=display_name_for(state.get("institute", ""), state.get("program", "")),
                short_name=short_program_name(state.get("program", "")),
                series=series,
                color_index=len(self._entries) % self.config.palette_size,
                selection=selection,
            )
            self._entries[key] = entry
        logger.debug(f"pinned {key!r} ({len(series)} rounds), {len(self._entries)} entries")
        return AddResult(entry=entry)

    def remove(self, key: str) -> bool:
        """Remove ``key`` if present; returns True if something was removed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug(f"removed {key!r}, {len(self._entries)} entries left")
        return removed

    def reset(self) -> None:
        """Remove every entry in one step."""
        with self._lock:
            self._entries = {}
