"""Ordered dependency between filterable facets.

Changing the facet at chain position *i* resets every facet after *i*. The
reset set is derived from position alone, so extending the chain needs no
change to the transition logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cutofftrends.trend_engine.facet_conventions import (
    FACET_NONE,
    FilterState,
    default_filter_state,
    is_set,
)
from cutofftrends.trend_engine.records import FACET_COLUMNS


@dataclass(frozen=True)
class FacetChain:
    """Immutable ordered list of facet names."""
    facets: tuple[str, ...] = FACET_COLUMNS

    def __post_init__(self) -> None:
        facets = tuple(self.facets)
        if len(set(facets)) != len(facets):
            raise ValueError(f"FacetChain contains duplicate facets: {facets!r}")
        object.__setattr__(self, "facets", facets)

    def __iter__(self):
        return iter(self.facets)

    def __len__(self) -> int:
        return len(self.facets)

    def __contains__(self, facet: object) -> bool:
        return facet in self.facets

    def position(self, facet: str) -> int:
        """Index of ``facet`` in the chain; ValueError if unknown."""
        try:
            return self.facets.index(facet)
        except ValueError:
            raise ValueError(f"Unknown facet {facet!r}; chain is {self.facets!r}") from None

    def upstream(self, facet: str) -> tuple[str, ...]:
        """Facets strictly before ``facet``."""
        return self.facets[: self.position(facet)]

    def downstream(self, facet: str) -> tuple[str, ...]:
        """Facets strictly after ``facet``; these reset when ``facet`` changes."""
        return self.facets[self.position(facet) + 1 :]

    def empty_state(self) -> FilterState:
        return default_filter_state(self.facets)

    def select(self, state: FilterState, facet: str, value: Any) -> FilterState:
        """Return a new state with ``facet`` set to ``value`` and downstream facets reset.

        Passing FACET_NONE (or None) clears the facet; downstream is reset either way.
        Facets before ``facet`` are copied unchanged. ``state`` is not modified.
        """
        new_state = self.empty_state()
        for f in self.upstream(facet):
            new_state[f] = state.get(f, FACET_NONE)
        new_state[facet] = value if is_set(value) else FACET_NONE
        return new_state

    def clear(self, state: FilterState, facet: str) -> FilterState:
        return self.select(state, facet, FACET_NONE)

    def is_fully_specified(self, state: FilterState) -> bool:
        return all(is_set(state.get(f)) for f in self.facets)

    def next_unselected(self, state: FilterState) -> str | None:
        """First facet in chain order with no selection, or None when fully specified."""
        for f in self.facets:
            if not is_set(state.get(f)):
                return f
        return None

    def composite_key(self, state: FilterState, sep: str = "|") -> str:
        """Ordered concatenation of the facet values (chain order).

        Backslashes and ``sep`` inside a value are backslash-escaped, so values
        that contain the separator cannot produce the same key as a different
        split of the same text.
        """
        return sep.join(_escape_key_part(str(state.get(f, FACET_NONE)), sep) for f in self.facets)


def _escape_key_part(value: str, sep: str) -> str:
    return value.replace("\\", "\\\\").replace(sep, "\\" + sep)


DEFAULT_FACET_CHAIN = FacetChain()
