"""Unit tests for ComparisonRegistry add/remove/reset rules."""

import threading

from cutofftrends.trend_engine.comparison_registry import (
    ComparisonRegistry,
    RejectReason,
    display_name_for,
    short_program_name,
)
from cutofftrends.trend_engine.facet_chain import DEFAULT_FACET_CHAIN
from cutofftrends.trend_engine.records import normalize_records
from cutofftrends.trend_engine.trend_config import TrendConfig


def test_add_valid_selection(records, iitb_cse_state):
    registry = ComparisonRegistry()
    result = registry.add(records, iitb_cse_state)
    assert result
    assert result.added is True
    assert result.reason is None
    entry = result.entry
    assert entry.key == "|".join(iitb_cse_state[f] for f in DEFAULT_FACET_CHAIN)
    assert entry.display_name == "Indian Institute of Technology Bombay - Computer Science and Engineering"
    assert entry.short_name == "Computer Science and Engineering"
    assert [p.round for p in entry.series] == [1, 2, 3]
    assert entry.color_index == 0
    assert len(registry) == 1
    assert entry.key in registry
    assert registry.is_active is True


def test_duplicate_add_is_noop(records, iitb_cse_state):
    registry = ComparisonRegistry()
    assert registry.add(records, iitb_cse_state)
    again = registry.add(records, dict(iitb_cse_state))
    assert not again
    assert again.reason is RejectReason.DUPLICATE_KEY
    assert len(registry) == 1


def test_separator_inside_values_gives_distinct_keys(make_row):
    rows = [
        make_row(institute="A|B", program="C", round=1, closing_rank=10),
        make_row(institute="A|B", program="C", round=2, closing_rank=12),
        make_row(institute="A", program="B|C", round=1, closing_rank=20),
        make_row(institute="A", program="B|C", round=2, closing_rank=22),
    ]
    base = {k: v for k, v in make_row().items() if k in DEFAULT_FACET_CHAIN}
    registry = ComparisonRegistry()
    first = registry.add(normalize_records(rows), dict(base, institute="A|B", program="C"))
    second = registry.add(normalize_records(rows), dict(base, institute="A", program="B|C"))
    assert first and second
    assert first.entry.key != second.entry.key
    assert len(registry) == 2
    assert [p.closing_rank for p in registry.get(second.entry.key).series] == [20, 22]


def test_incomplete_selection_rejected(records, iitb_cse_state):
    registry = ComparisonRegistry()
    partial = DEFAULT_FACET_CHAIN.clear(iitb_cse_state, "gender")
    result = registry.add(records, partial)
    assert not result
    assert result.reason is RejectReason.INCOMPLETE_SELECTION
    assert len(registry) == 0
    assert registry.is_active is False


def test_insufficient_rounds_rejected(records, iitb_cse_state):
    """OBC-NCL has a single round in the fixture."""
    registry = ComparisonRegistry()
    result = registry.add(records, dict(iitb_cse_state, category="OBC-NCL"))
    assert result.reason is RejectReason.INSUFFICIENT_ROUNDS
    assert len(registry) == 0


def test_min_trend_points_from_config(records, nit_eee_state):
    registry = ComparisonRegistry(config=TrendConfig(min_trend_points=3))
    assert registry.add(records, nit_eee_state).reason is RejectReason.INSUFFICIENT_ROUNDS


def test_color_index_uses_size_mod_palette(records, iitb_cse_state, nit_eee_state):
    registry = ComparisonRegistry(config=TrendConfig(palette_size=2))
    first = registry.add(records, iitb_cse_state).entry
    second = registry.add(records, nit_eee_state).entry
    assert (first.color_index, second.color_index) == (0, 1)

    rows = [
        {"institute": "C", "program": "Q", "quota": "AI", "category": "OPEN",
         "gender": "GN", "college_type": "IIIT", "round": r, "closing_rank": 10}
        for r in (1, 2)
    ]
    third_records = normalize_records(rows)
    third = registry.add(third_records, {"college_type": "IIIT", "institute": "C", "program": "Q",
                                         "quota": "AI", "category": "OPEN", "gender": "GN"}).entry
    assert third.color_index == 0


def test_remove_and_active_flag(records, iitb_cse_state, nit_eee_state):
    registry = ComparisonRegistry()
    a = registry.add(records, iitb_cse_state).entry
    b = registry.add(records, nit_eee_state).entry
    assert registry.remove(a.key) is True
    assert registry.remove(a.key) is False
    assert registry.keys() == (b.key,)
    assert registry.is_active is True
    registry.remove(b.key)
    assert registry.is_active is False
    assert registry.remove("missing") is False


def test_reset_clears_everything(records, iitb_cse_state, nit_eee_state):
    registry = ComparisonRegistry()
    registry.add(records, iitb_cse_state)
    registry.add(records, nit_eee_state)
    registry.reset()
    assert len(registry) == 0
    assert registry.entries() == ()
    assert registry.is_active is False


def test_entries_snapshot_insertion_order(records, iitb_cse_state, nit_eee_state):
    registry = ComparisonRegistry()
    registry.add(records, nit_eee_state)
    registry.add(records, iitb_cse_state)
    snapshot = registry.entries()
    assert [e.short_name for e in snapshot] == [
        "Electrical and Electronics Engineering",
        "Computer Science and Engineering",
    ]
    registry.reset()
    assert len(snapshot) == 2
    assert registry.get(snapshot[0].key) is None


def test_entry_to_dict(records, nit_eee_state):
    entry = ComparisonRegistry().add(records, nit_eee_state).entry
    d = entry.to_dict()
    assert d["series"] == [
        {"round": 1, "opening_rank": 5000, "closing_rank": 9000},
        {"round": 2, "opening_rank": 5200, "closing_rank": 9400},
    ]
    assert d["selection"] == nit_eee_state


def test_concurrent_duplicate_adds_insert_once(records, iitb_cse_state):
    registry = ComparisonRegistry()
    results = []

    def worker():
        results.append(registry.add(records, iitb_cse_state))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry) == 1
    assert sum(1 for r in results if r) == 1


def test_name_helpers():
    assert short_program_name("P (4yr)") == "P"
    assert short_program_name("No Parens") == "No Parens"
    assert display_name_for("X, City", " P (4yr)") == "X - P"
