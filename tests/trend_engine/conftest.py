# tests/trend_engine/conftest.py
"""Pytest configuration and shared fixtures for trend_engine tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest


def pytest_configure() -> None:
    # Ensure cutofftrends is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def _make_row(
    *,
    institute="Indian Institute of Technology Bombay, Mumbai",
    college_type="IIT",
    program="Computer Science and Engineering (4 Years, Bachelor of Technology)",
    quota="AI",
    category="OPEN",
    gender="Gender-Neutral",
    round=1,
    opening_rank=None,
    closing_rank=None,
) -> dict:
    return {
        "institute": institute,
        "college_type": college_type,
        "program": program,
        "quota": quota,
        "category": category,
        "gender": gender,
        "round": round,
        "opening_rank": opening_rank,
        "closing_rank": closing_rank,
    }


@pytest.fixture
def raw_rows() -> list[dict]:
    """Rows using the published CSV headers, two institutes, several rounds."""
    base = {
        "Institute": "Indian Institute of Technology Bombay, Mumbai",
        "College Type": "IIT",
        "Academic Program Name": "Computer Science and Engineering (4 Years, Bachelor of Technology)",
        "Quota": "AI",
        "Category": "OPEN",
        "Gender": "Gender-Neutral",
    }
    rows = [
        {**base, "Round": 1, "Opening Rank": 1, "Closing Rank": 68},
        {**base, "Round": 2, "Opening Rank": 1, "Closing Rank": 66},
        {**base, "Round": 3, "Opening Rank": 2, "Closing Rank": 64},
        {**base, "Category": "OBC-NCL", "Round": 1, "Opening Rank": 20, "Closing Rank": 40},
        {**base, "Gender": "Female-only (including Supernumerary)", "Round": 1, "Opening Rank": 300, "Closing Rank": 500},
        {
            **base,
            "Institute": "National Institute of Technology, Tiruchirappalli",
            "College Type": "NIT",
            "Academic Program Name": "Electrical and Electronics Engineering (4 Years, Bachelor of Technology)",
            "Quota": "HS",
            "Round": 1,
            "Opening Rank": 5000,
            "Closing Rank": 9000,
        },
        {
            **base,
            "Institute": "National Institute of Technology, Tiruchirappalli",
            "College Type": "NIT",
            "Academic Program Name": "Electrical and Electronics Engineering (4 Years, Bachelor of Technology)",
            "Quota": "HS",
            "Round": 2,
            "Opening Rank": 5200,
            "Closing Rank": 9400,
        },
    ]
    return rows


@pytest.fixture
def records(raw_rows) -> pd.DataFrame:
    from cutofftrends.trend_engine.records import normalize_records

    return normalize_records(raw_rows)


@pytest.fixture
def iitb_cse_state() -> dict:
    return {
        "college_type": "IIT",
        "institute": "Indian Institute of Technology Bombay, Mumbai",
        "program": "Computer Science and Engineering (4 Years, Bachelor of Technology)",
        "quota": "AI",
        "category": "OPEN",
        "gender": "Gender-Neutral",
    }


@pytest.fixture
def nit_eee_state() -> dict:
    return {
        "college_type": "NIT",
        "institute": "National Institute of Technology, Tiruchirappalli",
        "program": "Electrical and Electronics Engineering (4 Years, Bachelor of Technology)",
        "quota": "HS",
        "category": "OPEN",
        "gender": "Gender-Neutral",
    }


@pytest.fixture
def make_row():
    """Factory for canonical-name rows; keyword overrides per field."""
    return _make_row
