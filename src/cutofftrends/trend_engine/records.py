"""Record model and ingestion normalization.

Every downstream component works on a pandas DataFrame with exactly the
canonical columns in RECORD_COLUMNS. ``normalize_records`` is the single step
that maps raw loader output (raw CSV headers, snake_case dicts, Record values,
polars frames) onto that shape and turns empty/None/NaN values into "absent".

Absent facet values are stored as ``None``; absent numbers as ``pd.NA`` in
nullable ``Int64`` columns.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from cutofftrends.utils.logging import get_logger

logger = get_logger(__name__)

FACET_COLUMNS: tuple[str, ...] = (
    "college_type",
    "institute",
    "program",
    "quota",
    "category",
    "gender",
)
NUMERIC_COLUMNS: tuple[str, ...] = ("round", "opening_rank", "closing_rank")
RECORD_COLUMNS: tuple[str, ...] = FACET_COLUMNS + NUMERIC_COLUMNS

# Headers used by the published cutoff CSV -> canonical column.
RAW_COLUMN_MAP: dict[str, str] = {
    "Institute": "institute",
    "College Type": "college_type",
    "Academic Program Name": "program",
    "Quota": "quota",
    "Category": "category",
    "Gender": "gender",
    "Round": "round",
    "Opening Rank": "opening_rank",
    "Closing Rank": "closing_rank",
}


@dataclass(frozen=True)
class Record:
    """One cutoff row. Absent values are None."""
    institute: Optional[str]
    college_type: Optional[str]
    program: Optional[str]
    quota: Optional[str]
    category: Optional[str]
    gender: Optional[str]
    round: int
    opening_rank: Optional[int] = None
    closing_rank: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_absent(value: Any) -> bool:
    """True for None, NaN/NA, and empty or whitespace-only strings."""
    if value is None or value is pd.NA:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _normalize_facet(value: Any) -> Optional[str]:
    if is_absent(value):
        return None
    if isinstance(value, float) and value.is_integer():
        # dynamic typing in loaders turns "2024" into 2024.0
        value = int(value)
    return str(value).strip()


def _to_int_column(s: pd.Series) -> pd.Series:
    """Coerce a column to nullable Int64; non-numeric, non-finite and out-of-int64-range values become NA."""
    num = pd.to_numeric(s, errors="coerce").astype("float64")
    num[~np.isfinite(num.to_numpy())] = np.nan
    num[num.abs() >= 2.0**63] = np.nan
    return np.trunc(num).astype("Int64")


def _raw_to_frame(raw: Any) -> pd.DataFrame:
    if raw is None:
        return pd.DataFrame()
    if isinstance(raw, pd.DataFrame):
        return raw
    to_pandas = getattr(raw, "to_pandas", None)
    if callable(to_pandas):
        # polars and pyarrow tables
        return to_pandas()
    rows = []
    for item in raw:
        if isinstance(item, Record):
            rows.append(item.to_dict())
        elif isinstance(item, Mapping):
            rows.append(dict(item))
        else:
            raise TypeError(
                f"Unsupported record type {type(item).__name__}; "
                "expected Record, a mapping, or a DataFrame."
            )
    return pd.DataFrame(rows)


def empty_records() -> pd.DataFrame:
    """Empty record frame with the canonical columns and dtypes."""
    data: dict[str, pd.Series] = {col: pd.Series([], dtype=object) for col in FACET_COLUMNS}
    for col in NUMERIC_COLUMNS:
        data[col] = pd.Series([], dtype="Int64")
    return pd.DataFrame(data)


def normalize_records(raw: Any) -> pd.DataFrame:
    """Map raw loader output onto the canonical record frame.

    Args:
        raw: A pandas DataFrame, an object with ``to_pandas()``, an iterable of
            mappings (raw CSV headers or canonical names), or an iterable of Record.

    Returns:
        New DataFrame with columns RECORD_COLUMNS and a fresh RangeIndex.
        Rows whose round is absent or < 1 are dropped; original order is kept.
    """
    df = _raw_to_frame(raw)
    if df.empty and not len(df.columns):
        return empty_records()

    df = df.reset_index(drop=True)
    df = df.rename(columns={k: v for k, v in RAW_COLUMN_MAP.items() if k in df.columns and v not in df.columns})

    out = pd.DataFrame(index=df.index)
    for col in FACET_COLUMNS:
        if col in df.columns:
            out[col] = pd.Series([_normalize_facet(v) for v in df[col]], index=df.index, dtype=object)
        else:
            out[col] = pd.Series([None] * len(df), index=df.index, dtype=object)
    for col in NUMERIC_COLUMNS:
        if col in df.columns:
            out[col] = _to_int_column(df[col])
        else:
            out[col] = pd.Series([pd.NA] * len(df), index=df.index, dtype="Int64")

    valid_round = out["round"].notna() & (out["round"].fillna(0) >= 1)
    n_dropped = int((~valid_round).sum())
    if n_dropped:
        logger.debug(f"dropping {n_dropped} row(s) with absent or invalid round")
    out = out[valid_round.to_numpy(dtype=bool)].reset_index(drop=True)
    logger.debug(f"normalized {len(out)} record(s)")
    return out


def optional_int(value: Any) -> Optional[int]:
    return None if is_absent(value) else int(value)


def frame_to_records(df: pd.DataFrame) -> list[Record]:
    """Typed view of a normalized (or filtered) record frame."""
    result = []
    for row in df.itertuples(index=False):
        result.append(
            Record(
                institute=row.institute,
                college_type=row.college_type,
                program=row.program,
                quota=row.quota,
                category=row.category,
                gender=row.gender,
                round=int(row.round),
                opening_rank=optional_int(row.opening_rank),
                closing_rank=optional_int(row.closing_rank),
            )
        )
    return result
