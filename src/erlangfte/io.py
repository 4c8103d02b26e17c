from __future__ import annotations

import io
import json
from typing import IO, List, Sequence, Union

import pandas as pd

from .staffing import StaffingRequest, StaffingResult, result_to_dict


REQUIRED_COLUMNS = [
    "id",
    "volume",
    "interval_length",
    "aht",
    "target_service_level",
    "target_time",
    "max_occupancy",
    "shrinkage",
]

# Field names used by the JSON request files of the earlier service
LEGACY_COLUMN_ALIASES = {
    "ID": "id",
    "Index": "index",
    "Volume": "volume",
    "IntervalLength": "interval_length",
    "Aht": "aht",
    "TargetServiceLevel": "target_service_level",
    "TargetTime": "target_time",
    "MaxOccupancy": "max_occupancy",
    "Shrinkage": "shrinkage",
}

RESULT_COLUMNS = ["id", "index", "headcount", "error"]


def _integral_column(df: pd.DataFrame, col: str) -> pd.Series:
    values = pd.to_numeric(df[col], errors="raise")
    fractional = values.notna() & (values != values.round())
    if fractional.any():
        bad = df.index[fractional].tolist()[:10]
        raise ValueError(f"{col} must be a whole number of seconds. Example bad rows: {bad}")
    return values.astype(int)


def normalize_request_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Renames legacy PascalCase columns, checks required columns and fills a
    missing `index` with row position. Returns a normalized copy.
    """
    df = df.rename(columns=LEGACY_COLUMN_ALIASES)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Required: {REQUIRED_COLUMNS}")

    df = df.reset_index(drop=True).copy()
    if "index" not in df.columns:
        df["index"] = range(len(df))

    df["id"] = df["id"].astype(str)
    df["index"] = pd.to_numeric(df["index"], errors="raise").astype(int)
    for col in ("volume", "target_service_level", "max_occupancy", "shrinkage"):
        df[col] = pd.to_numeric(df[col], errors="raise").astype(float)
    for col in ("interval_length", "aht", "target_time"):
        df[col] = _integral_column(df, col)
    return df


def requests_from_frame(df: pd.DataFrame) -> List[StaffingRequest]:
    """One StaffingRequest per row, in row order."""
    df = normalize_request_columns(df)
    return [
        StaffingRequest(
            id=str(r["id"]),
            index=int(r["index"]),
            volume=float(r["volume"]),
            interval_length=int(r["interval_length"]),
            aht=int(r["aht"]),
            target_service_level=float(r["target_service_level"]),
            target_time=int(r["target_time"]),
            max_occupancy=float(r["max_occupancy"]),
            shrinkage=float(r["shrinkage"]),
        )
        for r in df.to_dict(orient="records")
    ]


def read_requests_json(file: Union[str, IO[str], IO[bytes]]) -> pd.DataFrame:
    """
    Reads a JSON array of request objects, e.g.
      [{"ID": "1", "Index": 0, "Volume": 12.5, "IntervalLength": 900, ...}]
    Snake_case keys are accepted too. Returns a normalized DataFrame.
    """
    if isinstance(file, str):
        with open(file, "r", encoding="utf-8") as fh:
            records = json.load(fh)
    else:
        records = json.load(file)
    if not isinstance(records, list):
        raise ValueError("Request JSON must be an array of objects")
    return normalize_request_columns(pd.DataFrame.from_records(records))


def read_requests_csv(file: Union[str, IO[str], IO[bytes]]) -> pd.DataFrame:
    """
    Reads a request CSV with the REQUIRED_COLUMNS (plus optional `index`).
    Returns a normalized DataFrame.
    """
    df = pd.read_csv(file, dtype=str)
    return normalize_request_columns(df)


def results_to_frame(results: Sequence[StaffingResult]) -> pd.DataFrame:
    df = pd.DataFrame([result_to_dict(r) for r in results], columns=RESULT_COLUMNS)
    df["headcount"] = df["headcount"].astype("Int64")
    return df.sort_values("index").reset_index(drop=True)


def results_to_csv(results: Sequence[StaffingResult]) -> str:
    buf = io.StringIO()
    results_to_frame(results).to_csv(buf, index=False)
    return buf.getvalue()


__all__ = [
    "REQUIRED_COLUMNS",
    "LEGACY_COLUMN_ALIASES",
    "RESULT_COLUMNS",
    "normalize_request_columns",
    "requests_from_frame",
    "read_requests_json",
    "read_requests_csv",
    "results_to_frame",
    "results_to_csv",
]
