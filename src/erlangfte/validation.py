from __future__ import annotations

import numpy as np
import pandas as pd

from .io import LEGACY_COLUMN_ALIASES, REQUIRED_COLUMNS


FLAG_COLUMNS = [
    "flag_volume_negative",
    "flag_aht_nonpositive",
    "flag_interval_nonpositive",
    "flag_target_out_of_range",
    "flag_occupancy_out_of_range",
    "flag_shrinkage_out_of_range",
    "flag_shrinkage_substituted",
    "flag_degenerate",
    "flag_non_finite",
]


def validate_requests(df: pd.DataFrame) -> pd.DataFrame:
    """
    Returns a copy of the request frame with one boolean flag column per check.

    Degenerate rows (negative volume or AHT <= 0) still get a floor headcount;
    the out-of-range flags mark rows the engine will reject.
    """
    df = df.rename(columns=LEGACY_COLUMN_ALIASES)
    missing = sorted(set(REQUIRED_COLUMNS) - set(df.columns))
    if missing:
        raise ValueError(
            f"Request dataframe missing required columns: {missing}. "
            f"Expected: {sorted(REQUIRED_COLUMNS)}"
        )

    if df.empty:
        raise ValueError("Request dataframe is empty")

    out = df.copy()

    numeric = {}
    for col in REQUIRED_COLUMNS[1:]:
        values = pd.to_numeric(out[col], errors="coerce")
        if values.isna().any():
            bad = out.index[values.isna()].tolist()[:10]
            raise ValueError(f"{col} must be numeric. Example bad rows: {bad}")
        numeric[col] = values.to_numpy(dtype=float)

    volume = numeric["volume"]
    aht = numeric["aht"]
    target = numeric["target_service_level"]
    occupancy = numeric["max_occupancy"]
    shrinkage = numeric["shrinkage"]

    out["flag_volume_negative"] = volume < 0
    out["flag_aht_nonpositive"] = aht <= 0
    out["flag_interval_nonpositive"] = numeric["interval_length"] <= 0
    out["flag_target_out_of_range"] = (target < 0) | (target >= 1) | (numeric["target_time"] < 0)
    out["flag_occupancy_out_of_range"] = (occupancy < 0) | (occupancy > 1)
    out["flag_shrinkage_out_of_range"] = (shrinkage < 0) | (shrinkage > 1)
    out["flag_shrinkage_substituted"] = shrinkage == 1.0
    out["flag_degenerate"] = out["flag_volume_negative"] | out["flag_aht_nonpositive"]
    out["flag_non_finite"] = ~np.isfinite(np.column_stack(list(numeric.values()))).all(axis=1)
    return out


def has_rejections(flags: pd.DataFrame) -> pd.Series:
    """Rows the engine will answer with InvalidParameter."""
    return (
        flags["flag_interval_nonpositive"]
        | flags["flag_target_out_of_range"]
        | flags["flag_occupancy_out_of_range"]
        | flags["flag_shrinkage_out_of_range"]
        | flags["flag_non_finite"]
    )


__all__ = ["FLAG_COLUMNS", "validate_requests", "has_rejections"]
