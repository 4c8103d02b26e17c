# src/erlangfte/__init__.py
from __future__ import annotations

# -----------------------------
# Errors
# -----------------------------
from .errors import (
    StaffingError,
    InvalidParameter,
    DivisionByZero,
    InvalidDomain,
    SearchLimitExceeded,
)

# -----------------------------
# Numeric core
# -----------------------------
from .factorial import FactorialCache, prime_swing_factorial
from .erlangc import ErlangC, offered_load

# -----------------------------
# Staffing / batch
# -----------------------------
from .config import EngineSettings, SearchStrategy, load_settings_from_env
from .staffing import (
    StaffingRequest,
    StaffingResult,
    StaffingBreakdown,
    compute_headcount,
    evaluate_staffing,
    breakdown_to_dict,
    result_to_dict,
)
from .batch import ExecutionMode, calculate_fte

__all__ = [
    # Errors
    "StaffingError",
    "InvalidParameter",
    "DivisionByZero",
    "InvalidDomain",
    "SearchLimitExceeded",
    # Numeric core
    "FactorialCache",
    "prime_swing_factorial",
    "ErlangC",
    "offered_load",
    # Staffing / batch
    "EngineSettings",
    "SearchStrategy",
    "load_settings_from_env",
    "StaffingRequest",
    "StaffingResult",
    "StaffingBreakdown",
    "compute_headcount",
    "evaluate_staffing",
    "breakdown_to_dict",
    "result_to_dict",
    "ExecutionMode",
    "calculate_fte",
]
