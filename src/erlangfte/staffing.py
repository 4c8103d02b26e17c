# src/erlangfte/staffing.py
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, Optional

from . import arith
from .config import EngineSettings, SearchStrategy
from .erlangc import ErlangC, offered_load
from .errors import InvalidParameter, SearchLimitExceeded

logger = logging.getLogger(__name__)

# shrinkage == 1 would divide by zero
SHRINKAGE_CEILING = Fraction("0.99999")
# Staffing floor for requests without meaningful load
MIN_AGENTS: int = 1


# -----------------------------
# Data models
# -----------------------------
@dataclass(frozen=True)
class StaffingRequest:
    id: str
    index: int
    volume: float
    interval_length: int
    aht: int

    # Target definition
    target_service_level: float
    target_time: int

    # Constraints / adjustments
    max_occupancy: float
    shrinkage: float


@dataclass(frozen=True)
class StaffingResult:
    id: str
    index: int
    headcount: Optional[int]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class StaffingBreakdown:
    id: str
    index: int
    intensity: Fraction
    agents: int
    headcount: int
    service_level: Fraction
    asa_seconds: Fraction
    occupancy: Fraction
    degenerate: bool = False


# -----------------------------
# Internal helpers
# -----------------------------
_NUMERIC_FIELDS = (
    "volume",
    "interval_length",
    "aht",
    "target_service_level",
    "target_time",
    "max_occupancy",
    "shrinkage",
)


def _validate_request(request: StaffingRequest) -> None:
    for name in _NUMERIC_FIELDS:
        value = getattr(request, name, None)
        if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
            raise InvalidParameter(f"{name} must be a real number, got {type(value).__name__}")
        if not math.isfinite(value):
            raise InvalidParameter(f"{name} must be finite")

    if request.interval_length <= 0:
        raise InvalidParameter("interval_length must be > 0")

    if not (0.0 <= request.target_service_level < 1.0):
        raise InvalidParameter("target_service_level must be in [0, 1)")

    if request.target_time < 0:
        raise InvalidParameter("target_time must be >= 0")

    if not (0.0 <= request.max_occupancy <= 1.0):
        raise InvalidParameter("max_occupancy must be in [0, 1] (0 disables the cap)")

    if not (0.0 <= request.shrinkage <= 1.0):
        raise InvalidParameter("shrinkage must be in [0, 1]")


def _is_degenerate(request: StaffingRequest) -> bool:
    # The search would diverge or divide by zero on these.
    return request.volume < 0 or request.aht <= 0


def _scheduled_from_on_phone(agents: int, shrinkage: float) -> int:
    s = arith.to_rational(shrinkage)
    if s == 1:
        s = SHRINKAGE_CEILING
    return int(math.ceil(arith.divide(agents, 1 - s)))


def _meets_target(
    evaluator: ErlangC,
    *,
    a: Fraction,
    n: int,
    request: StaffingRequest,
    target: Fraction,
) -> bool:
    sl = evaluator.service_level(a, n, request.target_time, request.aht)
    return sl >= target


def _search_linear(
    evaluator: ErlangC,
    request: StaffingRequest,
    *,
    a: Fraction,
    low: int,
    target: Fraction,
    max_agents: int,
) -> int:
    n = low
    while not _meets_target(evaluator, a=a, n=n, request=request, target=target):
        n += 1
        if n > max_agents:
            raise SearchLimitExceeded(f"Could not find staffing solution up to max_agents={max_agents}")
    return n


def _search_bisect(
    evaluator: ErlangC,
    request: StaffingRequest,
    *,
    a: Fraction,
    low: int,
    target: Fraction,
    max_agents: int,
) -> int:
    # 1) Exponential bracketing to find a feasible high
    high = low
    while high <= max_agents and not _meets_target(evaluator, a=a, n=high, request=request, target=target):
        high = min(high * 2, max_agents + 1)

    if high > max_agents:
        raise SearchLimitExceeded(f"Could not find staffing solution up to max_agents={max_agents}")

    # 2) Binary search in [low, high] for minimal feasible n
    lo, hi = low, high
    while lo < hi:
        mid = (lo + hi) // 2
        if _meets_target(evaluator, a=a, n=mid, request=request, target=target):
            hi = mid
        else:
            lo = mid + 1
    return lo


_SEARCHES = {
    "linear": _search_linear,
    "bisect": _search_bisect,
}


def _search_agents(
    evaluator: ErlangC,
    request: StaffingRequest,
    *,
    a: Fraction,
    strategy: SearchStrategy,
    max_agents: int,
) -> int:
    """First agent count whose service level reaches the target."""
    # floor(a) + 1 is the smallest count strictly above the load.
    low = max(MIN_AGENTS, math.floor(a) + 1)
    if low > max_agents:
        raise SearchLimitExceeded(f"Load implies > max_agents (low={low}, max_agents={max_agents})")

    target = arith.to_rational(request.target_service_level)
    logger.debug("request %s: searching from %d agents (intensity=%s, strategy=%s)", request.id, low, a, strategy)
    n = _SEARCHES[strategy](evaluator, request, a=a, low=low, target=target, max_agents=max_agents)
    logger.debug("request %s: target met at %d agents", request.id, n)
    return n


def _apply_occupancy_cap(a: Fraction, agents: int, max_occupancy: float) -> int:
    """
    Raise agents until a / agents < max_occupancy. Never lowers agents.

    a / n >= m  <=>  n <= a / m, so the first compliant count is floor(a / m) + 1.
    """
    m = arith.to_rational(max_occupancy)
    if m <= 0:
        return agents
    if arith.divide(a, agents) < m:
        return agents
    return max(agents, math.floor(arith.divide(a, m)) + 1)


def _solve(
    request: StaffingRequest,
    evaluator: ErlangC,
    settings: EngineSettings,
) -> tuple[Fraction, int]:
    """Returns (intensity, on-phone agents) for a validated, non-degenerate request."""
    a = offered_load(request.volume, request.aht, request.interval_length, settings.intensity_places)
    agents = _search_agents(
        evaluator,
        request,
        a=a,
        strategy=settings.search_strategy,
        max_agents=settings.max_agents,
    )
    return a, _apply_occupancy_cap(a, agents, request.max_occupancy)


def _prepare(
    request: StaffingRequest,
    evaluator: Optional[ErlangC],
    settings: Optional[EngineSettings],
) -> tuple[ErlangC, EngineSettings]:
    _validate_request(request)
    settings = settings or EngineSettings()
    if evaluator is None:
        evaluator = ErlangC(exp_precision=settings.exp_precision)
    return evaluator, settings


# -----------------------------
# Public API
# -----------------------------
def compute_headcount(
    request: StaffingRequest,
    *,
    evaluator: Optional[ErlangC] = None,
    settings: Optional[EngineSettings] = None,
) -> StaffingResult:
    """
    Required headcount for one request:
      1. intensity a = volume * AHT / interval_length (rounded once)
      2. smallest agents > a with service level >= target
      3. occupancy cap (when max_occupancy > 0)
      4. shrinkage: headcount = ceil(agents / (1 - shrinkage))

    Requests with volume < 0 or AHT <= 0 skip 1-3 and staff the floor of one
    agent before shrinkage.

    Pure: the same request always yields the same result, whatever the
    evaluator's factorial cache already holds. Raises StaffingError
    subclasses for invalid requests; batch callers capture them per request.
    """
    evaluator, settings = _prepare(request, evaluator, settings)

    if _is_degenerate(request):
        logger.debug("request %s: degenerate input (volume=%s, aht=%s), using floor", request.id, request.volume, request.aht)
        agents = MIN_AGENTS
    else:
        _, agents = _solve(request, evaluator, settings)

    return StaffingResult(
        id=request.id,
        index=request.index,
        headcount=_scheduled_from_on_phone(agents, request.shrinkage),
    )


def evaluate_staffing(
    request: StaffingRequest,
    *,
    evaluator: Optional[ErlangC] = None,
    settings: Optional[EngineSettings] = None,
) -> StaffingBreakdown:
    """Same computation as compute_headcount, plus the metrics achieved at the chosen count."""
    evaluator, settings = _prepare(request, evaluator, settings)

    if _is_degenerate(request):
        return StaffingBreakdown(
            id=request.id,
            index=request.index,
            intensity=Fraction(0),
            agents=MIN_AGENTS,
            headcount=_scheduled_from_on_phone(MIN_AGENTS, request.shrinkage),
            service_level=Fraction(1),
            asa_seconds=Fraction(0),
            occupancy=Fraction(0),
            degenerate=True,
        )

    a, agents = _solve(request, evaluator, settings)
    pw = evaluator.wait_probability(a, agents)
    return StaffingBreakdown(
        id=request.id,
        index=request.index,
        intensity=a,
        agents=agents,
        headcount=_scheduled_from_on_phone(agents, request.shrinkage),
        service_level=evaluator.service_level(a, agents, request.target_time, request.aht, pw=pw),
        asa_seconds=evaluator.average_speed_of_answer(a, agents, request.aht, pw=pw),
        occupancy=arith.divide(a, agents),
    )


def breakdown_to_dict(breakdown: StaffingBreakdown) -> Dict[str, Any]:
    return {
        "id": breakdown.id,
        "index": breakdown.index,
        "erlangs": float(breakdown.intensity),
        "agents": breakdown.agents,
        "headcount": breakdown.headcount,
        "service_level": float(breakdown.service_level),
        "asa_seconds": float(breakdown.asa_seconds),
        "occupancy": float(breakdown.occupancy),
        "degenerate": breakdown.degenerate,
    }


def result_to_dict(result: StaffingResult) -> Dict[str, Any]:
    return {
        "id": result.id,
        "index": result.index,
        "headcount": result.headcount,
        "error": result.error,
    }


__all__ = [
    "SHRINKAGE_CEILING",
    "MIN_AGENTS",
    "StaffingRequest",
    "StaffingResult",
    "StaffingBreakdown",
    "compute_headcount",
    "evaluate_staffing",
    "breakdown_to_dict",
    "result_to_dict",
]
