# src/erlangfte/batch.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Literal, Optional, Sequence, TypeAlias

from .config import EngineSettings
from .erlangc import ErlangC
from .errors import DivisionByZero, InvalidDomain, StaffingError
from .staffing import StaffingRequest, StaffingResult, compute_headcount

logger = logging.getLogger(__name__)

ExecutionMode: TypeAlias = Literal["sequential", "concurrent"]


def _compute_isolated(
    request: StaffingRequest,
    evaluator: ErlangC,
    settings: EngineSettings,
) -> StaffingResult:
    """One request; a StaffingError becomes an error slot instead of propagating."""
    try:
        return compute_headcount(request, evaluator=evaluator, settings=settings)
    except (DivisionByZero, InvalidDomain) as exc:
        logger.error("request %s (index %d): internal numeric failure", request.id, request.index, exc_info=True)
        return StaffingResult(id=request.id, index=request.index, headcount=None, error=f"{type(exc).__name__}: {exc}")
    except StaffingError as exc:
        logger.warning("request %s (index %d): %s", request.id, request.index, exc)
        return StaffingResult(id=request.id, index=request.index, headcount=None, error=f"{type(exc).__name__}: {exc}")


def calculate_fte(
    requests: Sequence[StaffingRequest],
    *,
    mode: ExecutionMode = "concurrent",
    max_workers: Optional[int] = None,
    evaluator: Optional[ErlangC] = None,
    settings: Optional[EngineSettings] = None,
) -> List[StaffingResult]:
    """
    Headcount for every request, one result per request, sorted by index.

    mode="sequential" runs in submission order on the calling thread.
    mode="concurrent" submits one task per request to a thread pool and waits
    for all of them before returning. Both modes return the same list.

    All requests share one evaluator, so factorials computed for one request
    are reused by the others. A failing request yields a result with `error`
    set and never affects its siblings.
    """
    settings = settings or EngineSettings()
    if evaluator is None:
        evaluator = ErlangC(exp_precision=settings.exp_precision)

    items = list(requests)
    logger.info("calculating headcount for %d requests (%s)", len(items), mode)

    if mode == "sequential":
        results = [_compute_isolated(r, evaluator, settings) for r in items]
    elif mode == "concurrent":
        if not items:
            return []
        workers = max_workers if max_workers is not None else settings.max_workers
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_compute_isolated, r, evaluator, settings) for r in items]
            # Full barrier: every future is joined before anything is returned.
            results = [f.result() for f in futures]
    else:
        raise ValueError(f"Unsupported mode: {mode}")

    failed = sum(1 for r in results if not r.ok)
    logger.info("calculated %d requests, %d failed", len(results), failed)
    return sorted(results, key=lambda r: r.index)


__all__ = ["ExecutionMode", "calculate_fte"]
