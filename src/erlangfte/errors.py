# src/erlangfte/errors.py
from __future__ import annotations


class StaffingError(Exception):
    """Base class for every error raised by the staffing engine."""


class InvalidParameter(StaffingError, ValueError):
    """A request field is outside the range the model accepts."""


class DivisionByZero(StaffingError, ZeroDivisionError):
    """Exact division with a zero divisor."""


class InvalidDomain(StaffingError, ArithmeticError):
    """
    A numeric precondition was violated (e.g. Erlang C at agents <= intensity).

    The agent search never presents such inputs, so seeing this means a bug
    in the caller rather than a bad request.
    """


class SearchLimitExceeded(StaffingError, RuntimeError):
    """The agent search passed the configured max_agents without meeting the target."""


__all__ = [
    "StaffingError",
    "InvalidParameter",
    "DivisionByZero",
    "InvalidDomain",
    "SearchLimitExceeded",
]
