# src/erlangfte/arith.py
from __future__ import annotations

import decimal
import math
import numbers
from decimal import Decimal
from fractions import Fraction
from typing import Union

from .errors import DivisionByZero, InvalidDomain

Number = Union[int, float, str, Decimal, Fraction]

# Significant digits kept for e^x. Everything else is exact.
EXP_PRECISION_DEFAULT: int = 30
_EXP_GUARD_DIGITS: int = 10


def to_rational(value: Number) -> Fraction:
    """
    Exact rational for a request parameter.

    Floats go through their shortest repr so 0.2 becomes 1/5, not the binary
    approximation 3602879701896397/18014398509481984.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric parameter")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidDomain(f"non-finite value: {value!r}")
        return Fraction(repr(float(value)))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidDomain(f"non-finite value: {value!r}")
        return Fraction(value)
    if isinstance(value, str):
        return Fraction(value.strip())
    if isinstance(value, numbers.Integral):
        return Fraction(int(value))
    if isinstance(value, numbers.Real):
        return to_rational(float(value))
    raise TypeError(f"Unsupported numeric type: {type(value).__name__}")


def add(x: Number, y: Number) -> Fraction:
    return to_rational(x) + to_rational(y)


def subtract(x: Number, y: Number) -> Fraction:
    return to_rational(x) - to_rational(y)


def multiply(x: Number, y: Number) -> Fraction:
    return to_rational(x) * to_rational(y)


def divide(x: Number, y: Number) -> Fraction:
    divisor = to_rational(y)
    if divisor == 0:
        raise DivisionByZero(f"division of {x} by zero")
    return to_rational(x) / divisor


def power(base: Number, exponent: int) -> Fraction:
    """
    base ** exponent for a non-negative integer exponent, exact.

    int ** int is binary exponentiation (repeated squaring), and Fraction
    raises numerator and denominator separately, so no rounding happens.
    """
    if isinstance(exponent, bool) or not isinstance(exponent, int):
        raise InvalidDomain(f"exponent must be an int, got {exponent!r}")
    if exponent < 0:
        raise InvalidDomain(f"exponent must be >= 0, got {exponent}")
    return to_rational(base) ** exponent


def exp(x: Number, precision: int = EXP_PRECISION_DEFAULT) -> Fraction:
    """
    e**x rounded to `precision` significant digits, returned as the exact
    Fraction of that decimal so it combines with exact terms deterministically.
    """
    if precision <= 0:
        raise InvalidDomain("precision must be > 0")
    q = to_rational(x)
    with decimal.localcontext() as ctx:
        ctx.prec = precision + _EXP_GUARD_DIGITS
        ctx.Emin = decimal.MIN_EMIN
        ctx.Emax = decimal.MAX_EMAX
        value = (Decimal(q.numerator) / Decimal(q.denominator)).exp()
        ctx.prec = precision
        value = +value
    return Fraction(value)


def round_half_up(x: Number, places: int) -> Fraction:
    """Exact half-up rounding to `places` decimal places."""
    if places < 0:
        raise InvalidDomain("places must be >= 0")
    q = to_rational(x)
    scale = 10**places
    return Fraction(math.floor(q * scale + Fraction(1, 2)), scale)


def to_float(x: Number) -> float:
    return float(to_rational(x))


__all__ = [
    "Number",
    "EXP_PRECISION_DEFAULT",
    "to_rational",
    "add",
    "subtract",
    "multiply",
    "divide",
    "power",
    "exp",
    "round_half_up",
    "to_float",
]
