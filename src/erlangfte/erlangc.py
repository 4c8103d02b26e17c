# src/erlangfte/erlangc.py
from __future__ import annotations

from fractions import Fraction
from typing import Optional

from . import arith
from .arith import Number
from .errors import InvalidDomain, InvalidParameter
from .factorial import FactorialCache

INTENSITY_PLACES_DEFAULT: int = 4


def offered_load(
    volume: Number,
    aht_seconds: Number,
    interval_seconds: Number,
    places: int = INTENSITY_PLACES_DEFAULT,
) -> Fraction:
    """
    Offered load a (Erlangs) = volume * (AHT / interval_seconds),
    rounded half-up to `places` decimals.

    Compute this once per request and pass the returned value everywhere
    downstream; re-deriving it at a different rounding shifts results at the
    margin.
    """
    interval = arith.to_rational(interval_seconds)
    if interval <= 0:
        raise InvalidParameter("interval_length must be > 0")
    a = arith.multiply(volume, arith.divide(aht_seconds, interval))
    return arith.round_half_up(a, places)


class ErlangC:
    """
    Erlang C evaluator for an M/M/N queue, exact until the final float.

    Holds the factorial cache it reads from; share one instance between
    requests to share the cache.
    """

    def __init__(
        self,
        factorials: Optional[FactorialCache] = None,
        exp_precision: int = arith.EXP_PRECISION_DEFAULT,
    ) -> None:
        self.factorials = factorials if factorials is not None else FactorialCache()
        self.exp_precision = int(exp_precision)

    @staticmethod
    def _check_domain(a: Fraction, n: int) -> None:
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidDomain(f"agents must be an int, got {n!r}")
        if n < 1:
            raise InvalidDomain(f"agents must be >= 1, got {n}")
        if a < 0:
            raise InvalidDomain(f"intensity must be >= 0, got {a}")
        if n <= a:
            raise InvalidDomain(f"Erlang C needs agents > intensity (agents={n}, intensity={a})")

    def x_term(self, a: Number, n: int) -> Fraction:
        """X = (a^N / N!) * (N / (N - a))"""
        a = arith.to_rational(a)
        self._check_domain(a, n)
        an = arith.power(a, n)
        return arith.multiply(
            arith.divide(an, self.factorials.get(n)),
            arith.divide(n, arith.subtract(n, a)),
        )

    def y_term(self, a: Number, n: int) -> Fraction:
        """
        Y = sum_{i=0..N-1} a^i / i!

        With a = p/q every term shares the denominator q^(N-1) * (N-1)!, so the
        sum is accumulated as one integer numerator:
          p^i * q^(N-1-i) * (N-1)!/i!
        Each factor moves to the next term by one small multiply or divide.
        """
        a = arith.to_rational(a)
        self._check_domain(a, n)
        p, q = a.numerator, a.denominator

        top = self.factorials.get(n - 1)
        q_top = arith.power(q, n - 1).numerator

        total = 0
        p_pow = 1
        q_pow = q_top
        ratio = top
        for i in range(n):
            total += p_pow * q_pow * ratio
            p_pow *= p
            q_pow //= q
            ratio //= i + 1
        return Fraction(total, q_top * top)

    def wait_probability(self, a: Number, n: int) -> Fraction:
        """
        Erlang C probability of wait (Pw).

        Pw = X / (Y + X)

        Requires n > a; raises InvalidDomain otherwise.
        """
        x = self.x_term(a, n)
        y = self.y_term(a, n)
        return arith.divide(x, arith.add(y, x))

    def service_level(
        self,
        a: Number,
        n: int,
        target_time_seconds: Number,
        aht_seconds: Number,
        pw: Optional[Fraction] = None,
    ) -> Fraction:
        """
        Service level for threshold T (seconds):

        SL(T) = 1 - Pw * exp(-(n-a) * (T / AHT))
        """
        h = arith.to_rational(aht_seconds)
        if h <= 0:
            raise InvalidParameter("aht must be > 0 to evaluate service level")
        t = arith.to_rational(target_time_seconds)
        if t < 0:
            raise InvalidParameter("target_time must be >= 0")

        a = arith.to_rational(a)
        if pw is None:
            pw = self.wait_probability(a, n)

        exponent = -arith.multiply(arith.subtract(n, a), arith.divide(t, h))
        sl = 1 - arith.multiply(pw, arith.exp(exponent, self.exp_precision))

        # No clamp: a value outside [0, 1] means the inputs are wrong.
        if not (0 <= sl <= 1):
            raise InvalidDomain(f"service level {float(sl)} outside [0, 1] (intensity={a}, agents={n})")
        return sl

    def average_speed_of_answer(
        self,
        a: Number,
        n: int,
        aht_seconds: Number,
        pw: Optional[Fraction] = None,
    ) -> Fraction:
        """
        Average Speed of Answer (ASA) for M/M/n without abandonment.

        ASA = Pw * (AHT / (n-a))
        """
        a = arith.to_rational(a)
        if pw is None:
            pw = self.wait_probability(a, n)
        return arith.multiply(pw, arith.divide(aht_seconds, arith.subtract(n, a)))


__all__ = ["INTENSITY_PLACES_DEFAULT", "offered_load", "ErlangC"]
