# src/erlangfte/factorial.py
from __future__ import annotations

import bisect
import math
import threading
from typing import Dict, List, Sequence

from .errors import InvalidDomain

# Below this a straight product beats sieving.
_SMALL_N: int = 20


# -----------------------------
# Prime-swing factorial
# -----------------------------
def _primes_up_to(n: int) -> List[int]:
    if n < 2:
        return []
    sieve = bytearray([1]) * (n + 1)
    sieve[0] = sieve[1] = 0
    for p in range(2, math.isqrt(n) + 1):
        if sieve[p]:
            sieve[p * p :: p] = bytearray(len(range(p * p, n + 1, p)))
    return [i for i, is_prime in enumerate(sieve) if is_prime]


def _product(values: Sequence[int], lo: int, hi: int) -> int:
    """Balanced product of values[lo:hi] (keeps operands of similar size)."""
    count = hi - lo
    if count <= 0:
        return 1
    if count <= 8:
        return math.prod(values[lo:hi])
    mid = (lo + hi) // 2
    return _product(values, lo, mid) * _product(values, mid, hi)


def _swing(n: int, primes: Sequence[int]) -> int:
    """
    swing(n) = n! / (floor(n/2)!)^2, built from its prime factorisation.

    The exponent of p in swing(n) is sum_k (floor(n / p^k) mod 2).
    """
    if n < 2:
        return 1
    root = math.isqrt(n)
    end = bisect.bisect_right(primes, n)
    factors: List[int] = []
    for p in primes[:end]:
        if p > n // 2:
            factors.append(p)
        elif p > n // 3:
            continue
        elif p > root:
            if (n // p) & 1:
                factors.append(p)
        else:
            q, f = n, 1
            while True:
                q //= p
                if q == 0:
                    break
                if q & 1:
                    f *= p
            if f > 1:
                factors.append(f)
    return _product(factors, 0, len(factors))


def _swing_factorial(n: int, primes: Sequence[int]) -> int:
    if n < _SMALL_N:
        return math.prod(range(2, n + 1))
    half = _swing_factorial(n // 2, primes)
    return half * half * _swing(n, primes)


def prime_swing_factorial(n: int) -> int:
    """Exact n! via the prime-swing recursion n! = (floor(n/2)!)^2 * swing(n)."""
    if n < 0:
        raise InvalidDomain(f"factorial is undefined for n={n}")
    if n < _SMALL_N:
        return math.prod(range(2, n + 1))
    return _swing_factorial(n, _primes_up_to(n))


# -----------------------------
# Memoized provider
# -----------------------------
class FactorialCache:
    """
    Append-only n -> n! store shared by every evaluation that holds it.

    Reads go straight to the dict. Misses are computed outside the lock and
    stored with setdefault, so two threads racing on the same n both end up
    returning the single stored value.
    """

    def __init__(self) -> None:
        self._values: Dict[int, int] = {0: 1, 1: 1}
        self._lock = threading.Lock()

    def get(self, n: int) -> int:
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidDomain(f"factorial needs an int, got {n!r}")
        if n < 0:
            raise InvalidDomain(f"factorial is undefined for n={n}")

        cached = self._values.get(n)
        if cached is not None:
            return cached

        previous = self._values.get(n - 1)
        value = previous * n if previous is not None else prime_swing_factorial(n)

        with self._lock:
            return self._values.setdefault(n, value)

    def __contains__(self, n: object) -> bool:
        return n in self._values

    def __len__(self) -> int:
        return len(self._values)

    def clear(self) -> None:
        with self._lock:
            self._values = {0: 1, 1: 1}


__all__ = ["FactorialCache", "prime_swing_factorial"]
