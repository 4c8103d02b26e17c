import math
from decimal import Decimal
from fractions import Fraction

import pytest

from erlangfte import arith
from erlangfte.errors import DivisionByZero, InvalidDomain


def test_to_rational_uses_decimal_repr_of_floats():
    assert arith.to_rational(0.2) == Fraction(1, 5)
    assert arith.to_rational(0.046481566) == Fraction("0.046481566")
    assert arith.to_rational("0.99999") == Fraction(99999, 100000)
    assert arith.to_rational(Decimal("1.25")) == Fraction(5, 4)
    assert arith.to_rational(7) == Fraction(7)


def test_to_rational_rejects_non_finite():
    with pytest.raises(InvalidDomain):
        arith.to_rational(float("inf"))
    with pytest.raises(InvalidDomain):
        arith.to_rational(float("nan"))


def test_divide_by_zero_raises():
    with pytest.raises(DivisionByZero):
        arith.divide(1, 0)
    with pytest.raises(ZeroDivisionError):
        arith.divide(Fraction(1, 2), Fraction(0))


def test_power_is_exact():
    assert arith.power(Fraction(1, 2), 3) == Fraction(1, 8)
    assert arith.power(Fraction(0), 0) == 1
    big = arith.power(Fraction(10, 3), 2000)
    assert big.numerator == 10**2000
    assert big.denominator == 3**2000


def test_power_rejects_negative_exponent():
    with pytest.raises(InvalidDomain):
        arith.power(2, -1)
    with pytest.raises(InvalidDomain):
        arith.power(2, 1.5)


def test_exp_is_rounded_to_precision():
    assert arith.exp(0) == 1
    e_minus_one = arith.exp(-1, precision=30)
    assert abs(float(e_minus_one) - math.exp(-1)) < 1e-15
    assert arith.exp(-1, precision=5) == Fraction("0.36788")
    assert arith.exp(1, precision=3) == Fraction("2.72")


def test_exp_is_deterministic():
    assert arith.exp(Fraction(-200, 3)) == arith.exp(Fraction(-200, 3))


def test_round_half_up():
    assert arith.round_half_up(Fraction(16665, 100000), 4) == Fraction("0.1667")
    assert arith.round_half_up(Fraction(10, 3), 4) == Fraction("3.3333")
    assert arith.round_half_up(Fraction(500, 3), 4) == Fraction("166.6667")
    assert arith.round_half_up(Fraction(1, 2), 0) == 1
