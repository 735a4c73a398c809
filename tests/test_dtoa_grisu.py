import struct

import pytest

from ecotrack.dtoa_grisu import (
    Boundaries,
    CachedPower,
    DiyFp,
    cached_power_for_binary_exponent,
    compute_boundaries,
    find_largest_pow10,
    grisu2,
)


def _as_single(x):
    return struct.unpack(">f", struct.pack(">f", x))[0]


DOUBLES = [
    1.0,
    0.1,
    0.3,
    2.5,
    123456.789,
    1e23,
    5e-324,
    2.2250738585072014e-308,
    1.7976931348623157e308,
    3.141592653589793,
    9007199254740993.0,
    1e-7,
]

SINGLES = [1.0, 0.1, 3.4028234663852886e38, 1.401298464324817e-45, 7.0385307e-26, 2.5]


@pytest.mark.parametrize("value", DOUBLES)
def test_grisu2_double_round_trips(value):
    digits, exponent = grisu2(value)
    assert float(f"{digits}e{exponent}") == value
    assert len(digits) <= 17
    assert digits[0] != "0"


@pytest.mark.parametrize("value", SINGLES)
def test_grisu2_single_round_trips(value):
    stored = _as_single(value)
    digits, exponent = grisu2(value, single=True)
    assert _as_single(float(f"{digits}e{exponent}")) == stored
    assert len(digits) <= 9


def test_grisu2_tenth_is_short():
    digits, exponent = grisu2(0.1)
    assert (digits, exponent) == ("1", -1)


@pytest.mark.parametrize("bad", [0.0, -1.0, float("inf"), float("nan")])
def test_grisu2_rejects_non_positive_or_non_finite(bad):
    with pytest.raises(ValueError):
        grisu2(bad)


def test_grisu2_single_rejects_overflow():
    with pytest.raises(ValueError):
        grisu2(1e300, single=True)


@pytest.mark.parametrize("value", DOUBLES)
def test_boundaries_are_normalized_and_ordered(value):
    b = compute_boundaries(value)
    assert isinstance(b, Boundaries)
    assert b.w.f >> 63 == 1
    assert b.plus.f >> 63 == 1
    assert b.minus.e == b.plus.e
    assert b.minus.f < b.plus.f


def test_diyfp_sub_and_errors():
    assert DiyFp(10, 3).sub(DiyFp(4, 3)) == DiyFp(6, 3)
    with pytest.raises(ValueError):
        DiyFp(10, 3).sub(DiyFp(4, 2))
    with pytest.raises(ValueError):
        DiyFp(3, 3).sub(DiyFp(4, 3))


def test_diyfp_mul_keeps_upper_bits():
    half = DiyFp(1 << 63, 0)
    assert half.mul(half) == DiyFp(1 << 62, 64)


def test_diyfp_normalize_preserves_value():
    x = DiyFp(5, 10)
    n = x.normalize()
    assert n.f >> 63 == 1
    assert n.f * 2 ** (n.e - x.e) == x.f
    with pytest.raises(ValueError):
        DiyFp(0, 0).normalize()


def test_diyfp_normalize_to():
    x = DiyFp(3, 5)
    y = x.normalize_to(2)
    assert y == DiyFp(24, 2)
    with pytest.raises(ValueError):
        x.normalize_to(6)
    with pytest.raises(ValueError):
        DiyFp(1 << 63, 5).normalize_to(4)


@pytest.mark.parametrize("e", [-1137, -500, -64, 0, 100, 960])
def test_cached_power_lands_in_range(e):
    c = cached_power_for_binary_exponent(e)
    assert isinstance(c, CachedPower)
    assert -60 <= c.e + e + 64 <= -32


def test_cached_power_rejects_out_of_range():
    with pytest.raises(ValueError):
        cached_power_for_binary_exponent(2000)


def test_cached_power_exact_entry():
    c = cached_power_for_binary_exponent(-50 - 64 - 40)
    assert (c.f, c.e, c.k) == (0x9C40000000000000, -50, 4)


def test_find_largest_pow10_documented_cases():
    assert find_largest_pow10(0) == (1, 1)
    assert find_largest_pow10(1000000000) == (10, 1000000000)


@pytest.mark.parametrize("n", [1, 9, 10, 99, 100, 12345, 99999999, 4294967295])
def test_find_largest_pow10_invariant(n):
    k, pow10 = find_largest_pow10(n)
    assert pow10 == 10 ** (k - 1)
    assert pow10 <= n < 10**k or k == 10