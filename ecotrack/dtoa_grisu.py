"""Shortest decimal digit generation for binary floating point (Grisu2)."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

_Q = 64
_MASK64 = (1 << 64) - 1
_ALPHA = -60
_GAMMA = -32


@dataclass(frozen=True)
class DiyFp:
    """A number of the form f * 2**e with a 64-bit significand."""

    f: int
    e: int

    def sub(self, other: DiyFp) -> DiyFp:
        """Return self - other; both must share an exponent and self.f >= other.f."""
        if self.e != other.e:
            raise ValueError("exponents differ")
        if self.f < other.f:
            raise ValueError("difference would be negative")
        return DiyFp(self.f - other.f, self.e)

    def mul(self, other: DiyFp) -> DiyFp:
        """Return self * other, keeping the upper 64 bits rounded half up."""
        product = self.f * other.f
        high = (product + (1 << (_Q - 1))) >> _Q
        return DiyFp(high & _MASK64, self.e + other.e + _Q)

    def normalize(self) -> DiyFp:
        """Shift so that the top bit of the 64-bit significand is set."""
        if self.f == 0:
            raise ValueError("cannot normalize zero")
        f, e = self.f, self.e
        while (f >> 63) == 0:
            f <<= 1
            e -= 1
        return DiyFp(f, e)

    def normalize_to(self, target_exponent: int) -> DiyFp:
        """Rescale to the given exponent without losing bits."""
        delta = self.e - target_exponent
        if delta < 0:
            raise ValueError("target exponent is larger than the current one")
        shifted = self.f << delta
        if shifted > _MASK64:
            raise ValueError("significand does not fit after shifting")
        return DiyFp(shifted, target_exponent)


@dataclass(frozen=True)
class Boundaries:
    """A normalized value and the normalized midpoints to its neighbours."""

    w: DiyFp
    minus: DiyFp
    plus: DiyFp


@dataclass(frozen=True)
class CachedPower:
    """An approximation f * 2**e of 10**k."""

    f: int
    e: int
    k: int


_CACHED_POWERS = tuple(
    CachedPower(f, e, k)
    for f, e, k in (
        (0xAB70FE17C79AC6CA, -1060, -300),
        (0xFF77B1FCBEBCDC4F, -1034, -292),
        (0xBE5691EF416BD60C, -1007, -284),
        (0x8DD01FAD907FFC3C, -980, -276),
        (0xD3515C2831559A83, -954, -268),
        (0x9D71AC8FADA6C9B5, -927, -260),
        (0xEA9C227723EE8BCB, -901, -252),
        (0xAECC49914078536D, -874, -244),
        (0x823C12795DB6CE57, -847, -236),
        (0xC21094364DFB5637, -821, -228),
        (0x9096EA6F3848984F, -794, -220),
        (0xD77485CB25823AC7, -768, -212),
        (0xA086CFCD97BF97F4, -741, -204),
        (0xEF340A98172AACE5, -715, -196),
        (0xB23867FB2A35B28E, -688, -188),
        (0x84C8D4DFD2C63F3B, -661, -180),
        (0xC5DD44271AD3CDBA, -635, -172),
        (0x936B9FCEBB25C996, -608, -164),
        (0xDBAC6C247D62A584, -582, -156),
        (0xA3AB66580D5FDAF6, -555, -148),
        (0xF3E2F893DEC3F126, -529, -140),
        (0xB5B5ADA8AAFF80B8, -502, -132),
        (0x87625F056C7C4A8B, -475, -124),
        (0xC9BCFF6034C13053, -449, -116),
        (0x964E858C91BA2655, -422, -108),
        (0xDFF9772470297EBD, -396, -100),
        (0xA6DFBD9FB8E5B88F, -369, -92),
        (0xF8A95FCF88747D94, -343, -84),
        (0xB94470938FA89BCF, -316, -76),
        (0x8A08F0F8BF0F156B, -289, -68),
        (0xCDB02555653131B6, -263, -60),
        (0x993FE2C6D07B7FAC, -236, -52),
        (0xE45C10C42A2B3B06, -210, -44),
        (0xAA242499697392D3, -183, -36),
        (0xFD87B5F28300CA0E, -157, -28),
        (0xBCE5086492111AEB, -130, -20),
        (0x8CBCCC096F5088CC, -103, -12),
        (0xD1B71758E219652C, -77, -4),
        (0x9C40000000000000, -50, 4),
        (0xE8D4A51000000000, -24, 12),
        (0xAD78EBC5AC620000, 3, 20),
        (0x813F3978F8940984, 30, 28),
        (0xC097CE7BC90715B3, 56, 36),
        (0x8F7E32CE7BEA5C70, 83, 44),
        (0xD5D238A4ABE98068, 109, 52),
        (0x9F4F2726179A2245, 136, 60),
        (0xED63A231D4C4FB27, 162, 68),
        (0xB0DE65388CC8ADA8, 189, 76),
        (0x83C7088E1AAB65DB, 216, 84),
        (0xC45D1DF942711D9A, 242, 92),
        (0x924D692CA61BE758, 269, 100),
        (0xDA01EE641A708DEA, 295, 108),
        (0xA26DA3999AEF774A, 322, 116),
        (0xF209787BB47D6B85, 348, 124),
        (0xB454E4A179DD1877, 375, 132),
        (0x865B86925B9BC5C2, 402, 140),
        (0xC83553C5C8965D3D, 428, 148),
        (0x952AB45CFA97A0B3, 455, 156),
        (0xDE469FBD99A05FE3, 481, 164),
        (0xA59BC234DB398C25, 508, 172),
        (0xF6C69A72A3989F5C, 534, 180),
        (0xB7DCBF5354E9BECE, 561, 188),
        (0x88FCF317F22241E2, 588, 196),
        (0xCC20CE9BD35C78A5, 614, 204),
        (0x98165AF37B2153DF, 641, 212),
        (0xE2A0B5DC971F303A, 667, 220),
        (0xA8D9D1535CE3B396, 694, 228),
        (0xFB9B7CD9A4A7443C, 720, 236),
        (0xBB764C4CA7A44410, 747, 244),
        (0x8BAB8EEFB6409C1A, 774, 252),
        (0xD01FEF10A657842C, 800, 260),
        (0x9B10A4E5E9913129, 827, 268),
        (0xE7109BFBA19C0C9D, 853, 276),
        (0xAC2820D9623BF429, 880, 284),
        (0x80444B5E7AA7CF85, 907, 292),
        (0xBF21E44003ACDD2D, 933, 300),
        (0x8E679C2F5E44FF8F, 960, 308),
        (0xD433179D9C8CB841, 986, 316),
        (0x9E19DB92B4E31BA9, 1013, 324),
    )
)

_CACHED_MIN_DEC_EXP = -300
_CACHED_DEC_STEP = 8


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _float_bits(value: float, single: bool) -> tuple[int, float]:
    """Return the raw IEEE bits of value and the value as stored."""
    if single:
        try:
            packed = struct.pack(">f", value)
        except OverflowError as exc:
            raise ValueError(f"{value!r} does not fit in single precision") from exc
        return struct.unpack(">I", packed)[0], struct.unpack(">f", packed)[0]
    packed = struct.pack(">d", value)
    return struct.unpack(">Q", packed)[0], value


def compute_boundaries(value: float, single: bool = False) -> Boundaries:
    """Return the normalized value and its rounding boundaries.

    The value must be finite and positive. With ``single`` the value is taken
    as an IEEE single-precision number, otherwise as a double.
    """
    if not math.isfinite(value) or value <= 0:
        raise ValueError("value must be finite and positive")
    bits, stored = _float_bits(value, single)
    if not math.isfinite(stored) or stored <= 0:
        raise ValueError("value must be finite and positive")

    precision = 24 if single else 53
    max_exponent = 128 if single else 1024
    bias = max_exponent - 1 + (precision - 1)
    min_exp = 1 - bias
    hidden_bit = 1 << (precision - 1)

    biased_exp = bits >> (precision - 1)
    fraction = bits & (hidden_bit - 1)

    if biased_exp == 0:
        v = DiyFp(fraction, min_exp)
    else:
        v = DiyFp(fraction + hidden_bit, biased_exp - bias)

    lower_boundary_is_closer = fraction == 0 and biased_exp > 1
    m_plus = DiyFp(2 * v.f + 1, v.e - 1)
    if lower_boundary_is_closer:
        m_minus = DiyFp(4 * v.f - 1, v.e - 2)
    else:
        m_minus = DiyFp(2 * v.f - 1, v.e - 1)

    w_plus = m_plus.normalize()
    w_minus = m_minus.normalize_to(w_plus.e)
    return Boundaries(v.normalize(), w_minus, w_plus)


def cached_power_for_binary_exponent(e: int) -> CachedPower:
    """Return a cached power of ten c with -60 <= c.e + e + 64 <= -32."""
    if not -1500 <= e <= 1500:
        raise ValueError("binary exponent out of range")
    f = _ALPHA - e - 1
    k = _trunc_div(f * 78913, 1 << 18) + (1 if f > 0 else 0)
    index = _trunc_div(-_CACHED_MIN_DEC_EXP + k + (_CACHED_DEC_STEP - 1), _CACHED_DEC_STEP)
    if not 0 <= index < len(_CACHED_POWERS):
        raise ValueError("no cached power for this exponent")
    cached = _CACHED_POWERS[index]
    if not _ALPHA <= cached.e + e + 64 <= _GAMMA:
        raise ValueError("cached power out of the target range")
    return cached


def find_largest_pow10(n: int) -> tuple[int, int]:
    """Return (k, 10**(k-1)) with 10**(k-1) <= n < 10**k; (1, 1) for zero."""
    pow10 = 1000000000
    for k in range(10, 1, -1):
        if n >= pow10:
            return k, pow10
        pow10 //= 10
    return 1, 1


def _round_digits(digits: list[int], dist: int, delta: int, rest: int, ten_k: int) -> None:
    """Decrement the last digit while that brings the result closer to w."""
    while (
        rest < dist
        and delta - rest >= ten_k
        and (rest + ten_k < dist or dist - rest > rest + ten_k - dist)
    ):
        digits[-1] -= 1
        rest += ten_k


def _digit_gen(m_minus: DiyFp, w: DiyFp, m_plus: DiyFp) -> tuple[list[int], int]:
    """Generate digits of a number in [m_minus, m_plus]; return digits and exponent shift."""
    delta = m_plus.sub(m_minus).f
    dist = m_plus.sub(w).f

    shift = -m_plus.e
    one_f = 1 << shift
    p1 = m_plus.f >> shift
    p2 = m_plus.f & (one_f - 1)

    k, pow10 = find_largest_pow10(p1)
    digits: list[int] = []

    n = k
    while n > 0:
        d, p1 = divmod(p1, pow10)
        digits.append(d)
        n -= 1
        rest = (p1 << shift) + p2
        if rest <= delta:
            _round_digits(digits, dist, delta, rest, pow10 << shift)
            return digits, n
        pow10 //= 10

    m = 0
    while True:
        p2 *= 10
        digits.append(p2 >> shift)
        p2 &= one_f - 1
        m += 1
        delta *= 10
        dist *= 10
        if p2 <= delta:
            break

    _round_digits(digits, dist, delta, p2, one_f)
    return digits, -m


def grisu2(value: float, single: bool = False) -> tuple[str, int]:
    """Return (digits, exponent) such that value == int(digits) * 10**exponent.

    The digits are a short decimal string that reads back as the same number
    in the chosen precision.
    """
    bounds = compute_boundaries(value, single)
    cached = cached_power_for_binary_exponent(bounds.plus.e)
    c_minus_k = DiyFp(cached.f, cached.e)

    w = bounds.w.mul(c_minus_k)
    w_minus = bounds.minus.mul(c_minus_k)
    w_plus = bounds.plus.mul(c_minus_k)

    m_minus = DiyFp(w_minus.f + 1, w_minus.e)
    m_plus = DiyFp(w_plus.f - 1, w_plus.e)

    digits, shift = _digit_gen(m_minus, w, m_plus)
    return "".join(str(d) for d in digits), -cached.k + shift