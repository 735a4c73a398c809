"""Formatting of floating point numbers as short, round-trippable decimal text."""

from __future__ import annotations

import math
import struct

from ecotrack.dtoa_grisu import grisu2

_MIN_EXP = -4
_MAX_EXP_DOUBLE = 15
_MAX_EXP_SINGLE = 6


def append_exponent(e: int) -> str:
    """Return the signed decimal exponent with at least two digits, e.g. ``+05``."""
    if not -1000 < e < 1000:
        raise ValueError("exponent must lie strictly between -1000 and 1000")
    sign = "-" if e < 0 else "+"
    return f"{sign}{abs(e):02d}"


def format_buffer(digits: str, decimal_exponent: int, min_exp: int, max_exp: int) -> str:
    """Render ``int(digits) * 10**decimal_exponent`` like ``printf("%g")``.

    Numbers in ``[10**min_exp, 10**max_exp)`` use fixed-point notation, the
    rest use exponential notation. Whole numbers keep a trailing ``.0``.
    """
    if min_exp >= 0:
        raise ValueError("min_exp must be negative")
    if max_exp <= 0:
        raise ValueError("max_exp must be positive")
    if not digits or not digits.isdigit():
        raise ValueError("digits must be a non-empty string of decimal digits")

    k = len(digits)
    n = k + decimal_exponent

    if k <= n <= max_exp:
        return digits + "0" * (n - k) + ".0"
    if 0 < n <= max_exp:
        return f"{digits[:n]}.{digits[n:]}"
    if min_exp < n <= 0:
        return "0." + "0" * (-n) + digits
    mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{mantissa}e{append_exponent(n - 1)}"


def _as_single(value: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError as exc:
        raise ValueError(f"{value!r} does not fit in single precision") from exc


def to_chars(value: float, single: bool = False) -> str:
    """Return the shortest decimal text that reads back as ``value``.

    With ``single`` the value is treated as an IEEE single-precision number.
    NaN and infinities are rejected.
    """
    if not math.isfinite(value):
        raise ValueError("value must be finite")
    if single:
        value = _as_single(value)

    negative = math.copysign(1.0, value) < 0
    sign = "-" if negative else ""
    value = abs(value)

    if value == 0:
        return sign + "0.0"

    digits, exponent = grisu2(value, single)
    max_exp = _MAX_EXP_SINGLE if single else _MAX_EXP_DOUBLE
    return sign + format_buffer(digits, exponent, _MIN_EXP, max_exp)