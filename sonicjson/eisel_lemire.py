"""Fast decimal-to-double conversion with the Eisel-Lemire algorithm.

The algorithm decides the correctly rounded double for most inputs using a
128-bit approximation of the power of ten. When the answer cannot be decided
with certainty it gives up, and the caller falls back to a slower exact method.
"""

from __future__ import annotations

import struct

from .tables import POW10_MAX_EXP, POW10_MIN_EXP, pow10_m128

__all__ = ["mul_u64", "atof_eisel_lemire64"]

_U64 = 0xFFFFFFFFFFFFFFFF
_MANTISSA_MASK = 0x000FFFFFFFFFFFFF
_SIGN_BIT = 1 << 63


def _check_u64(name: str, value: int) -> None:
    if not 0 <= value <= _U64:
        raise ValueError(f"{name} must fit in 64 unsigned bits, got {value}")


def mul_u64(x: int, y: int) -> tuple[int, int]:
    """Multiply two unsigned 64-bit integers; return the high and low halves."""
    _check_u64("x", x)
    _check_u64("y", y)
    product = x * y
    return product >> 64, product & _U64


def _leading_zeroes(value: int) -> int:
    return 64 - value.bit_length()


def _bits_to_float(bits: int) -> float:
    return struct.unpack("<d", struct.pack("<Q", bits))[0]


def atof_eisel_lemire64(mant: int, exp10: int, sgn: int) -> float | None:
    """Convert ``sgn * mant * 10 ** exp10`` to the nearest double.

    ``mant`` is an unsigned 64-bit mantissa and ``sgn`` is ``1`` or ``-1``.
    Returns ``None`` when the result cannot be decided exactly: the exponent
    is outside the table, the value is halfway between two doubles, or the
    result would be subnormal or infinite.
    """
    _check_u64("mant", mant)
    if sgn not in (1, -1):
        raise ValueError(f"sign must be 1 or -1, got {sgn}")
    if exp10 < POW10_MIN_EXP or exp10 > POW10_MAX_EXP:
        return None
    if mant == 0:
        return -0.0 if sgn == -1 else 0.0

    clz = _leading_zeroes(mant)
    mant = (mant << clz) & _U64
    # lg10 / lg2 is about 217706 / 2 ** 16
    ret_exp2 = ((217706 * exp10) >> 16) + 64 + 1023 - clz

    pow10 = pow10_m128(exp10)
    x_hi, x_lo = mul_u64(mant, pow10.high)

    # The low bits are all ones and adding the mantissa carries: the upper
    # bound of the product is ambiguous, so take the lower table half in too.
    if (x_hi & 0x1FF) == 0x1FF and ((x_lo + mant) & _U64) < mant:
        y_hi, y_lo = mul_u64(mant, pow10.low)
        merged_hi = x_hi
        merged_lo = (x_lo + y_hi) & _U64
        if merged_lo < x_lo:
            merged_hi = (merged_hi + 1) & _U64
        if (
            (merged_hi & 0x1FF) == 0x1FF
            and merged_lo == _U64
            and ((y_lo + mant) & _U64) < mant
        ):
            return None
        x_hi, x_lo = merged_hi, merged_lo

    msb = x_hi >> 63
    ret_man = x_hi >> (msb + 9)
    ret_exp2 -= 1 ^ msb

    if x_lo == 0 and (x_hi & 0x1FF) == 0 and (ret_man & 3) == 1:
        return None

    ret_man += ret_man & 1
    ret_man >>= 1
    if ret_man >> 53:
        ret_man >>= 1
        ret_exp2 += 1

    # Zero or negative means subnormal; 0x7FF or more means infinity.
    if ret_exp2 <= 0 or ret_exp2 >= 0x7FF:
        return None

    bits = (ret_exp2 << 52) | (ret_man & _MANTISSA_MASK)
    if sgn == -1:
        bits |= _SIGN_BIT
    return _bits_to_float(bits)