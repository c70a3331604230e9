"""Constant tables used when converting decimal text to binary floats."""

from __future__ import annotations

from typing import NamedTuple

__all__ = [
    "POW10_MIN_EXP",
    "POW10_MAX_EXP",
    "MAX_SHIFT",
    "Pow10M128",
    "LShiftCheat",
    "pow10_m128",
    "pow10_double",
    "lshift_cheat",
]

POW10_MIN_EXP = -348
POW10_MAX_EXP = 347
MAX_SHIFT = 60
_EXACT_DOUBLE_MAX_EXP = 22


class Pow10M128(NamedTuple):
    """A power of ten as a normalised 128-bit mantissa, rounded down."""

    high: int
    low: int


class LShiftCheat(NamedTuple):
    """How many decimal digits a binary left shift by ``k`` bits adds.

    ``delta`` digits are added, one fewer when the decimal's leading digits
    compare lower than ``cutoff`` (the decimal form of ``5 ** k``).
    """

    delta: int
    cutoff: str


def _normalised_mantissa(exp10: int) -> int:
    """The top 128 bits of ``10 ** exp10``, truncated, with the top bit set."""
    if exp10 >= 0:
        value = 10**exp10
        shift = value.bit_length() - 128
        return value >> shift if shift > 0 else value << -shift
    denominator = 10**-exp10
    return (1 << (denominator.bit_length() + 127)) // denominator


def _split(mantissa: int) -> Pow10M128:
    return Pow10M128(mantissa >> 64, mantissa & 0xFFFFFFFFFFFFFFFF)


_POW10_M128 = tuple(
    _split(_normalised_mantissa(exp10))
    for exp10 in range(POW10_MIN_EXP, POW10_MAX_EXP + 1)
)

_POW10_DOUBLE = tuple(float(10**exp10) for exp10 in range(_EXACT_DOUBLE_MAX_EXP + 1))

_LSHIFT_TAB = (LShiftCheat(0, ""),) + tuple(
    LShiftCheat(len(str(1 << k)), str(5**k)) for k in range(1, MAX_SHIFT + 1)
)


def pow10_m128(exp10: int) -> Pow10M128:
    """Return the 128-bit mantissa approximation of ``10 ** exp10``.

    Valid for ``exp10`` in ``-348..347``; raises ``ValueError`` otherwise.
    """
    if not POW10_MIN_EXP <= exp10 <= POW10_MAX_EXP:
        raise ValueError(
            f"exponent {exp10} outside {POW10_MIN_EXP}..{POW10_MAX_EXP}"
        )
    return _POW10_M128[exp10 - POW10_MIN_EXP]


def pow10_double(exp10: int) -> float:
    """Return ``10 ** exp10`` as a double for ``exp10`` in ``0..22``.

    These are exactly the powers of ten a double holds without rounding.
    """
    if not 0 <= exp10 <= _EXACT_DOUBLE_MAX_EXP:
        raise ValueError(f"exponent {exp10} outside 0..{_EXACT_DOUBLE_MAX_EXP}")
    return _POW10_DOUBLE[exp10]


def lshift_cheat(k: int) -> LShiftCheat:
    """Return the digit-count information for a left shift by ``k`` bits."""
    if not 0 <= k <= MAX_SHIFT:
        raise ValueError(f"shift {k} outside 0..{MAX_SHIFT}")
    return _LSHIFT_TAB[k]