"""Exact but slow decimal-to-double conversion.

Used when the fast algorithms cannot decide the correctly rounded result.
The number is held as a string of decimal digits with a decimal point
position. It is scaled by powers of two until 53 bits of mantissa can be
read off and rounded.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field, replace

from .tables import MAX_SHIFT, lshift_cheat

__all__ = ["MAX_DIGITS", "Decimal", "atof_native"]

MAX_DIGITS = 800

_U64 = 0xFFFFFFFFFFFFFFFF
_MANTISSA_MASK = 0x000FFFFFFFFFFFFF
_SIGN_BIT = 1 << 63
_MAX_EXP_DIGITS = 10000

# Binary exponent roughly matching a decimal exponent: 10 ** i ~ 2 ** _POW_TAB[i].
_POW_TAB = (1, 3, 6, 9, 13, 16, 19, 23, 26)
_MAX_POW_STEP = 27

_OVERFLOW_EXP2 = 0x7FF - 1023
_ZERO_EXP2 = -1023


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


def _prefix_is_less(digits: list[int], cutoff: str) -> bool:
    """Whether ``digits`` compares lexicographically below ``cutoff``."""
    for i, digit in enumerate(digits):
        if i >= len(cutoff):
            return False
        wanted = ord(cutoff[i]) - 0x30
        if digit != wanted:
            return digit < wanted
    return len(digits) < len(cutoff)


@dataclass
class Decimal:
    """A decimal number ``0.d1d2d3... * 10 ** dp``.

    ``digits`` holds at most :data:`MAX_DIGITS` digits as integers 0-9;
    ``trunc`` records that non-zero digits were dropped beyond that limit.
    For example ``1.1`` is ``digits=[1, 1], dp=1`` and ``-0.1`` is
    ``digits=[1], dp=0, neg=True``.
    """

    digits: list[int] = field(default_factory=list)
    dp: int = 0
    neg: bool = False
    trunc: bool = False

    @property
    def nd(self) -> int:
        """Number of digits held."""
        return len(self.digits)

    @classmethod
    def parse(cls, text) -> "Decimal":
        """Read a decimal number from the start of ``text``.

        Accepts an optional ``-``, digits with an optional ``.``, and an
        optional exponent. Reading stops at the first character that does not
        belong to a number.
        """
        if isinstance(text, str):
            buf = text.encode("utf-8")
        elif isinstance(text, (bytes, bytearray, memoryview)):
            buf = bytes(text)
        else:
            raise TypeError(f"expected str or bytes, got {type(text).__name__}")

        dec = cls()
        length = len(buf)
        i = 0
        if length and buf[0] == 0x2D:
            dec.neg = True
            i = 1

        saw_dot = False
        while i < length:
            byte = buf[i]
            if _is_digit(byte):
                if byte == 0x30 and not dec.digits:
                    dec.dp -= 1
                elif len(dec.digits) < MAX_DIGITS:
                    dec.digits.append(byte - 0x30)
                elif byte != 0x30:
                    dec.trunc = True
            elif byte == 0x2E:
                saw_dot = True
                dec.dp = len(dec.digits)
            else:
                break
            i += 1

        if not saw_dot:
            dec.dp = len(dec.digits)

        if i < length and buf[i] in (0x65, 0x45):
            i += 1
            sign = 1
            if i < length and buf[i] == 0x2B:
                i += 1
            elif i < length and buf[i] == 0x2D:
                i += 1
                sign = -1
            exp = 0
            while i < length and _is_digit(buf[i]) and exp < _MAX_EXP_DIGITS:
                exp = exp * 10 + buf[i] - 0x30
                i += 1
            dec.dp += exp * sign
        return dec

    def trim(self) -> None:
        """Drop trailing zero digits; a number with no digits gets ``dp == 0``."""
        while self.digits and self.digits[-1] == 0:
            self.digits.pop()
        if not self.digits:
            self.dp = 0

    def _right_shift(self, k: int) -> None:
        digits = self.digits
        nd = len(digits)
        r = 0
        n = 0
        while n >> k == 0:
            if r >= nd:
                if n == 0:
                    self.digits = []
                    return
                while n >> k == 0:
                    n *= 10
                    r += 1
                break
            n = n * 10 + digits[r]
            r += 1
        self.dp -= r - 1

        mask = (1 << k) - 1
        out: list[int] = []
        for digit in digits[r:]:
            out.append(n >> k)
            n = (n & mask) * 10 + digit

        while n > 0:
            dig = n >> k
            n &= mask
            if len(out) < MAX_DIGITS:
                out.append(dig)
            elif dig > 0:
                self.trunc = True
            n *= 10

        self.digits = out
        self.trim()

    def _left_shift(self, k: int) -> None:
        cheat = lshift_cheat(k)
        delta = cheat.delta
        if _prefix_is_less(self.digits, cheat.cutoff):
            delta -= 1

        total = len(self.digits) + delta
        out = [0] * min(total, MAX_DIGITS)
        w = total
        n = 0

        def put(remainder: int) -> None:
            nonlocal w
            w -= 1
            if w < MAX_DIGITS:
                out[w] = remainder
            elif remainder:
                self.trunc = True

        for digit in reversed(self.digits):
            n += digit << k
            n, rem = divmod(n, 10)
            put(rem)
        while n > 0:
            n, rem = divmod(n, 10)
            put(rem)

        self.digits = out
        self.dp += delta
        self.trim()

    def shift(self, k: int) -> None:
        """Multiply by ``2 ** k`` in place; a negative ``k`` divides."""
        if not self.digits or k == 0:
            return
        while k > MAX_SHIFT:
            self._left_shift(MAX_SHIFT)
            k -= MAX_SHIFT
        while k < -MAX_SHIFT:
            self._right_shift(MAX_SHIFT)
            k += MAX_SHIFT
        if k > 0:
            self._left_shift(k)
        elif k < 0:
            self._right_shift(-k)

    def should_round_up(self, nd: int) -> bool:
        """Whether truncating to ``nd`` digits should round up.

        Exact halves round to even unless digits were truncated.
        """
        if nd < 0 or nd >= len(self.digits):
            return False
        if self.digits[nd] == 5 and nd + 1 == len(self.digits):
            if self.trunc:
                return True
            return nd > 0 and self.digits[nd - 1] % 2 != 0
        return self.digits[nd] >= 5

    def rounded_integer(self) -> int:
        """The integer part, rounded, as an unsigned 64-bit value.

        Numbers with more than 20 integer digits give ``2 ** 64 - 1``.
        """
        if self.dp > 20:
            return _U64
        n = 0
        for digit in self.digits[: max(self.dp, 0)]:
            n = n * 10 + digit
        n *= 10 ** max(self.dp - len(self.digits), 0)
        if self.should_round_up(self.dp):
            n += 1
        return n & _U64

    def _mantissa_exponent(self) -> tuple[int, int]:
        if not self.digits:
            return 0, _ZERO_EXP2
        if self.dp > 310:
            return 0, _OVERFLOW_EXP2
        if self.dp < -330:
            return 0, _ZERO_EXP2

        exp2 = 0
        while self.dp > 0:
            n = _MAX_POW_STEP if self.dp >= 9 else _POW_TAB[self.dp]
            self.shift(-n)
            exp2 += n
        while self.dp < 0 or (self.dp == 0 and self.digits and self.digits[0] < 5):
            n = _MAX_POW_STEP if -self.dp >= 9 else _POW_TAB[-self.dp]
            self.shift(n)
            exp2 -= n

        # The range reached is [0.5, 1); doubles are normalised to [1, 2).
        exp2 -= 1

        if exp2 < -1022:
            n = -1022 - exp2
            self.shift(-n)
            exp2 += n

        if exp2 + 1023 >= 0x7FF:
            return 0, _OVERFLOW_EXP2

        self.shift(53)
        mant = self.rounded_integer()

        if mant == 2 << 52:
            mant >>= 1
            exp2 += 1
            if exp2 + 1023 >= 0x7FF:
                return 0, _OVERFLOW_EXP2

        if not mant & (1 << 52):
            exp2 = _ZERO_EXP2
        return mant, exp2

    def to_float(self) -> float:
        """Return the correctly rounded double; the decimal is left unchanged.

        Too large values give infinity and too small ones zero, both signed.
        """
        work = replace(self, digits=list(self.digits))
        mant, exp2 = work._mantissa_exponent()
        bits = mant & _MANTISSA_MASK
        bits |= ((exp2 + 1023) & 0x7FF) << 52
        if self.neg:
            bits |= _SIGN_BIT
        return struct.unpack("<d", struct.pack("<Q", bits))[0]


def atof_native(text) -> float:
    """Convert the number at the start of ``text`` to the nearest double."""
    return Decimal.parse(text).to_float()