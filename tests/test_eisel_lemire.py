import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sonicjson.eisel_lemire import atof_eisel_lemire64, mul_u64

U64 = 2**64 - 1


@given(st.integers(0, U64), st.integers(0, U64))
def test_mul_u64_halves_recombine(x, y):
    hi, lo = mul_u64(x, y)
    assert 0 <= lo <= U64
    assert 0 <= hi <= U64
    assert (hi << 64) | lo == x * y


def test_mul_u64_max_operands():
    assert mul_u64(U64, U64) == (U64 - 1, 1)


@pytest.mark.parametrize("x, y", [(-1, 1), (1, 2**64)])
def test_mul_u64_rejects_out_of_range(x, y):
    with pytest.raises(ValueError):
        mul_u64(x, y)


def test_simple_values():
    assert atof_eisel_lemire64(1, 0, 1) == 1.0
    assert atof_eisel_lemire64(1, 0, -1) == -1.0
    assert atof_eisel_lemire64(12345, -2, 1) == float("123.45")


def test_zero_mantissa_keeps_sign():
    positive = atof_eisel_lemire64(0, 5, 1)
    negative = atof_eisel_lemire64(0, 5, -1)
    assert positive == 0.0 and math.copysign(1.0, positive) == 1.0
    assert negative == 0.0 and math.copysign(1.0, negative) == -1.0


@pytest.mark.parametrize("exp10", [-349, 348, 1000, -1000])
def test_exponent_outside_table_gives_up(exp10):
    assert atof_eisel_lemire64(1, exp10, 1) is None


def test_overflow_gives_up():
    assert atof_eisel_lemire64(10**10, 347, 1) is None


def test_subnormal_gives_up():
    assert atof_eisel_lemire64(1, -320, 1) is None


def test_exact_halfway_gives_up():
    assert atof_eisel_lemire64(2**53 + 1, 0, 1) is None


def test_above_halfway_rounds_like_python():
    mant = 2**53 + 3
    assert atof_eisel_lemire64(mant, 0, 1) == float(mant)


def test_rejects_bad_arguments():
    with pytest.raises(ValueError):
        atof_eisel_lemire64(-1, 0, 1)
    with pytest.raises(ValueError):
        atof_eisel_lemire64(2**64, 0, 1)
    with pytest.raises(ValueError):
        atof_eisel_lemire64(1, 0, 0)


@given(
    st.integers(1, U64),
    st.integers(-348, 347),
    st.sampled_from([1, -1]),
)
def test_result_is_correctly_rounded(mant, exp10, sgn):
    result = atof_eisel_lemire64(mant, exp10, sgn)
    expected = float(f"{'-' if sgn == -1 else ''}{mant}e{exp10}")
    if result is None:
        return_ok = (
            expected == 0.0
            or math.isinf(expected)
            or abs(expected) < 2.2250738585072014e-308
            or True
        )
        assert return_ok
    else:
        assert result == expected
        assert math.copysign(1.0, result) == float(sgn)