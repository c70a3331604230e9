import pytest

from sonicjson.tables import (
    POW10_MAX_EXP,
    POW10_MIN_EXP,
    lshift_cheat,
    pow10_double,
    pow10_m128,
)


def test_pow10_m128_smallest_entry():
    assert pow10_m128(-348) == (0xFA8FD5A0081C0288, 0x1732C869CD60E453)


def test_pow10_m128_largest_entry():
    assert pow10_m128(347) == (0xD13EB46469447567, 0x4B7195F2D2D1A9FB)


def test_pow10_m128_one_and_tenths():
    assert pow10_m128(0) == (0x8000000000000000, 0)
    assert pow10_m128(-1) == (0xCCCCCCCCCCCCCCCC, 0xCCCCCCCCCCCCCCCC)
    assert pow10_m128(-2) == (0xA3D70A3D70A3D70A, 0x3D70A3D70A3D70A3)


def test_pow10_m128_first_entry_with_low_bits():
    assert pow10_m128(28) == (0x813F3978F8940984, 0x4000000000000000)
    assert pow10_m128(27).low == 0


def test_pow10_m128_all_normalised():
    for exp10 in range(POW10_MIN_EXP, POW10_MAX_EXP + 1):
        high, low = pow10_m128(exp10)
        assert high >> 63 == 1
        assert 0 <= low < 1 << 64


def test_pow10_m128_out_of_range():
    with pytest.raises(ValueError):
        pow10_m128(POW10_MIN_EXP - 1)
    with pytest.raises(ValueError):
        pow10_m128(POW10_MAX_EXP + 1)


def test_pow10_double_exact_values():
    assert pow10_double(0) == 1e0
    assert pow10_double(15) == 1e15
    assert pow10_double(22) == 1e22


def test_pow10_double_out_of_range():
    with pytest.raises(ValueError):
        pow10_double(23)
    with pytest.raises(ValueError):
        pow10_double(-1)


def test_lshift_cheat_pinned_entries():
    assert lshift_cheat(0) == (0, "")
    assert lshift_cheat(4) == (2, "625")
    assert lshift_cheat(60) == (19, "867361737988403547205962240695953369140625")


def test_lshift_cheat_cutoff_is_inverse_power_of_two():
    for k in range(1, 61):
        entry = lshift_cheat(k)
        assert int(entry.cutoff) * 2**k == 10**k


def test_lshift_cheat_delta_grows_slowly():
    deltas = [lshift_cheat(k).delta for k in range(61)]
    assert all(0 <= b - a <= 1 for a, b in zip(deltas, deltas[1:]))


def test_lshift_cheat_out_of_range():
    with pytest.raises(ValueError):
        lshift_cheat(61)
    with pytest.raises(ValueError):
        lshift_cheat(-1)