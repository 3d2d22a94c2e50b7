import pytest

from tally.identity import (
    Accumulator,
    durations,
    float64s,
    int64s,
    murmur3_sum64,
    string_string_map,
)


def test_murmur3_empty_input_is_zero():
    assert murmur3_sum64(b"") == 0


def test_murmur3_str_and_bytes_agree():
    assert murmur3_sum64("abcdefghij0") == murmur3_sum64(b"abcdefghij0")


@pytest.mark.parametrize("length", [1, 7, 8, 9, 15, 16, 17, 33])
def test_murmur3_fits_in_64_bits_for_all_tail_lengths(length):
    result = murmur3_sum64(b"x" * length)
    assert 0 <= result < 2**64
    assert result != murmur3_sum64(b"x" * (length + 1))


def test_accumulator_default_seed():
    assert Accumulator().value == 23


def test_accumulator_add_zero_keeps_value():
    assert Accumulator().add_uint64(0).value == 23


def test_accumulator_is_commutative():
    a = Accumulator().add_string("x").add_string("y")
    b = Accumulator().add_string("y").add_string("x")
    assert a == b


def test_accumulator_wraps_to_64_bits():
    acc = Accumulator(2**64 - 1).add_uint64(2**64 - 1)
    assert 0 <= acc.value < 2**64


def test_empty_inputs_give_zero():
    assert durations([]) == 0
    assert int64s([]) == 0
    assert float64s([]) == 0
    assert string_string_map({}) == 0


def test_durations_match_int64s():
    values = [0, 1_000_000, -5, 2**40]
    assert durations(values) == int64s(values)


def test_negative_values_wrap_as_unsigned():
    assert int64s([-1]) == int64s([2**64 - 1])


def test_float64s_uses_ieee_bits():
    assert float64s([0.0]) == int64s([0])
    assert float64s([1.0]) == int64s([0x3FF0000000000000])


def test_int64s_order_independent():
    assert int64s([1, 2, 3]) == int64s([3, 1, 2])


def test_string_string_map_order_independent():
    m1 = {"a": "foo", "b": "bar", "c": "baz"}
    m2 = {"c": "baz", "a": "foo", "b": "bar"}
    assert string_string_map(m1) == string_string_map(m2)


def test_string_string_map_matches_accumulator():
    assert string_string_map({"a": "b"}) == Accumulator().add_string("a=b").value


def test_string_string_map_distinguishes_values():
    assert string_string_map({"a": "1"}) != string_string_map({"a": "2"})
    assert string_string_map({"a": "1"}) == string_string_map({"a": "1"})