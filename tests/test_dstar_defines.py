import pytest

from mmdvmcore.dstar_defines import bits_to_byte_lsb_first


def test_round_trip_every_byte():
    for value in range(256):
        bits = [(value >> i) & 1 for i in range(8)]
        assert bits_to_byte_lsb_first(bits) == value


def test_first_bit_is_least_significant():
    assert bits_to_byte_lsb_first([1]) == 1
    assert bits_to_byte_lsb_first([0, 0, 0, 0, 0, 0, 0, 1]) == 128


def test_truthy_items_count_as_ones():
    assert bits_to_byte_lsb_first([True, False, True]) == bits_to_byte_lsb_first([1, 0, 1])


def test_empty_is_zero():
    assert bits_to_byte_lsb_first([]) == 0


def test_accepts_generators():
    assert bits_to_byte_lsb_first(b for b in [1, 1, 1, 1, 1, 1, 1, 1]) == 255


def test_too_many_bits_raises():
    with pytest.raises(ValueError):
        bits_to_byte_lsb_first([0] * 9)