import pytest

from mmdvmcore.dstar_decode import compute_crc, decode_header
from mmdvmcore.dstar_defines import DSTAR_FEC_SECTION_LENGTH_BYTES
from mmdvmcore.dstar_encode import encode_header


def _make_header(my: bytes = b"N0CALL  ") -> bytes:
    body = bytes(3) + b"DIRECT  " + b"DIRECT  " + b"CQCQCQ  " + my + b"TEST"
    return body + compute_crc(body).to_bytes(2, "little")


def _to_receiver_alignment(section: bytes) -> bytes:
    value = int.from_bytes(section, "little") >> 4
    return value.to_bytes(DSTAR_FEC_SECTION_LENGTH_BYTES, "little")


def test_length_of_section():
    assert len(encode_header(_make_header())) == DSTAR_FEC_SECTION_LENGTH_BYTES


@pytest.mark.parametrize("size", [0, 40, 42])
def test_wrong_header_length_raises(size):
    with pytest.raises(ValueError):
        encode_header(bytes(size))


def test_first_nibble_is_left_for_frame_sync():
    assert encode_header(_make_header())[0] & 0x0F == 0


@pytest.mark.parametrize("my", [b"N0CALL  ", b"AB1CDE  ", b"        "])
def test_round_trip_through_decoder(my):
    header = _make_header(my)
    section = _to_receiver_alignment(encode_header(header))
    assert decode_header(section) == header


def test_single_bit_error_is_corrected():
    header = _make_header()
    section = bytearray(_to_receiver_alignment(encode_header(header)))
    section[20] ^= 0x08
    assert decode_header(bytes(section)) == header


def test_different_headers_encode_differently():
    assert encode_header(_make_header(b"AB1CDE  ")) != encode_header(_make_header())


def test_accepts_list_of_ints():
    header = _make_header()
    assert encode_header(list(header)) == encode_header(header)