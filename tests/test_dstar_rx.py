import pytest

from mmdvmcore.dstar_decode import compute_crc
from mmdvmcore.dstar_defines import DSTAR_DATA_SYNC_BYTES, DSTAR_EOT_BYTES
from mmdvmcore.dstar_encode import encode_header
from mmdvmcore.dstar_rx import DStarReceiver, DStarRXState
from mmdvmcore.host import RecordingHostPort, RecordingModemIO

PREAMBLE = bytes([0xAA]) * 50
FRAME_SYNC = bytes([0xEA, 0xA6])
SYNC_FRAME = bytes(9) + DSTAR_DATA_SYNC_BYTES[9:12]
ZERO_FRAME = bytes(12)
EOT = DSTAR_EOT_BYTES[:6]


def _make_header() -> bytes:
    body = bytes(3) + b"DIRECT  " + b"DIRECT  " + b"CQCQCQ  " + b"N0CALL  " + b"TEST"
    return body + compute_crc(body).to_bytes(2, "little")


def _air_samples(data: bytes) -> list[int]:
    samples = []
    for byte in data:
        for j in range(8):
            samples.extend([-1000 if (byte >> j) & 1 else 1000] * 5)
    return samples


def _run(data: bytes, send_rssi=False, rssi_level=0):
    io = RecordingModemIO()
    host = RecordingHostPort()
    rx = DStarReceiver(io, host, send_rssi)
    samples = _air_samples(data)
    rx.samples(samples, [rssi_level] * len(samples))
    return rx, io, host


def _transmission(header: bytes) -> bytes:
    return PREAMBLE + FRAME_SYNC + encode_header(header) + ZERO_FRAME + SYNC_FRAME + EOT + bytes(4)


def test_full_transmission_events():
    header = _make_header()
    rx, io, host = _run(_transmission(header))
    assert host.events == [
        ("header", header),
        ("data", ZERO_FRAME),
        ("data", SYNC_FRAME),
        ("eot",),
    ]
    assert rx.state is DStarRXState.NONE
    assert io.decode is False
    assert io.adc_detection is False


def test_decode_flag_set_while_receiving():
    header = _make_header()
    data = PREAMBLE + FRAME_SYNC + encode_header(header) + ZERO_FRAME
    rx, io, host = _run(data)
    assert rx.state is DStarRXState.DATA
    assert io.decode is True
    assert host.headers == [header]


def test_rssi_appended_when_enabled():
    header = _make_header()
    _, _, host = _run(_transmission(header), send_rssi=True, rssi_level=0x1234)
    assert host.headers[0] == header + bytes([0x12, 0x34])
    assert host.data[0] == ZERO_FRAME
    assert host.data[1] == SYNC_FRAME + bytes([0x12, 0x34])


def test_corrupt_header_returns_to_idle():
    section = bytearray(encode_header(_make_header()))
    for i in range(10, 30):
        section[i] ^= 0xFF
    rx, io, host = _run(PREAMBLE + FRAME_SYNC + bytes(section) + bytes(2))
    assert host.headers == []
    assert rx.state is DStarRXState.NONE
    assert io.decode is False


def test_data_sync_without_header():
    rx, io, host = _run(PREAMBLE + bytes(1) + SYNC_FRAME[9:] + bytes(2))
    assert host.events[0] == ("data", DSTAR_DATA_SYNC_BYTES)
    assert rx.state is DStarRXState.DATA
    assert io.decode is True


def test_lock_lost_without_syncs():
    header = _make_header()
    data = PREAMBLE + FRAME_SYNC + encode_header(header) + bytes(1210)
    rx, io, host = _run(data)
    assert host.events[-1] == ("lost",)
    assert all(frame == ZERO_FRAME for frame in host.data)
    assert rx.state is DStarRXState.NONE
    assert io.decode is False


def test_reset_returns_to_idle_and_receiver_still_works():
    header = _make_header()
    io = RecordingModemIO()
    host = RecordingHostPort()
    rx = DStarReceiver(io, host)
    partial = _air_samples(PREAMBLE + FRAME_SYNC + bytes(5))
    rx.samples(partial, [0] * len(partial))
    assert rx.state is DStarRXState.HEADER
    rx.reset()
    assert rx.state is DStarRXState.NONE
    full = _air_samples(_transmission(header))
    rx.samples(full, [0] * len(full))
    assert host.headers == [header]


def test_mismatched_lengths_raise():
    rx = DStarReceiver(RecordingModemIO(), RecordingHostPort())
    with pytest.raises(ValueError):
        rx.samples([0, 0, 0], [0, 0])


def test_preamble_alone_produces_nothing():
    rx, io, host = _run(PREAMBLE)
    assert host.events == []
    assert rx.state is DStarRXState.NONE