import pytest

from mmdvmcore.dstar_tx import MODE, DStarTransmitter
from mmdvmcore.host import RecordingModemIO

HEADER = bytes(range(41))
DATA = bytes(range(12))


def make(transmitting=True, space=10**6, buffer_size=2000):
    io = RecordingModemIO(space=space, transmitting=transmitting)
    return io, DStarTransmitter(io, buffer_size)


def test_header_wrong_length():
    _, tx = make()
    with pytest.raises(ValueError):
        tx.write_header(bytes(40))


def test_data_wrong_length():
    _, tx = make()
    with pytest.raises(ValueError):
        tx.write_data(bytes(13))


def test_space_decreases_after_write():
    _, tx = make(buffer_size=130)
    before = tx.space()
    tx.write_data(DATA)
    assert tx.space() == before - 1


def test_buffer_full_raises():
    _, tx = make(buffer_size=13)
    tx.write_data(DATA)
    with pytest.raises(BufferError):
        tx.write_data(DATA)
    with pytest.raises(BufferError):
        tx.write_eot()


def test_header_preamble_when_not_transmitting():
    io, tx = make(transmitting=False)
    tx.write_header(HEADER)
    tx.process()
    assert len(io.writes) == tx.tx_delay
    assert tx.space() == (2000 - 42) // 13


def test_tx_delay_settings():
    _, tx = make()
    tx.set_tx_delay(0)
    assert tx.tx_delay == 300
    tx.set_tx_delay(100)
    assert tx.tx_delay == 600


def test_header_sent_when_transmitting():
    io, tx = make()
    tx.write_header(HEADER)
    tx.process()
    assert len(io.writes) == 85
    assert all(w.mode == MODE and len(w.samples) == 40 for w in io.writes)
    assert tx.space() == 2000 // 13


def test_data_and_eot_byte_counts():
    io, tx = make()
    tx.write_data(DATA)
    tx.process()
    assert len(io.writes) == 12
    tx.write_eot()
    tx.process()
    assert len(io.writes) == 12 + 18


def test_limited_space_sends_in_chunks():
    io, tx = make(space=81)
    tx.write_data(DATA)
    tx.process()
    assert len(io.writes) == 2
    for _ in range(10):
        tx.process()
    assert len(io.writes) == 12


def test_nothing_queued_writes_nothing():
    io, tx = make()
    tx.process()
    assert io.writes == []