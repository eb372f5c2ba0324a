import pytest

from mmdvmcore.fm_keyer import FMKeyer


def _keyer(text="E", speed=4000, frequency=4000, high=100, low=10):
    keyer = FMKeyer()
    keyer.set_params(text, speed, frequency, high, low)
    return keyer


def _run(keyer, high=True, limit=100000):
    out = []
    get = keyer.get_high_audio if high else keyer.get_low_audio
    while keyer.is_wanted() and len(out) < limit:
        out.append(get())
    return out


def test_not_wanted_gives_silence():
    keyer = _keyer()
    assert keyer.get_high_audio() == 0
    assert keyer.get_low_audio() == 0
    assert not keyer.is_wanted()


def test_letter_e_waveform():
    keyer = _keyer("E", speed=4000, frequency=4000, high=100)
    keyer.start()
    out = _run(keyer)
    # One dot period of tone then three dot periods of gap, 6 samples each.
    assert len(out) == 24
    assert out[:6] == [100, 100, 100, -100, -100, -100]
    assert out[6:] == [0] * 18
    assert not keyer.is_wanted()
    assert not keyer.is_running()


def test_low_audio_uses_low_level():
    keyer = _keyer("E", high=100, low=10)
    keyer.start()
    out = _run(keyer, high=False)
    assert max(out) == 10
    assert min(out) == -10


def test_running_only_after_first_sample():
    keyer = _keyer("T")
    keyer.start()
    assert keyer.is_wanted()
    assert not keyer.is_running()
    keyer.get_high_audio()
    assert keyer.is_running()


def test_start_while_running_does_not_restart():
    keyer = _keyer("E")
    keyer.start()
    first = [keyer.get_high_audio() for _ in range(3)]
    keyer.start()
    rest = _run(keyer)
    assert len(first) + len(rest) == 24


def test_stop_resets():
    keyer = _keyer("E")
    keyer.start()
    keyer.get_high_audio()
    keyer.stop()
    assert not keyer.is_running()
    assert not keyer.is_wanted()
    assert keyer.get_high_audio() == 0


def test_unknown_characters_are_skipped():
    a = _keyer("E")
    b = _keyer("e!E")
    a.start()
    b.start()
    assert _run(a) == _run(b)


def test_length_scales_with_symbol_length():
    keyer = _keyer("T", speed=4000)
    keyer.start()
    # T has 6 dot periods of 6 samples each.
    assert len(_run(keyer)) == 36


def test_text_at_limit_is_accepted():
    keyer = _keyer("E" * 248, speed=24000, frequency=4000)
    keyer.start()
    assert len(_run(keyer)) == 248 * 4


def test_text_too_long_raises():
    keyer = FMKeyer()
    with pytest.raises(ValueError):
        keyer.set_params("E" * 249, 20, 1000, 100, 10)


def test_bad_speed_and_frequency_raise():
    keyer = FMKeyer()
    with pytest.raises(ValueError):
        keyer.set_params("E", 0, 1000, 100, 10)
    with pytest.raises(ValueError):
        keyer.set_params("E", 20, 0, 100, 10)
    with pytest.raises(ValueError):
        keyer.set_params("E", 20, 30000, 100, 10)