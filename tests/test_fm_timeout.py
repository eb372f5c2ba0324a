from mmdvmcore.fm_timeout import BUSY_AUDIO, FMTimeout


def run(tone, n):
    return [tone.get_audio() for _ in range(n)]


def test_stopped_tone_is_silent():
    tone = FMTimeout()
    assert run(tone, 30000) == [0] * 30000


def test_first_half_second_is_silent_then_tone():
    tone = FMTimeout()
    tone.start()
    out = run(tone, 24000)
    assert out[:12000] == [0] * 12000
    assert any(s != 0 for s in out[12000:])


def test_tone_has_60_sample_period_and_peaks():
    tone = FMTimeout()
    tone.start()
    out = run(tone, 24000)[12000:]
    assert out[:60] == out[60:120]
    period = out[:60]
    assert period[0] == 0
    assert period.index(max(period)) == BUSY_AUDIO.index(max(BUSY_AUDIO))
    assert period.index(min(period)) == BUSY_AUDIO.index(min(BUSY_AUDIO))
    assert all(-32768 <= s <= 32767 for s in out)


def test_cycle_repeats_after_one_second():
    tone = FMTimeout()
    tone.start()
    first = run(tone, 24000)
    second = run(tone, 24000)
    assert second[:12000] == [0] * 12000
    assert any(s != 0 for s in second[12000:])
    assert len(first) == len(second)


def test_zero_level_is_silent():
    tone = FMTimeout()
    tone.set_params(0)
    tone.start()
    assert set(run(tone, 24000)) == {0}


def test_stop_silences_immediately():
    tone = FMTimeout()
    tone.start()
    run(tone, 12010)
    tone.stop()
    assert run(tone, 100) == [0] * 100


def test_higher_level_gives_louder_tone():
    quiet, loud = FMTimeout(), FMTimeout()
    quiet.set_params(10)
    loud.set_params(200)
    quiet.start()
    loud.start()
    q = run(quiet, 12060)[12000:]
    lo = run(loud, 12060)[12000:]
    assert max(lo) > max(q) > 0