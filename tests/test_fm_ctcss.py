import math

import pytest

from mmdvmcore.fm_ctcss import (
    BLOCK_LENGTH,
    TX_CTCSS_TABLE,
    CTCSSDecoder,
    CTCSSEncoder,
    CTCSSState,
)


def _tone(freq, amplitude, count):
    return [round(amplitude * math.sin(2 * math.pi * freq * n / 24000)) for n in range(count)]


def _feed(decoder, samples):
    return [decoder.process(s) for s in samples]


def test_decoder_unknown_frequency_raises():
    decoder = CTCSSDecoder()
    with pytest.raises(ValueError):
        decoder.set_params(68, 100, 50)


def test_encoder_unknown_frequency_raises():
    encoder = CTCSSEncoder()
    with pytest.raises(ValueError):
        encoder.set_params(300, 100)


def test_ready_only_at_block_end():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 255, 100)
    states = _feed(decoder, [0] * BLOCK_LENGTH)
    assert states[:-1] == [CTCSSState.NONE] * (BLOCK_LENGTH - 1)
    assert states[-1] == CTCSSState.READY
    # READY is cleared on the next sample.
    assert decoder.process(0) == CTCSSState.NONE


def test_tone_detected():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 255, 100)
    states = _feed(decoder, _tone(88.5, 2000, BLOCK_LENGTH))
    assert states[-1] == CTCSSState.READY | CTCSSState.VALID


def test_hysteresis_uses_low_threshold_after_valid():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 255, 0)
    _feed(decoder, _tone(88.5, 2000, BLOCK_LENGTH))
    states = _feed(decoder, [0] * BLOCK_LENGTH)
    assert states[-1] == CTCSSState.READY | CTCSSState.VALID

    decoder.set_params(88, 255, 1)
    states = _feed(decoder, [0] * BLOCK_LENGTH)
    assert states[-1] == CTCSSState.READY


def test_reset_clears_state():
    decoder = CTCSSDecoder()
    decoder.set_params(88, 255, 100)
    _feed(decoder, _tone(88.5, 2000, BLOCK_LENGTH))
    decoder.reset()
    assert decoder.process(0) == CTCSSState.NONE


def test_encoder_silent_without_params():
    encoder = CTCSSEncoder()
    assert encoder.get_audio(False) == 0


def test_encoder_is_periodic():
    encoder = CTCSSEncoder()
    encoder.set_params(88, 100)
    length = TX_CTCSS_TABLE[88][0]
    first = [encoder.get_audio(False) for _ in range(length)]
    second = [encoder.get_audio(False) for _ in range(length)]
    assert first == second
    assert first[0] == 0


def test_encoder_amplitude_and_reverse():
    level = 100
    forward = CTCSSEncoder()
    forward.set_params(100, level)
    backward = CTCSSEncoder()
    backward.set_params(100, level)
    length = TX_CTCSS_TABLE[100][0]
    a = [forward.get_audio(False) for _ in range(length)]
    b = [backward.get_audio(True) for _ in range(length)]
    assert b == [-x for x in a]
    assert max(abs(x) for x in a) <= level * 13
    assert max(a) >= 0.99 * level * 13
    assert abs(sum(a)) < length


def test_encoder_output_decoded():
    encoder = CTCSSEncoder()
    encoder.set_params(88, 150)
    decoder = CTCSSDecoder()
    decoder.set_params(88, 255, 100)
    states = _feed(decoder, [encoder.get_audio(False) for _ in range(BLOCK_LENGTH)])
    assert states[-1] == CTCSSState.READY | CTCSSState.VALID