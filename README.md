# mmdvmcore

Signal-processing building blocks of a multi-mode digital radio modem,
as plain Python objects: FM repeater pieces (timers, ring buffers, a
Morse keyer, a time-out tone, over-deviation blanking), CTCSS tone
detection and generation, D-Star header coding, a D-Star receiver and
transmitter, and a two-slot DMR transmitter. All audio is 24 kHz signed
16-bit samples held in Python integers.

The package does not talk to hardware. The transmitters and the receiver
write to a `ModemIO` object and report to a `HostPort` object, and you
provide both. `RecordingModemIO` and `RecordingHostPort` are in-memory
versions that keep everything written to them.

## Install

```
pip install mmdvmcore
```

Python 3.10 or later is needed. There are no runtime dependencies.

## Modules

| Module | What it provides |
| --- | --- |
| `mmdvmcore.host` | `ModemIO` and `HostPort` (abstract interfaces), `RecordingModemIO`, `RecordingHostPort` |
| `mmdvmcore.fm_timer` | `FMTimer`, a timer counted in samples |
| `mmdvmcore.fm_ring_buffer` | `RingBuffer`, a bounded FIFO that refuses items when full and records the overflow |
| `mmdvmcore.fm_downsampler` | `FMDownsampler`, which keeps one sample in three and packs each pair of kept samples into three bytes |
| `mmdvmcore.fm_timeout` | `FMTimeout`, half a second of silence then half a second of 400 Hz tone, repeating |
| `mmdvmcore.fm_blanking` | `FMBlanking`, which replaces over-deviating audio with a 2 kHz bleep followed by silence |
| `mmdvmcore.fm_keyer` | `FMKeyer`, a Morse keyer producing square-wave audio |
| `mmdvmcore.fm_ctcss` | `CTCSSDecoder` (Goertzel over 6000-sample blocks), `CTCSSEncoder`, `CTCSSState` |
| `mmdvmcore.dstar_defines` | D-Star frame sizes and sync patterns, `bits_to_byte_lsb_first` |
| `mmdvmcore.dstar_decode` | `compute_crc`, `header_checksum_ok`, `decode_header` (descrambling, deinterleaving, Viterbi) |
| `mmdvmcore.dstar_encode` | `encode_header` (convolutional coding, interleaving, scrambling) |
| `mmdvmcore.dstar_rx` | `DStarReceiver`, `DStarRXState` |
| `mmdvmcore.fir` | `FirInterpolator`, a polyphase upsampling FIR filter on Q15 samples |
| `mmdvmcore.dstar_tx` | `DStarTransmitter` |
| `mmdvmcore.dmr_tx` | `DMRTransmitter`, `DMRTXState`, `CalibrationMode` |

## Examples

### Timers and ring buffers

```python
from mmdvmcore.fm_timer import FMTimer
from mmdvmcore.fm_ring_buffer import RingBuffer

timer = FMTimer()
timer.set_timeout(1, 0)        # one second = 24000 samples
timer.start()
timer.clock(24000)
assert timer.has_expired()

rb = RingBuffer(4)
rb.put(100)
assert len(rb) == 1
assert rb.get() == 100
assert rb.get() is None        # empty
```

`RingBuffer.put` returns `False` when the buffer is full, and
`has_overflowed()` reports (and clears) that a put was refused.

### Morse keyer

```python
from mmdvmcore.fm_keyer import FMKeyer

keyer = FMKeyer()
keyer.set_params("TEST", 20, 1000, 80, 40)
keyer.start()
audio = []
while keyer.is_wanted():
    audio.append(keyer.get_high_audio())
```

Characters without a Morse symbol are skipped. A message that is too
long, a speed of zero or an unusable tone frequency raises `ValueError`.

### CTCSS

```python
from mmdvmcore.fm_ctcss import CTCSSDecoder, CTCSSEncoder, CTCSSState

encoder = CTCSSEncoder()
encoder.set_params(88, 128)
decoder = CTCSSDecoder()
decoder.set_params(88, 30, 20)

state = CTCSSState.NONE
for _ in range(6000):
    state = decoder.process(encoder.get_audio(False))
print(CTCSSState.READY in state, CTCSSState.VALID in state)
```

`READY` is set on the sample that completes a 6000-sample block; `VALID`
compares the block's energy against the high threshold, or against the
low threshold while the tone is already valid. An unknown tone frequency
raises `ValueError`.

### D-Star header round trip

```python
from mmdvmcore.dstar_decode import compute_crc, decode_header
from mmdvmcore.dstar_encode import encode_header

body = bytes(3) + b"DIRECT  DIRECT  CQCQCQ  N0CALL  TEST"
header = body + compute_crc(body).to_bytes(2, "little")   # 41 bytes

coded = encode_header(header)      # 83 scrambled bytes
assert decode_header(coded) == header
```

`decode_header` returns `None` when the decoded header fails its CRC.

### Receiving D-Star

```python
from mmdvmcore.host import RecordingHostPort, RecordingModemIO
from mmdvmcore.dstar_rx import DStarReceiver

io = RecordingModemIO()
host = RecordingHostPort()
rx = DStarReceiver(io, host, send_rssi=True)
rx.samples(samples, rssi)          # equal-length sequences
print(rx.state, host.headers, host.data)
```

Headers and data frames go to `HostPort.write_dstar_header` and
`write_dstar_data`; with `send_rssi=True` the average RSSI is appended
as two big-endian bytes. End of transmission and loss of sync are
reported with `write_dstar_eot` and `write_dstar_lost`.

### Transmitting D-Star

```python
from mmdvmcore.host import RecordingModemIO
from mmdvmcore.dstar_tx import DStarTransmitter

io = RecordingModemIO(space=1000, transmitting=True)
tx = DStarTransmitter(io, 1000)
tx.write_header(header)
tx.write_eot()
for _ in range(20):
    tx.process()
print(len(io.samples))
```

Each `process()` call modulates as many bytes as `ModemIO.get_space()`
allows (40 samples per byte). While the modem is not transmitting, a
queued header first produces the bit-sync preamble set by
`set_tx_delay`. Malformed frames raise `ValueError`; a full queue raises
`BufferError`.

### Transmitting DMR

```python
from mmdvmcore.host import RecordingModemIO
from mmdvmcore.dmr_tx import DMRTransmitter, IDLE_DATA

io = RecordingModemIO(space=1000)
tx = DMRTransmitter(io)
tx.set_idle_data(IDLE_DATA)
tx.set_start(True)
tx.write_data1(bytes(34))          # a leading byte then 33 bytes
for _ in range(10):
    tx.process()
print(tx.frame_count(), tx.space1())
```

The transmitter alternates CACH bursts and the two slots; queued slot
data is sent only after 20 CACH bursts since the start. `set_cal(True,
CalibrationMode.DMR)` or `CalibrationMode.LF` sends a calibration
pattern instead.

## What the package does not do

- It does not drive any radio hardware, ADC or DAC, nor speak a serial
  protocol to a host program; you connect `ModemIO` and `HostPort` to
  whatever you have.
- It provides FM repeater building blocks but no complete FM repeater
  controller that ties them into a state machine.
- `DMRTransmitter` does not build the idle frame's slot type field from
  a colour code; pass the full 33-byte idle frame to `set_idle_data`.
- There is no DMR receiver and no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```