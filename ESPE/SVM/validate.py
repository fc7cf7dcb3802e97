#!/usr/bin/env python3
# =============================================================================
# validate.py — ESPE Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m ESPE.SVM.validate
#
# Tests:
#   1. Constants integrity   — header layout, scales, defaults
#   2. Test signal           — length, peak 0.8, burst placement, determinism
#   3. Echo filter           — known impulse response, passthrough, length
#   4. Normalizer            — attenuate-only, idempotence
#   5. Waveform envelope     — shape, sentinel columns
#   6. WAV round trip        — header fields, soundfile decode within 1 LSB
# =============================================================================

import io
import struct
import sys

import numpy as np
import soundfile as sf

from ESPE.SMM.constants import (
    SAMPLE_RATE, TEST_DURATION_S, TEST_PEAK,
    WAV_HEADER_BYTES, WAV_BLOCK_ALIGN, PCM_NEG_SCALE, PCM_POS_SCALE,
    NORMALIZE_TARGET_PEAK, NORMALIZE_THRESHOLD,
    ENVELOPE_EMPTY_MIN, ENVELOPE_EMPTY_MAX,
)
from ESPE.SGM.chirp_generator import SignalGenerator, burst_start_times
from ESPE.SGM.pcm_encoder import PcmEncoder
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer
from ESPE.SPM.echo_filter import EchoFilter
from ESPE.SPM.normalizer import normalize
from ESPE.SViz.waveform_reducer import reduce

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

failures = 0


def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


def section(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


# =============================================================================
# TEST 1 — Constants Integrity
# =============================================================================
def test_constants() -> None:
    section("TEST 1 — Constants Integrity")
    check("SAMPLE_RATE = 44100",           SAMPLE_RATE == 44_100)
    check("TEST_DURATION_S = 5.0",         TEST_DURATION_S == 5.0)
    check("WAV header is 44 bytes",        WAV_HEADER_BYTES == 44)
    check("Block align = 2 (mono int16)",  WAV_BLOCK_ALIGN == 2)
    check("Negative scale = 0x8000",       PCM_NEG_SCALE == 32768)
    check("Positive scale = 0x7FFF",       PCM_POS_SCALE == 32767)
    check("Normalize target below threshold (idempotent)",
          NORMALIZE_TARGET_PEAK < NORMALIZE_THRESHOLD)
    check("Empty envelope pair is inverted",
          ENVELOPE_EMPTY_MIN > ENVELOPE_EMPTY_MAX)
    check("Burst onsets = 0.5, 2.0, 3.5",  burst_start_times() == [0.5, 2.0, 3.5],
          f"got {burst_start_times()}")


# =============================================================================
# TEST 2 — Test Signal
# =============================================================================
def test_signal() -> None:
    section("TEST 2 — Test Signal")
    buf = SignalGenerator().generate()
    check("Length = 5 s * 44100", len(buf) == 220_500, f"got {len(buf)}")
    check("Sample rate = 44100", buf.sample_rate == 44_100)
    check("Peak = 0.8", abs(buf.peak - TEST_PEAK) < 1e-6, f"got {buf.peak:.8f}")
    check("First sample is 0 (sin 0)", buf.samples[0] == 0.0)

    again = SignalGenerator().generate()
    check("Deterministic across calls", buf == again)

    # Burst region must carry more energy than the chirp alone
    fs    = buf.sample_rate
    chirp = buf.samples[int(1.0 * fs):int(1.3 * fs)]
    burst = buf.samples[int(2.0 * fs):int(2.3 * fs)]
    rms_c = float(np.sqrt(np.mean(chirp.astype(np.float64) ** 2)))
    rms_b = float(np.sqrt(np.mean(burst.astype(np.float64) ** 2)))
    print(f"  {INFO} RMS chirp-only {rms_c:.4f} | burst {rms_b:.4f}")
    check("Burst window louder than chirp-only window", rms_b > rms_c)


# =============================================================================
# TEST 3 — Echo Filter
# =============================================================================
def test_echo() -> None:
    section("TEST 3 — Echo Filter")
    y = EchoFilter.recurrence(np.array([1, 0, 0, 0], dtype=np.float32), 0.5, 2, 2)
    check("Impulse [1,0,0,0] a=0.5 nd=2 tail=2 → [1,0,0.5,0,0.25,0]",
          y.tolist() == [1.0, 0.0, 0.5, 0.0, 0.25, 0.0], f"got {y.tolist()}")

    src = SampleBuffer([0.1, -0.2, 0.3], sample_rate=1000)
    out = EchoFilter.apply(src, EchoParameters(0.0, 1.0, 0.004))
    check("alpha=0 → input followed by zeros",
          out.tolist() == src.tolist() + [0.0] * 4, f"got {out.tolist()}")

    out = EchoFilter.apply(src, EchoParameters(0.9, 0.0, 0.002))
    check("delay 0 → passthrough", out.tolist()[:3] == src.tolist())
    check("Length = input + tail", len(out) == 5, f"got {len(out)}")

    try:
        EchoFilter.apply(src, EchoParameters(0.5, -1.0, 0.0))
        check("Negative delay rejected", False, "no exception")
    except ValueError:
        check("Negative delay rejected", True)


# =============================================================================
# TEST 4 — Normalizer
# =============================================================================
def test_normalizer() -> None:
    section("TEST 4 — Normalizer")
    quiet = SampleBuffer([0.2, -0.3, 0.1], sample_rate=8000)
    check("Peak 0.3 left unchanged", normalize(quiet) == quiet)

    loud = SampleBuffer([0.2, -1.5, 1.2], sample_rate=8000)
    got  = normalize(loud).tolist()
    want = [0.2 / 1.5 * 0.95, -0.95, 1.2 / 1.5 * 0.95]
    check("Peak 1.5 scaled by 0.95/1.5",
          all(abs(a - b) < 1e-6 for a, b in zip(got, want)), f"got {got}")
    check("Second pass is a no-op", normalize(normalize(loud)) == normalize(loud))


# =============================================================================
# TEST 5 — Waveform Envelope
# =============================================================================
def test_envelope() -> None:
    section("TEST 5 — Waveform Envelope")
    for n, w in ((0, 4), (10, 3), (1000, 7), (5, 10)):
        env = reduce(np.zeros(n), w)
        check(f"{n} samples / width {w} → {w} columns", len(env.tolist()) == w)

    env = reduce([0.5, -0.5, 0.25, 0.0, 0.1], 3)    # step 2
    check("Columns = [(-0.5,0.5), (0,0.25), (0.1,0.1)]",
          env.tolist() == [(-0.5, 0.5), (0.0, 0.25), (0.1, 0.1)], f"got {env.tolist()}")

    env = reduce([0.3] * 5, 4)                       # step 2 → last column empty
    check("Column past the data keeps (1.0, -1.0)",
          env[3] == (ENVELOPE_EMPTY_MIN, ENVELOPE_EMPTY_MAX), f"got {env[3]}")


# =============================================================================
# TEST 6 — WAV round trip
# =============================================================================
def test_wav() -> None:
    section("TEST 6 — WAV round trip")
    buf = SampleBuffer([1.0, -1.0, 0.0], sample_rate=44_100)
    wav = PcmEncoder.encode(buf)
    check("Length = 44 + 2N", len(wav) == 50, f"got {len(wav)}")
    check("RIFF/WAVE/fmt /data tags",
          wav[0:4] == b"RIFF" and wav[8:12] == b"WAVE"
          and wav[12:16] == b"fmt " and wav[36:40] == b"data")
    check("ChunkSize = len - 8", struct.unpack_from("<I", wav, 4)[0] == 42)
    check("ByteRate = 88200",    struct.unpack_from("<I", wav, 28)[0] == 88_200)
    check("Data = 32767, -32768, 0",
          struct.unpack_from("<3h", wav, 44) == (32767, -32768, 0))

    src = SignalGenerator(duration=0.25).generate()
    pcm, sr = sf.read(io.BytesIO(PcmEncoder.encode(src)), dtype="int16")
    err = float(np.max(np.abs(PcmEncoder.to_float(pcm) - src.samples.astype(np.float64))))
    print(f"  {INFO} max round-trip error {err:.2e} (1 LSB = {1/PCM_POS_SCALE:.2e})")
    check("soundfile decode: rate preserved", sr == src.sample_rate)
    check("soundfile decode: length preserved", len(pcm) == len(src))
    check("soundfile decode: within one quantization step", err <= 1 / PCM_POS_SCALE)


def run_all() -> int:
    """Run every section; returns the number of failed checks."""
    global failures
    failures = 0
    test_constants()
    test_signal()
    test_echo()
    test_normalizer()
    test_envelope()
    test_wav()

    print("\n" + "=" * 60)
    if failures == 0:
        print(f"  ALL TESTS PASSED")
    else:
        print(f"  {failures} TEST(S) FAILED")
    print("=" * 60 + "\n")
    return failures


if __name__ == "__main__":
    sys.exit(0 if run_all() == 0 else 1)
