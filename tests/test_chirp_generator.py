import math
import sys
import unittest
from pathlib import Path

import numpy as np

# Allow `import ESPE.*` from repo root.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from ESPE.SGM.chirp_generator import SignalGenerator, burst_start_times, generate


class TestBurstTimes(unittest.TestCase):
    def test_three_onsets_below_limit(self) -> None:
        self.assertEqual(burst_start_times(), [0.5, 2.0, 3.5])


class TestSignalGenerator(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.buf = SignalGenerator().generate()

    def test_default_length_and_rate(self) -> None:
        self.assertEqual(len(self.buf), 220_500)
        self.assertEqual(self.buf.sample_rate, 44_100)

    def test_peak_is_point_eight(self) -> None:
        self.assertAlmostEqual(self.buf.peak, 0.8, places=6)

    def test_starts_at_zero_phase(self) -> None:
        self.assertEqual(float(self.buf.samples[0]), 0.0)

    def test_deterministic(self) -> None:
        self.assertEqual(generate(), self.buf)

    def test_bursts_add_energy(self) -> None:
        fs = self.buf.sample_rate
        x = self.buf.samples.astype(np.float64)
        chirp_only = x[int(1.0 * fs):int(1.3 * fs)]
        with_burst = x[int(2.0 * fs):int(2.3 * fs)]
        self.assertGreater(np.sqrt(np.mean(with_burst ** 2)), np.sqrt(np.mean(chirp_only ** 2)))

    def test_custom_rate_and_duration(self) -> None:
        buf = SignalGenerator(sample_rate=8000, duration=1.0).generate()
        self.assertEqual(len(buf), 8000)
        self.assertAlmostEqual(buf.peak, 0.8, places=6)

    def test_zero_duration_is_empty(self) -> None:
        buf = SignalGenerator(duration=0.0).generate()
        self.assertEqual(len(buf), 0)
        self.assertEqual(buf.peak, 0.0)

    def test_rejects_bad_arguments(self) -> None:
        with self.assertRaises(ValueError):
            SignalGenerator(sample_rate=0)
        with self.assertRaises(ValueError):
            SignalGenerator(duration=-1.0)


def _reference_signal(fs: int, duration: float) -> np.ndarray:
    """Sample-by-sample rendering of the chirp, bursts and peak scaling."""
    n = int(duration * fs)
    sig = np.zeros(n, dtype=np.float32)
    beta = (2000.0 - 200.0) / duration
    for i in range(n):
        t = i / fs
        sig[i] = 0.3 * math.sin(2 * math.pi * (200.0 * t + 0.5 * beta * t * t))

    bt = 0.5
    while bt < 4.5:
        bs = math.floor(bt * fs)
        be = min(bs + math.floor(0.3 * fs), n)
        bf = 400.0 + 200.0 * (bt / 5.0)
        for i in range(bs, be):
            tau = (i - bs) / fs
            env = math.sin(math.pi * tau / 0.3)
            sig[i] = float(sig[i]) + 0.4 * env * math.sin(2 * math.pi * bf * tau)
        bt += 1.5

    peak = max(abs(float(s)) for s in sig)
    for i in range(n):
        sig[i] = float(sig[i]) / peak * 0.8
    return sig


class TestWaveformFormula(unittest.TestCase):
    def test_matches_reference_rendering(self) -> None:
        fs = 8000
        got = SignalGenerator(sample_rate=fs, duration=5.0).generate().samples
        want = _reference_signal(fs, 5.0)
        self.assertEqual(len(got), len(want))
        np.testing.assert_allclose(got, want, rtol=0, atol=1e-6)

    def test_short_buffer_truncates_last_burst(self) -> None:
        fs = 8000
        got = SignalGenerator(sample_rate=fs, duration=3.6).generate().samples
        want = _reference_signal(fs, 3.6)
        np.testing.assert_allclose(got, want, rtol=0, atol=1e-6)


if __name__ == "__main__":
    unittest.main()
