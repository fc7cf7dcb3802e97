import sys
import unittest
from pathlib import Path

import numpy as np

# Allow `import ESPE.*` from repo root.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from ESPE.SMM.sample_buffer import SampleBuffer
from ESPE.SPM.normalizer import normalize


class TestNormalize(unittest.TestCase):
    def test_quiet_buffer_unchanged(self) -> None:
        buf = SampleBuffer([0.2, -0.3, 0.1], sample_rate=8000)
        self.assertEqual(normalize(buf), buf)

    def test_peak_exactly_one_unchanged(self) -> None:
        buf = SampleBuffer([1.0, -0.5], sample_rate=8000)
        self.assertEqual(normalize(buf), buf)

    def test_loud_buffer_scaled_to_target(self) -> None:
        buf = SampleBuffer([0.2, -1.5, 1.2], sample_rate=8000)
        out = normalize(buf)
        np.testing.assert_allclose(
            out.samples, [0.2 / 1.5 * 0.95, -0.95, 1.2 / 1.5 * 0.95], rtol=1e-6,
        )
        self.assertAlmostEqual(out.peak, 0.95, places=6)

    def test_idempotent(self) -> None:
        once = normalize(SampleBuffer([3.0, -2.0], sample_rate=8000))
        self.assertEqual(normalize(once), once)

    def test_never_boosts(self) -> None:
        buf = SampleBuffer([0.01, -0.02], sample_rate=8000)
        self.assertAlmostEqual(normalize(buf).peak, buf.peak)

    def test_empty_and_silent(self) -> None:
        self.assertEqual(len(normalize(SampleBuffer([], sample_rate=8000))), 0)
        silent = SampleBuffer(np.zeros(10), sample_rate=8000)
        self.assertEqual(normalize(silent), silent)

    def test_custom_target(self) -> None:
        out = normalize(SampleBuffer([2.0], sample_rate=8000), target_peak=0.5)
        self.assertAlmostEqual(float(out.samples[0]), 0.5)

    def test_returns_new_buffer(self) -> None:
        buf = SampleBuffer([0.5], sample_rate=8000)
        self.assertIsNot(normalize(buf), buf)


if __name__ == "__main__":
    unittest.main()
