import sys
import threading
import unittest
from pathlib import Path

import numpy as np

# Allow `import ESPE.*` from repo root.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from ESPE.SMM.errors import EchoCancelled
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer
from ESPE.SPM.echo_filter import EchoFilter, apply


class TestRecurrence(unittest.TestCase):
    def test_impulse_response(self) -> None:
        y = EchoFilter.recurrence(np.array([1, 0, 0, 0], dtype=np.float32), 0.5, 2, 2)
        self.assertEqual(y.tolist(), [1.0, 0.0, 0.5, 0.0, 0.25, 0.0])
        self.assertEqual(y.dtype, np.float32)

    def test_feedback_above_one_grows(self) -> None:
        y = EchoFilter.recurrence(np.array([1.0, 0.0]), 2.0, 1, 3)
        self.assertEqual(y.tolist(), [1.0, 2.0, 4.0, 8.0, 16.0])

    def test_negative_alpha_alternates(self) -> None:
        y = EchoFilter.recurrence(np.array([1.0]), -0.5, 1, 3)
        self.assertEqual(y.tolist(), [1.0, -0.5, 0.25, -0.125])

    def test_zero_delay_is_passthrough(self) -> None:
        y = EchoFilter.recurrence(np.array([0.1, 0.2]), 0.9, 0, 2)
        np.testing.assert_allclose(y, [0.1, 0.2, 0.0, 0.0], rtol=1e-6)

    def test_delay_longer_than_output_copies_input(self) -> None:
        y = EchoFilter.recurrence(np.array([0.5, -0.5]), 0.9, 10, 1)
        self.assertEqual(y.tolist(), [0.5, -0.5, 0.0])

    def test_empty_input_gives_silent_tail(self) -> None:
        y = EchoFilter.recurrence(np.array([], dtype=np.float32), 0.5, 2, 3)
        self.assertEqual(y.tolist(), [0.0, 0.0, 0.0])

    def test_rejects_negative_counts(self) -> None:
        with self.assertRaises(ValueError):
            EchoFilter.recurrence(np.zeros(4), 0.5, -1, 0)
        with self.assertRaises(ValueError):
            EchoFilter.recurrence(np.zeros(4), 0.5, 1, -1)

    def test_set_flag_cancels(self) -> None:
        cancel = threading.Event()
        cancel.set()
        with self.assertRaises(EchoCancelled) as ctx:
            EchoFilter.recurrence(np.zeros(100), 0.5, 2, 0, cancel=cancel, check_interval=1)
        self.assertEqual(ctx.exception.samples_total, 100)
        self.assertLess(ctx.exception.samples_done, 100)

    def test_unset_flag_runs_to_completion(self) -> None:
        cancel = threading.Event()
        y = EchoFilter.recurrence(np.ones(50), 0.5, 3, 5, cancel=cancel, check_interval=1)
        self.assertEqual(len(y), 55)


class TestApply(unittest.TestCase):
    def test_buffer_scenario(self) -> None:
        src = SampleBuffer([1, 0, 0, 0], sample_rate=1000)
        out = apply(src, EchoParameters(0.5, 2.0, 0.002))
        self.assertEqual(out.tolist(), [1.0, 0.0, 0.5, 0.0, 0.25, 0.0])
        self.assertEqual(out.sample_rate, 1000)

    def test_zero_alpha_appends_silence(self) -> None:
        src = SampleBuffer([0.1, -0.2, 0.3], sample_rate=1000)
        out = EchoFilter.apply(src, EchoParameters(0.0, 1.0, 0.004))
        self.assertEqual(out.tolist(), src.tolist() + [0.0] * 4)

    def test_output_length(self) -> None:
        src = SampleBuffer(np.zeros(44_100), sample_rate=44_100)
        out = EchoFilter.apply(src, EchoParameters(0.5, 300.0, 2.0))
        self.assertEqual(len(out), 44_100 + 88_200)

    def test_input_untouched(self) -> None:
        src = SampleBuffer([1.0, 0.5], sample_rate=1000)
        EchoFilter.apply(src, EchoParameters(0.9, 1.0, 0.01))
        self.assertEqual(src.tolist(), [1.0, 0.5])

    def test_negative_delay_rejected(self) -> None:
        src = SampleBuffer([1.0], sample_rate=1000)
        with self.assertRaises(ValueError):
            EchoFilter.apply(src, EchoParameters(0.5, -1.0, 0.0))


if __name__ == "__main__":
    unittest.main()
