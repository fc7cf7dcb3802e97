import sys
import unittest
from pathlib import Path

# Allow `import ESPE.*` from repo root.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer
from ESPE.SPM.pipeline import format_delay, processing_report, suggested_filename, to_fixed


class TestFormatDelay(unittest.TestCase):
    def test_integral_values_drop_the_fraction(self) -> None:
        self.assertEqual(format_delay(300.0), "300")
        self.assertEqual(format_delay(0.0), "0")

    def test_keeps_every_significant_digit(self) -> None:
        self.assertEqual(format_delay(12.5), "12.5")
        self.assertEqual(format_delay(12.3456789), "12.3456789")

    def test_large_values_stay_positional(self) -> None:
        self.assertEqual(format_delay(1234567.0), "1234567")
        self.assertEqual(format_delay(1e16), "10000000000000000")

    def test_small_values(self) -> None:
        self.assertEqual(format_delay(0.0000015), "0.0000015")
        self.assertEqual(format_delay(1e-7), "1e-7")


class TestToFixed(unittest.TestCase):
    def test_exact_ties_round_up(self) -> None:
        self.assertEqual(to_fixed(0.25, 1), "0.3")
        self.assertEqual(to_fixed(0.125, 2), "0.13")

    def test_rounds_the_binary_value(self) -> None:
        # 1.005 is stored just below 1.005
        self.assertEqual(to_fixed(1.005, 2), "1.00")

    def test_negative_ties_round_away_from_zero(self) -> None:
        self.assertEqual(to_fixed(-0.25, 1), "-0.3")

    def test_negative_zero_has_no_sign(self) -> None:
        self.assertEqual(to_fixed(-0.0, 1), "0.0")

    def test_pads_digits(self) -> None:
        self.assertEqual(to_fixed(5.0, 2), "5.00")
        self.assertEqual(to_fixed(0.5, 1), "0.5")


class TestTexts(unittest.TestCase):
    def test_filename_rounds_tie_up(self) -> None:
        self.assertEqual(
            suggested_filename(EchoParameters(0.25, 300.0, 2.0)), "echo_alpha0.3_delay300ms.wav",
        )

    def test_filename_keeps_full_delay(self) -> None:
        self.assertEqual(
            suggested_filename(EchoParameters(0.5, 12.3456789, 2.0)),
            "echo_alpha0.5_delay12.3456789ms.wav",
        )

    def test_report_lines(self) -> None:
        source = SampleBuffer([0.0] * 8000, sample_rate=8000)
        output = SampleBuffer([0.0] * 12000, sample_rate=8000)
        report = processing_report(EchoParameters(0.125, 250.0, 0.5), source, output)
        self.assertEqual(
            report.splitlines(),
            [
                "✓ Processed successfully",
                "α = 0.13, Delay = 250ms",
                "Input: 1.00s",
                "Output: 1.50s",
            ],
        )


if __name__ == "__main__":
    unittest.main()
