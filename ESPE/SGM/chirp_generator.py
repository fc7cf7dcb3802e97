# =============================================================================
# chirp_generator.py — Deterministic Test Signal
# =============================================================================
#
# Builds the synthetic source used when no audio file has been loaded:
#
#   1. Linear chirp, 200 Hz → 2000 Hz across the whole buffer:
#        phi(t) = 2π (f0·t + ½·beta·t²),  beta = (f1 - f0) / duration
#        x[i]   = 0.3 · sin(phi(i / fs))
#
#   2. Three tone bursts starting at 0.5 s, 2.0 s and 3.5 s, each 0.3 s long
#      with a half-sine envelope, added on top of the chirp:
#        tau = (i - bs) / fs
#        x[i] += 0.4 · sin(π·tau/0.3) · sin(2π·bf·tau),  bf = 400 + 200·(bt/5)
#
#   3. Peak normalization to exactly 0.8 (silence is left alone).
#
# STORAGE PRECISION:
#   Each step is computed in float64 and stored back as float32, once per
#   step, exactly as the browser page writes into a Float32Array.  Do not fuse the
#   steps into one float64 expression; the last bits of the output change.

from __future__ import annotations
import logging
import math

import numpy as np

from ESPE.SMM.constants import (
    SAMPLE_RATE, TEST_DURATION_S,
    CHIRP_F0_HZ, CHIRP_F1_HZ, CHIRP_AMPLITUDE,
    BURST_FIRST_S, BURST_STEP_S, BURST_LIMIT_S, BURST_LENGTH_S,
    BURST_AMPLITUDE, BURST_BASE_HZ, BURST_SWEEP_HZ, BURST_SWEEP_SPAN_S,
    TEST_PEAK,
)
from ESPE.SMM.sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)


def burst_start_times() -> list[float]:
    """Burst onsets in seconds: start at 0.5, step 1.5, strictly below 4.5."""
    times = []
    bt = BURST_FIRST_S
    while bt < BURST_LIMIT_S:
        times.append(bt)
        bt += BURST_STEP_S
    return times


class SignalGenerator:
    """
    Synthetic test-signal source.

    Usage:
        gen = SignalGenerator()
        buf = gen.generate()            # 5.0 s @ 44100 Hz, peak 0.8
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        duration: float = TEST_DURATION_S,
    ) -> None:
        if isinstance(sample_rate, bool) or int(sample_rate) != sample_rate or sample_rate <= 0:
            raise ValueError(f"sample_rate must be a positive integer, got {sample_rate!r}")
        if duration < 0 or not math.isfinite(duration):
            raise ValueError(f"duration must be a finite value >= 0, got {duration!r}")
        self.sample_rate = int(sample_rate)
        self.duration    = duration

    # ── Stages ──────────────────────────────────────────────────────────────

    def _chirp(self, length: int) -> np.ndarray:
        fs   = self.sample_rate
        t    = np.arange(length, dtype=np.float64) / fs
        # duration 0 never reaches here with length > 0
        beta = (CHIRP_F1_HZ - CHIRP_F0_HZ) / self.duration if self.duration else 0.0
        phase = 2 * math.pi * (CHIRP_F0_HZ * t + 0.5 * beta * t * t)
        return (CHIRP_AMPLITUDE * np.sin(phase)).astype(np.float32)

    def _add_bursts(self, sig: np.ndarray) -> None:
        fs     = self.sample_rate
        length = len(sig)
        for bt in burst_start_times():
            bs = math.floor(bt * fs)
            be = min(bs + math.floor(BURST_LENGTH_S * fs), length)
            if bs >= be:
                continue
            bf  = BURST_BASE_HZ + BURST_SWEEP_HZ * (bt / BURST_SWEEP_SPAN_S)
            tau = np.arange(be - bs, dtype=np.float64) / fs
            env = np.sin(math.pi * tau / BURST_LENGTH_S)
            burst = BURST_AMPLITUDE * env * np.sin(2 * math.pi * bf * tau)
            sig[bs:be] = (sig[bs:be].astype(np.float64) + burst).astype(np.float32)

    @staticmethod
    def _normalize_peak(sig: np.ndarray) -> np.ndarray:
        if len(sig) == 0:
            return sig
        peak = float(np.fmax.reduce(np.abs(sig)))
        if peak > 0:
            return ((sig.astype(np.float64) / peak) * TEST_PEAK).astype(np.float32)
        return sig

    # ── Public API ──────────────────────────────────────────────────────────

    def generate(self) -> SampleBuffer:
        """Render the chirp + bursts test buffer."""
        length = int(self.duration * self.sample_rate)
        sig = self._chirp(length)
        self._add_bursts(sig)
        sig = self._normalize_peak(sig)
        logger.debug(
            "generated test signal: %d samples @ %d Hz, %d bursts",
            length, self.sample_rate, len(burst_start_times()),
        )
        return SampleBuffer.adopt(sig, self.sample_rate)


def generate(sample_rate: int = SAMPLE_RATE, duration: float = TEST_DURATION_S) -> SampleBuffer:
    """Module-level shortcut for SignalGenerator(sample_rate, duration).generate()."""
    return SignalGenerator(sample_rate, duration).generate()
