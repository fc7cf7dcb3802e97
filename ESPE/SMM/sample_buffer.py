# =============================================================================
# sample_buffer.py — SampleBuffer and EchoParameters
# =============================================================================
#
# A SampleBuffer is the only thing stages hand to each other: a sample rate
# plus a mono float32 sample array.  Buffers are read-only once built; every
# stage returns a NEW buffer instead of writing into the one it was given.
#
# SAMPLE-COUNT GUARANTEE:
#   Millisecond / second parameters are converted to sample counts with
#   js_round(), which rounds half up like the browser's Math.round, never Python's
#   banker's round(), so 0.5-sample boundaries land where the browser page puts
#   them.

from __future__ import annotations
import math
from typing import NamedTuple, Sequence

import numpy as np


def js_round(value: float) -> int:
    """Round half up (Math.round semantics): 2.5 -> 3, -2.5 -> -2."""
    return int(math.floor(value + 0.5))


class SampleBuffer:
    """
    Immutable mono sample buffer.

    Usage:
        buf = SampleBuffer([0.0, 0.5, -0.5], sample_rate=44100)
        buf.duration        # seconds
        buf.samples         # read-only numpy float32 array
    """

    __slots__ = ("_samples", "_sample_rate")

    def __init__(self, samples: Sequence[float], sample_rate: int) -> None:
        """
        Args:
            samples:     Mono sample values, nominally in [-1, 1].  Copied and
                         stored as float32.
            sample_rate: Positive integer rate in Hz.
        """
        data = np.array(samples, dtype=np.float32)
        if data.ndim != 1:
            raise ValueError(f"samples must be mono (1-D), got shape {data.shape}")
        self._init(data, sample_rate)

    def _init(self, data: np.ndarray, sample_rate: int) -> None:
        if isinstance(sample_rate, bool) or int(sample_rate) != sample_rate or sample_rate <= 0:
            raise ValueError(f"sample_rate must be a positive integer, got {sample_rate!r}")
        data.flags.writeable = False
        self._samples     = data
        self._sample_rate = int(sample_rate)

    @classmethod
    def adopt(cls, data: np.ndarray, sample_rate: int) -> "SampleBuffer":
        """
        Wrap a freshly computed float32 array without copying it.

        The caller hands over ownership: the array is frozen and must not be
        written through any other reference afterwards.
        """
        if data.dtype != np.float32 or data.ndim != 1:
            data = np.asarray(data, dtype=np.float32).reshape(-1)
        buf = cls.__new__(cls)
        buf._init(data, sample_rate)
        return buf

    # ── Accessors ───────────────────────────────────────────────────────────

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return len(self._samples) / self._sample_rate

    @property
    def peak(self) -> float:
        """Largest absolute sample value (0.0 for an empty buffer)."""
        if len(self._samples) == 0:
            return 0.0
        # NaN never wins a comparison, as in a plain max loop
        return float(np.fmax.reduce(np.abs(self._samples)))

    def __len__(self) -> int:
        return len(self._samples)

    def tolist(self) -> list[float]:
        return self._samples.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleBuffer):
            return NotImplemented
        return (
            self._sample_rate == other._sample_rate
            and np.array_equal(self._samples, other._samples)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(n={len(self._samples)}, sample_rate={self._sample_rate}, "
            f"duration={self.duration:.3f}s)"
        )


class EchoParameters(NamedTuple):
    alpha:        float   # feedback gain, any sign / magnitude
    delay_ms:     float   # echo spacing in milliseconds, >= 0
    tail_seconds: float   # silence appended so the echo trail can ring out, >= 0

    def validate(self) -> None:
        """Reject negative or non-finite timing before any work is done."""
        if not math.isfinite(self.alpha):
            raise ValueError(f"alpha must be finite, got {self.alpha!r}")
        if not math.isfinite(self.delay_ms) or self.delay_ms < 0:
            raise ValueError(f"delay_ms must be a finite value >= 0, got {self.delay_ms!r}")
        if not math.isfinite(self.tail_seconds) or self.tail_seconds < 0:
            raise ValueError(
                f"tail_seconds must be a finite value >= 0, got {self.tail_seconds!r}"
            )

    def delay_samples(self, sample_rate: int) -> int:
        return js_round(self.delay_ms / 1000 * sample_rate)

    def tail_samples(self, sample_rate: int) -> int:
        return js_round(self.tail_seconds * sample_rate)
