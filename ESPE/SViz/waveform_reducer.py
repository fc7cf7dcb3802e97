# =============================================================================
# waveform_reducer.py — Min/Max Waveform Envelope
# =============================================================================
#
# Decimates a sample sequence into one (min, max) pair per display column so
# a renderer can draw a filled waveform with one vertical stroke per pixel.
#
#   step   = ceil(L / width)
#   column i scans samples[i*step : i*step + step]
#
# Every column starts at (1.0, -1.0).  A sample replaces min only if it is
# smaller and max only if it is larger, so:
#   - a window past the end of the data keeps (1.0, -1.0), an inverted pair
#   - NaN samples never update a column
#   - a window whose samples are all above 1.0 keeps min = 1.0
#
# When L is not a multiple of step, the trailing columns read past the end
# and come back as the empty pair instead of raising IndexError.

from __future__ import annotations
import math
from typing import Iterator, Sequence

import numpy as np

from ESPE.SMM.constants import ENVELOPE_EMPTY_MIN, ENVELOPE_EMPTY_MAX


class Envelope:
    """
    Lazy, restartable sequence of (min, max) column pairs.

    Nothing is computed until iterated or indexed; each iteration starts
    again from column 0.
    """

    def __init__(self, samples: Sequence[float], width: int) -> None:
        self._samples = np.asarray(samples, dtype=np.float64).reshape(-1)
        self.width    = width
        self.step     = math.ceil(len(self._samples) / width)

    def __len__(self) -> int:
        return self.width

    def column(self, i: int) -> tuple[float, float]:
        """Return the (min, max) pair for column i."""
        if i < 0:
            i += self.width
        if not 0 <= i < self.width:
            raise IndexError(f"column {i} out of range for width {self.width}")
        start  = i * self.step
        window = self._samples[start:start + self.step]
        lo, hi = ENVELOPE_EMPTY_MIN, ENVELOPE_EMPTY_MAX
        if len(window):
            # fmin/fmax skip NaN; an all-NaN window yields NaN, which the
            # comparisons below reject
            w_lo = float(np.fmin.reduce(window))
            w_hi = float(np.fmax.reduce(window))
            if w_lo < lo:
                lo = w_lo
            if w_hi > hi:
                hi = w_hi
        return lo, hi

    def __getitem__(self, i: int) -> tuple[float, float]:
        return self.column(i)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for i in range(self.width):
            yield self.column(i)

    def tolist(self) -> list[tuple[float, float]]:
        return list(self)

    def __repr__(self) -> str:
        return f"Envelope(width={self.width}, step={self.step}, n_samples={len(self._samples)})"


def reduce(samples: Sequence[float], display_width: int) -> Envelope:
    """
    Build the min/max envelope for a display `display_width` columns wide.

    Raises:
        ValueError: display_width is not a positive integer.
    """
    if isinstance(display_width, bool) or not isinstance(display_width, (int, np.integer)):
        raise ValueError(f"display_width must be an integer, got {display_width!r}")
    if display_width <= 0:
        raise ValueError(f"display_width must be > 0, got {display_width}")
    return Envelope(samples, int(display_width))


def column_extents(envelope: Envelope, height: float) -> list[tuple[float, float]]:
    """
    Map each (min, max) pair to a vertical pixel segment.

    The centre line sits at height/2; a column spans from (1 + min) * height/2
    to (1 + max) * height/2, the segment a canvas stroke is drawn between.
    """
    amp = height / 2
    return [((1 + lo) * amp, (1 + hi) * amp) for lo, hi in envelope]
