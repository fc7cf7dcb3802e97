# =============================================================================
# normalizer.py — Safe Peak Normalizer
# =============================================================================
#
# Echo feedback piles energy up; this stage pulls a clipping buffer back
# under full scale.  It only ever attenuates:
#
#   peak = max |s|
#   peak >  threshold → s = (s / peak) * target_peak
#   peak <= threshold → unchanged (quiet material is never boosted)
#
# With the defaults (target 0.95 < threshold 1.0) a second pass is always a
# no-op.

from __future__ import annotations
import logging

import numpy as np

from ESPE.SMM.constants import NORMALIZE_TARGET_PEAK, NORMALIZE_THRESHOLD
from ESPE.SMM.sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)


def normalize(
    buffer: SampleBuffer,
    target_peak: float = NORMALIZE_TARGET_PEAK,
    threshold: float = NORMALIZE_THRESHOLD,
) -> SampleBuffer:
    peak = buffer.peak
    if peak > threshold:
        logger.warning(
            "output peak %.4f exceeds %.2f, attenuating to %.2f", peak, threshold, target_peak
        )
        scaled = (buffer.samples.astype(np.float64) / peak) * target_peak
        return SampleBuffer.adopt(scaled.astype(np.float32), buffer.sample_rate)
    return SampleBuffer.adopt(buffer.samples.copy(), buffer.sample_rate)
