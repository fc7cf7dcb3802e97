# =============================================================================
# audio_loader.py — Decoder front end
# =============================================================================
#
# The engine never parses audio formats itself.  soundfile (libsndfile) does
# the decoding; this module turns its (frames, channels) float output into a
# mono SampleBuffer and converts every decoder failure into LoadFailedError,
# the single "load failed" condition adapters report upstream.
#
# Multi-channel input is folded to mono by averaging the channels.

from __future__ import annotations
import io
import logging
import os

import numpy as np
import soundfile as sf

from ESPE.SMM.errors import LoadFailedError
from ESPE.SMM.sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)


def _to_mono(data: np.ndarray, sample_rate: int, source: str) -> SampleBuffer:
    if data.ndim != 2 or data.shape[0] == 0:
        raise LoadFailedError(f"{source}: no audio frames decoded")
    if sample_rate <= 0:
        raise LoadFailedError(f"{source}: invalid sample rate {sample_rate}")

    n_ch = data.shape[1]
    if n_ch > 1:
        logger.info("%s: %d channels downmixed to mono", source, n_ch)
        mono = data.astype(np.float64).mean(axis=1).astype(np.float32)
    else:
        mono = np.ascontiguousarray(data[:, 0], dtype=np.float32)

    buf = SampleBuffer.adopt(mono, sample_rate)
    logger.info("loaded %s: %d samples @ %d Hz (%.1f s)", source, len(buf), sample_rate, buf.duration)
    return buf


def load_audio_file(path: str) -> SampleBuffer:
    """
    Decode an audio file from disk.

    Raises:
        LoadFailedError: missing file, unsupported format or empty audio.
    """
    name = os.path.basename(path)
    try:
        data, sr = sf.read(path, dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, OSError) as exc:
        raise LoadFailedError(f"{name}: {exc}") from exc
    return _to_mono(data, sr, name)


def decode_audio_bytes(data: bytes, source: str = "upload") -> SampleBuffer:
    """Decode an in-memory encoded file (e.g. an HTTP upload)."""
    if not data:
        raise LoadFailedError(f"{source}: empty file")
    try:
        samples, sr = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, OSError) as exc:
        raise LoadFailedError(f"{source}: {exc}") from exc
    return _to_mono(samples, sr, source)
