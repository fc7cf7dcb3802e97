# =============================================================================
# pcm_encoder.py — Mono 16-bit PCM WAV Encoder
# =============================================================================
#
# Serialises a SampleBuffer into a canonical single-channel RIFF/WAVE file.
#
# CONTAINER LAYOUT (all integers little-endian, header is always 44 bytes):
#
#   off  size  field           value
#    0    4    ChunkID         "RIFF"
#    4    4    ChunkSize       total_len - 8
#    8    4    Format          "WAVE"
#   12    4    Subchunk1ID     "fmt "
#   16    4    Subchunk1Size   16
#   20    2    AudioFormat     1  (PCM)
#   22    2    NumChannels     1
#   24    4    SampleRate      buffer.sample_rate
#   28    4    ByteRate        sample_rate * 2
#   32    2    BlockAlign      2
#   34    2    BitsPerSample   16
#   36    4    Subchunk2ID     "data"
#   40    4    Subchunk2Size   n_samples * 2
#   44   2N    Data            int16 samples
#
# SAMPLE CONVERSION:
#   s = clamp(x, -1, 1)
#   s < 0  → s * 0x8000   (reaches -32768)
#   s >= 0 → s * 0x7FFF   (reaches  32767)
#   The product is truncated toward zero, matching the browser page's
#   DataView.setInt16 store.  There is no rounding step.

from __future__ import annotations
import struct

import numpy as np

from ESPE.SMM.constants import (
    WAV_HEADER_BYTES, WAV_FMT_CHUNK_LEN, WAV_FORMAT_PCM,
    WAV_CHANNELS, WAV_BITS, WAV_BLOCK_ALIGN,
    PCM_NEG_SCALE, PCM_POS_SCALE,
)
from ESPE.SMM.sample_buffer import SampleBuffer

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


class PcmEncoder:
    """
    Stateless WAV encoder.

    Usage:
        wav_bytes = PcmEncoder.encode(buffer)
        pcm       = PcmEncoder.to_int16(buffer.samples)
    """

    @staticmethod
    def to_int16(samples: np.ndarray) -> np.ndarray:
        """
        Convert float samples to int16 with the asymmetric scale.

        Args:
            samples: 1-D float array.

        Returns:
            numpy int16 array of the same length.
        """
        s = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
        # NaN survives clip; setInt16 stores it as 0
        s = np.nan_to_num(s, nan=0.0)
        scaled = np.where(s < 0, s * PCM_NEG_SCALE, s * PCM_POS_SCALE)
        return np.trunc(scaled).astype(np.int16)

    @staticmethod
    def to_float(pcm: np.ndarray) -> np.ndarray:
        """
        Inverse of to_int16(): negatives / 0x8000, non-negatives / 0x7FFF.

        Decoders that divide everything by 32768 are up to two steps off on
        the positive side; this one stays within one.
        """
        p = np.asarray(pcm, dtype=np.float64)
        return np.where(p < 0, p / PCM_NEG_SCALE, p / PCM_POS_SCALE)

    @staticmethod
    def header(sample_rate: int, n_samples: int) -> bytes:
        """Build the 44-byte RIFF header for a mono 16-bit stream."""
        data_len = n_samples * WAV_BLOCK_ALIGN
        return _HEADER.pack(
            b"RIFF",
            WAV_HEADER_BYTES + data_len - 8,
            b"WAVE",
            b"fmt ",
            WAV_FMT_CHUNK_LEN,
            WAV_FORMAT_PCM,
            WAV_CHANNELS,
            sample_rate,
            sample_rate * WAV_BLOCK_ALIGN,
            WAV_BLOCK_ALIGN,
            WAV_BITS,
            b"data",
            data_len,
        )

    @staticmethod
    def to_raw_bytes(pcm: np.ndarray) -> bytes:
        """Pack int16 samples as little-endian bytes for the data chunk."""
        return pcm.astype("<i2", copy=False).tobytes()

    @classmethod
    def encode(cls, buffer: SampleBuffer) -> bytes:
        """
        Encode a mono buffer as a complete WAV file.

        Returns:
            bytes of length 44 + 2 * len(buffer).
        """
        pcm = cls.to_int16(buffer.samples)
        return cls.header(buffer.sample_rate, len(pcm)) + cls.to_raw_bytes(pcm)


def encode(buffer: SampleBuffer) -> bytes:
    """Module-level shortcut for PcmEncoder.encode()."""
    return PcmEncoder.encode(buffer)
