# =============================================================================
# echo_filter.py — Recursive Echo (Feedback Comb) Filter
# =============================================================================
#
# Y[n] = x[n] + alpha * Y[n - nd]
#
#   x[n] = input[n] for n < N, 0 in the appended tail
#   Y[n] = x[n]     for n < nd
#
# Output length is N + tail_samples: the tail is pure silence on the input
# side, so the echo train keeps ringing after the source ends.
#
# ORDERING:
#   Y[n] needs Y[n - nd], so the recurrence can only run forward.  It is
#   evaluated one nd-sample block at a time: every sample in block k reads
#   only block k-1, which is already final.  Blocks themselves are strictly
#   sequential.  Do not replace this with a cumulative/FFT form: feedback
#   with |alpha| >= 1 must blow up exactly as the direct loop does.
#
# PRECISION:
#   Each block is summed in float64 and stored as float32, matching the
#   browser page's double arithmetic written into a Float32Array.  Later blocks
#   read the float32-rounded values.
#
# nd == 0:
#   The recurrence would read Y[n] before writing it.  The browser page reads a
#   zero-initialised slot there, so nd == 0 is a pure passthrough.
#
# CANCELLATION:
#   `cancel` is any object with is_set() (threading.Event).  It is polled at
#   block boundaries once CANCEL_CHECK_INTERVAL samples have been written
#   since the last poll; a set flag raises EchoCancelled.

from __future__ import annotations
import logging

import numpy as np

from ESPE.SMM.constants import CANCEL_CHECK_INTERVAL
from ESPE.SMM.errors import EchoCancelled
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer

logger = logging.getLogger(__name__)


class EchoFilter:
    """
    Feedback echo stage.

    Usage:
        params = EchoParameters(alpha=0.5, delay_ms=300, tail_seconds=2.0)
        out = EchoFilter.apply(buffer, params)
        len(out) == len(buffer) + params.tail_samples(buffer.sample_rate)
    """

    @staticmethod
    def recurrence(
        x: np.ndarray,
        alpha: float,
        nd: int,
        tail: int,
        cancel=None,
        check_interval: int = CANCEL_CHECK_INTERVAL,
    ) -> np.ndarray:
        """
        Run the echo recurrence on raw samples.

        Args:
            x:     1-D float input samples.
            alpha: Feedback gain.
            nd:    Delay in samples, >= 0.
            tail:  Silent samples appended after the input, >= 0.
            cancel: Optional object with is_set(), polled during the loop.
            check_interval: Samples between cancellation polls.

        Returns:
            float32 array of len(x) + tail samples.
        """
        if nd < 0 or tail < 0:
            raise ValueError(f"delay and tail must be >= 0 samples, got nd={nd}, tail={tail}")

        n_in  = len(x)
        total = n_in + tail
        xp = np.zeros(total, dtype=np.float64)
        xp[:n_in] = x
        y = np.empty(total, dtype=np.float32)

        if nd == 0:
            y[:] = xp
            return y

        head = min(nd, total)
        y[:head] = xp[:head]

        since_poll = head
        start = nd
        with np.errstate(over="ignore", invalid="ignore"):
            while start < total:
                end = min(start + nd, total)
                prev = y[start - nd:end - nd].astype(np.float64)
                y[start:end] = (xp[start:end] + alpha * prev).astype(np.float32)
                since_poll += end - start
                if cancel is not None and since_poll >= check_interval:
                    since_poll = 0
                    if cancel.is_set():
                        raise EchoCancelled(end, total)
                start = end
        return y

    @classmethod
    def apply(cls, buffer: SampleBuffer, params: EchoParameters, cancel=None) -> SampleBuffer:
        """Apply the echo to a buffer; the input is left untouched."""
        params.validate()
        fs   = buffer.sample_rate
        nd   = params.delay_samples(fs)
        tail = params.tail_samples(fs)
        logger.debug(
            "echo: alpha=%s nd=%d tail=%d input=%d samples",
            params.alpha, nd, tail, len(buffer),
        )
        y = cls.recurrence(buffer.samples, params.alpha, nd, tail, cancel=cancel)
        return SampleBuffer.adopt(y, fs)


def apply(buffer: SampleBuffer, params: EchoParameters, cancel=None) -> SampleBuffer:
    """Module-level shortcut for EchoFilter.apply()."""
    return EchoFilter.apply(buffer, params, cancel=cancel)
