# =============================================================================
# errors.py — ESPE exception types
# =============================================================================
#
# Invalid caller input (negative delay, zero display width, bad sample rate)
# is reported with plain ValueError.  The types below cover the conditions an
# adapter (bridge, HTTP server, CLI) has to tell apart from bad parameters.


class ESPEError(Exception):
    """Base class for engine conditions that are not parameter errors."""


class LoadFailedError(ESPEError):
    """The input audio could not be decoded into a usable mono buffer."""


class NoInputError(ESPEError):
    """Processing was requested before any input buffer was loaded."""


class EchoCancelled(ESPEError):
    """The echo recurrence was stopped through its cancellation flag."""

    def __init__(self, samples_done: int, samples_total: int) -> None:
        super().__init__(
            f"echo cancelled after {samples_done} of {samples_total} samples"
        )
        self.samples_done  = samples_done
        self.samples_total = samples_total
