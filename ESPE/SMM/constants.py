# =============================================================================
# constants.py — SMM Engine Constants
# =============================================================================
#
# Every tunable number the engine uses lives here.  The generator, the echo
# filter, the normalizer, the PCM encoder and the bridges all import from this
# module.  Never hard-code one of these values anywhere else.
#
# Values marked (UI) must match the Echo Studio browser page exactly;
# changing them changes the rendered audio.

import os

# -----------------------------------------------------------------------------
# SAMPLE GRID
# -----------------------------------------------------------------------------

SAMPLE_RATE   = 44_100          # Hz, default rate of the synthetic test signal (UI)

# -----------------------------------------------------------------------------
# TEST SIGNAL  (chirp + three half-sine tone bursts)
# -----------------------------------------------------------------------------

TEST_DURATION_S   = 5.0         # seconds (UI)
CHIRP_F0_HZ       = 200.0       # chirp start frequency (UI)
CHIRP_F1_HZ       = 2_000.0     # chirp end frequency (UI)
CHIRP_AMPLITUDE   = 0.3         # (UI)

BURST_FIRST_S     = 0.5         # first burst start time (UI)
BURST_STEP_S      = 1.5         # spacing between burst starts (UI)
BURST_LIMIT_S     = 4.5         # bursts start strictly before this time (UI)
BURST_LENGTH_S    = 0.3         # burst length, also the half-sine period (UI)
BURST_AMPLITUDE   = 0.4         # (UI)
BURST_BASE_HZ     = 400.0       # bf = BURST_BASE_HZ + BURST_SWEEP_HZ * (bt / 5)
BURST_SWEEP_HZ    = 200.0
BURST_SWEEP_SPAN_S = 5.0        # the "/ 5" above; fixed, not the buffer duration

TEST_PEAK         = 0.8         # final peak of the generated signal (UI)

# -----------------------------------------------------------------------------
# ECHO FILTER
# -----------------------------------------------------------------------------

# Samples between two polls of the cooperative cancellation flag.
# The recurrence is polled at block boundaries once at least this many
# samples have been written since the previous poll.
CANCEL_CHECK_INTERVAL = 16_384

# -----------------------------------------------------------------------------
# NORMALIZER  ("normalize safely": attenuate only)
# -----------------------------------------------------------------------------

NORMALIZE_TARGET_PEAK = 0.95    # (UI)
NORMALIZE_THRESHOLD   = 1.0     # only buffers peaking ABOVE this are touched (UI)

# -----------------------------------------------------------------------------
# WAVEFORM ENVELOPE
# -----------------------------------------------------------------------------

# Per-column starting pair.  A column whose window holds no samples keeps
# these values, i.e. an inverted (min > max) pair.
ENVELOPE_EMPTY_MIN =  1.0
ENVELOPE_EMPTY_MAX = -1.0

# -----------------------------------------------------------------------------
# PCM / WAV CONTAINER  (16-bit mono, canonical 44-byte header)
# -----------------------------------------------------------------------------

WAV_HEADER_BYTES  = 44
WAV_FMT_CHUNK_LEN = 16
WAV_FORMAT_PCM    = 1
WAV_CHANNELS      = 1
WAV_BITS          = 16
WAV_BLOCK_ALIGN   = WAV_CHANNELS * WAV_BITS // 8     # = 2

# Asymmetric float → int16 scale: negatives reach -32768, positives 32767.
PCM_NEG_SCALE = 0x8000
PCM_POS_SCALE = 0x7FFF

# -----------------------------------------------------------------------------
# FRONTEND DEFAULTS  (slider start positions in the browser UI)
# -----------------------------------------------------------------------------

DEFAULT_ALPHA          = 0.5
DEFAULT_DELAY_MS       = 300.0
DEFAULT_TAIL_SECONDS   = 2.0
DEFAULT_DISPLAY_WIDTH  = 800

# download name, e.g. echo_alpha0.5_delay300ms.wav
OUTPUT_FILENAME_PATTERN = "echo_alpha{alpha}_delay{delay}ms.wav"

# -----------------------------------------------------------------------------
# BRIDGE SERVER
# -----------------------------------------------------------------------------

BRIDGE_HOST = os.environ.get("ESPE_BRIDGE_HOST", "127.0.0.1")
BRIDGE_PORT = int(os.environ.get("ESPE_BRIDGE_PORT", "5000"))
