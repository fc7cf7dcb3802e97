# =============================================================================
# Echo Signal Processing Engine (ESPE)
# Runs behind the Echo Studio browser UI (Pyodide or the local bridge server).
# =============================================================================
#
# ── PYTHON OWNS THE SAMPLES ──────────────────────────────────────────────────
#
# RESPONSIBLE for:
#   - Test-signal synthesis (chirp + tone bursts, peak 0.8)
#   - The recursive echo  Y[n] = x[n] + alpha * Y[n - nd]  with ring-out tail
#   - Safe normalization (attenuate only, never boost)
#   - Min/max waveform envelopes for the input and output canvases
#   - WAV container construction (mono, 16-bit PCM)
#
# NOT responsible for:
#   - Playback / transport
#       JS plays AudioBuffers through the Web Audio API.
#   - UI Rendering / User Interaction
#       JS owns sliders, file pickers and canvas drawing; Python hands it
#       envelopes, never pixels.
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   JS (UI)     → decodes the dropped file, reads alpha / delay / tail sliders
#   JS (bridge) → passes Float32 samples + sample rate + parameters
#   Python      → EchoFilter → Normalizer → { envelope, WAV bytes }
#   Output      → canvas envelope + downloadable echo_alpha<a>_delay<d>ms.wav
#
# ── Module layout ─────────────────────────────────────────────────────────────
#   SMM/   constants, SampleBuffer / EchoParameters, error types
#   SGM/   test-signal generator, PCM/WAV encoder, processing bridge
#   SPM/   echo filter, normalizer, pipeline helpers
#   SViz/  waveform envelope reducer, visualizer bridge
#   SVM/   self-validation suite, command-line report tool
#   engine.py        per-session AudioEngine
#   audio_loader.py  soundfile-backed decoder front end
# =============================================================================

from ESPE.SMM.errors import ESPEError, EchoCancelled, LoadFailedError, NoInputError
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer

__version__ = "1.0.0"

__all__ = [
    "ESPEError", "EchoCancelled", "LoadFailedError", "NoInputError",
    "EchoParameters", "SampleBuffer",
]
