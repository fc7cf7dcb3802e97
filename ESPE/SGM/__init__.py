# =============================================================================
# SGM — Signal Generation Module
# Subfolder of ESPE (Echo Signal Processing Engine)
# =============================================================================
#
# Everything that creates samples or bytes from nothing but parameters and
# buffers: the synthetic test signal and the WAV container.
#
# Modules:
#   chirp_generator.py — chirp + half-sine tone bursts, peak-normalized to 0.8
#   pcm_encoder.py     — mono 16-bit PCM WAV writer (44-byte header)
#   export_bridge.py   — Pyodide/JSON entry points for a full processing run
#
# Constants live in ESPE/SMM/constants.py
# Verification tools live in ESPE/SVM/
