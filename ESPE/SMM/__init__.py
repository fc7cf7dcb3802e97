# =============================================================================
# ESPE/SMM/__init__.py — Signal Model Module
# =============================================================================
#
# The SMM is the single source of truth for the engine's data model and its
# numeric constants: sample-grid defaults, test-signal parameters, normalizer
# ceilings, the WAV header layout, and the buffer / parameter types every
# stage passes to the next.
#
# The other ESPE sub-modules take their types and constants from here.
#
# Sub-modules:
#   constants.py      — timing, amplitude and container constants
#   sample_buffer.py  — SampleBuffer, EchoParameters, js_round()
#   errors.py         — ESPEError and the load / input / cancel conditions
# =============================================================================
