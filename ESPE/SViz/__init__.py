# =============================================================================
# ESPE/SViz/__init__.py — Signal Visualizer Module
# =============================================================================
#
# Reduces long buffers to one (min, max) pair per canvas column.  Drawing the
# pixels is the browser's job; this module only decides what to draw.
#
# Data flow:
#   JS: canvas.parentElement.clientWidth → width
#   Python: samples + width → envelope (+ pixel extents for a given height)
#   JS: one vertical stroke per column
#
# Sub-modules:
#   waveform_reducer.py   — Envelope, reduce(), column_extents()
#   visualizer_bridge.py  — Pyodide entry point; needs the ESPE package and numpy, no file I/O
