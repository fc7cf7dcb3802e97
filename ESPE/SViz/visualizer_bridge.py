# =============================================================================
# visualizer_bridge.py — Pyodide-Compatible SViz Entry Point
# =============================================================================
#
# No file I/O and no soundfile dependency.  Pyodide must have the ESPE
# package installed (it imports ESPE.SViz.waveform_reducer) plus numpy;
# a single runPython(source) of this file is not enough.
# JS hands over a channel's Float32 data plus the canvas size and gets back
# the per-column envelope, ready to stroke.
#
# Designed to run in-browser via Pyodide.  Also fully importable in CPython
# for offline testing.
#
# =============================================================================

from __future__ import annotations
import json
from typing import Optional, Sequence

from ESPE.SViz.waveform_reducer import column_extents, reduce


def waveform_envelope(
    samples: Sequence[float],
    width: int,
    height: Optional[float] = None,
) -> dict:
    """
    Main Pyodide entry point.

    Parameters
    ----------
    samples : channel data (list or Float32Array proxy)
    width   : canvas width in pixels (number of columns)
    height  : canvas height in pixels; when given, pixel extents are included

    Returns
    -------
    Plain dict (JSON-serialisable) with keys:
        width    : int
        step     : samples per column
        columns  : list of [min, max]
        extents  : list of [y_from, y_to]   (only when height is given)
    """
    env = reduce(samples, width)
    result = {
        "width":   env.width,
        "step":    env.step,
        "columns": [[lo, hi] for lo, hi in env],
    }
    if height is not None:
        result["extents"] = [[a, b] for a, b in column_extents(env, float(height))]
    return result


def waveform_envelope_json(
    samples: Sequence[float],
    width: int,
    height: Optional[float] = None,
) -> str:
    """Same as waveform_envelope() but returns a JSON string, for when
    Pyodide proxy conversion is unavailable."""
    return json.dumps(waveform_envelope(samples, width, height))
