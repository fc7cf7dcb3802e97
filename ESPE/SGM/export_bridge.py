# =============================================================================
# ESPE/SGM/export_bridge.py — Echo processing bridge (Pyodide / JSON)
# =============================================================================
#
# Needs numpy and the ESPE package, but no file I/O and no soundfile, so it
# can be loaded into Pyodide next to the browser UI.  The browser decodes the
# user's file with AudioContext.decodeAudioData() and passes the Float32
# channel data straight in.
#
# Entry points:
#
#   process_echo_json(samples, sample_rate, alpha, delay_ms, tail_seconds,
#                     display_width=None) -> str
#       samples      : list / Float32Array of mono samples
#       sample_rate  : int, Hz
#       returns      : JSON {wav_b64, sample_rate, n_samples, filename,
#                            report, peak, envelope?}
#                      wav_b64 is a complete base64 WAV file; envelope is a
#                      list of [min, max] pairs when display_width is given.
#
#   generate_test_signal_json(display_width=None) -> str
#       returns      : JSON {wav_b64, sample_rate, n_samples, samples_b64,
#                            envelope?}
#                      samples_b64 is the raw float32 LE sample block, so
#                      the JS side can build an AudioBuffer without decoding
#                      the WAV.
#
# The *_json functions never raise.  On failure they return
# {error, traceback}.
# =============================================================================

from __future__ import annotations
import base64
import json
import traceback
from typing import Optional, Sequence

from ESPE.SGM.chirp_generator import SignalGenerator
from ESPE.SGM.pcm_encoder import PcmEncoder
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer
from ESPE.SPM.pipeline import processing_report, run_pipeline, suggested_filename
from ESPE.SViz.waveform_reducer import reduce


def _wav_b64(buffer: SampleBuffer) -> str:
    return base64.b64encode(PcmEncoder.encode(buffer)).decode("ascii")


def process_echo(
    samples: Sequence[float],
    sample_rate: int,
    alpha: float,
    delay_ms: float,
    tail_seconds: float,
    display_width: Optional[int] = None,
) -> dict:
    """
    Run echo + normalize on a decoded mono buffer.

    Parameters
    ----------
    samples : sequence of float
        Mono samples from the browser decoder.
    sample_rate : int
        Sample rate of `samples`.
    alpha, delay_ms, tail_seconds : float
        Slider values.
    display_width : int, optional
        Canvas width in pixels; adds an `envelope` entry when given.

    Returns
    -------
    dict  {wav_b64, sample_rate, n_samples, filename, report, peak[, envelope]}
    """
    params = EchoParameters(float(alpha), float(delay_ms), float(tail_seconds))
    source = SampleBuffer(samples, int(sample_rate))
    output = run_pipeline(source, params)

    result = {
        "wav_b64":     _wav_b64(output),
        "sample_rate": output.sample_rate,
        "n_samples":   len(output),
        "filename":    suggested_filename(params),
        "report":      processing_report(params, source, output),
        "peak":        round(output.peak, 6),
    }
    if display_width is not None:
        result["envelope"] = [list(pair) for pair in reduce(output.samples, int(display_width))]
    return result


def generate_test_signal(display_width: Optional[int] = None) -> dict:
    buf = SignalGenerator().generate()
    result = {
        "wav_b64":     _wav_b64(buf),
        "samples_b64": base64.b64encode(buf.samples.astype("<f4").tobytes()).decode("ascii"),
        "sample_rate": buf.sample_rate,
        "n_samples":   len(buf),
    }
    if display_width is not None:
        result["envelope"] = [list(pair) for pair in reduce(buf.samples, int(display_width))]
    return result


def _safe_json(fn, *args, **kwargs) -> str:
    try:
        return json.dumps(fn(*args, **kwargs))
    except Exception as exc:
        return json.dumps({
            "error":     str(exc),
            "traceback": traceback.format_exc(),
        })


def process_echo_json(samples, sample_rate, alpha, delay_ms, tail_seconds, display_width=None) -> str:
    """Safe Pyodide entry point.  Always returns a JSON string."""
    return _safe_json(
        process_echo, samples, sample_rate, alpha, delay_ms, tail_seconds, display_width,
    )


def generate_test_signal_json(display_width=None) -> str:
    """Safe Pyodide entry point.  Always returns a JSON string."""
    return _safe_json(generate_test_signal, display_width)
