# =============================================================================
# pipeline.py — one processing run, plus the texts that describe it
# =============================================================================
#
# Kept free of file I/O and of soundfile so the bridges that import it can
# run inside Pyodide with only numpy available.
#
# NUMBER TEXT:
#   The report and the download name print numbers the way the browser page
#   does.  format_delay() is JS Number-to-String (shortest round-trip digits,
#   positional between 1e-6 and 1e21).  to_fixed() is Number.prototype.toFixed:
#   it rounds the exact binary value and breaks ties away from zero, so 0.25
#   prints as "0.3" where Python's "%.1f" gives "0.2".

from __future__ import annotations
import re
from decimal import Decimal, ROUND_HALF_UP

from ESPE.SMM.constants import OUTPUT_FILENAME_PATTERN
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer
from ESPE.SPM.echo_filter import EchoFilter
from ESPE.SPM.normalizer import normalize


def run_pipeline(source: SampleBuffer, params: EchoParameters, cancel=None) -> SampleBuffer:
    """Echo, then safe-normalize."""
    return normalize(EchoFilter.apply(source, params, cancel=cancel))


def format_delay(delay_ms: float) -> str:
    """300.0 -> '300', 12.5 -> '12.5', 1234567.0 -> '1234567'."""
    v = float(delay_ms)
    if v == 0:
        return "0"
    text = repr(v)
    if "e" in text:
        if 1e-6 <= abs(v) < 1e21:
            text = format(Decimal(text), "f")
        else:
            # 1e-07 -> 1e-7
            text = re.sub(r"e([+-])0*(\d)", r"e\1\2", text)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def to_fixed(value: float, digits: int) -> str:
    """(0.125).toFixed(2) -> '0.13'."""
    v = float(value)
    if v == 0:
        # -0 prints without a sign
        v = 0.0
    if abs(v) >= 1e21:
        return format_delay(v)
    exp = Decimal(1).scaleb(-digits)
    return str(Decimal(v).quantize(exp, rounding=ROUND_HALF_UP))


def suggested_filename(params: EchoParameters) -> str:
    return OUTPUT_FILENAME_PATTERN.format(
        alpha=to_fixed(params.alpha, 1), delay=format_delay(params.delay_ms),
    )


def processing_report(params: EchoParameters, source: SampleBuffer, output: SampleBuffer) -> str:
    return (
        "✓ Processed successfully\n"
        f"α = {to_fixed(params.alpha, 2)}, Delay = {format_delay(params.delay_ms)}ms\n"
        f"Input: {to_fixed(source.duration, 2)}s\n"
        f"Output: {to_fixed(output.duration, 2)}s"
    )
