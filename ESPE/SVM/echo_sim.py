#!/usr/bin/env python3
# =============================================================================
# echo_sim.py — Echo Studio command-line runner
# =============================================================================
#
# Runs the full engine pipeline on a WAV (or on the built-in test signal)
# and prints what the browser UI would show, then writes the output WAV under
# its download name.
#
# Usage:
#   python -m ESPE.SVM.echo_sim <path_to_audio>
#   python -m ESPE.SVM.echo_sim --generate --alpha 0.7 --delay-ms 250
#   python -m ESPE.SVM.echo_sim song.wav --tail 3 --out renders/
#   python -m ESPE.SVM.echo_sim --generate --no-write --width 60
#
# Output sections:
#   [1] Source info       — name, sample rate, length, peak
#   [2] Parameters        — alpha, delay / tail in ms and samples
#   [3] Output            — length, peak, the UI's processing report
#   [4] Envelope preview  — coarse text rendering of the output envelope
#   [5] File              — path of the written WAV
#
# =============================================================================

from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Optional

from ESPE.SMM.constants import DEFAULT_ALPHA, DEFAULT_DELAY_MS, DEFAULT_TAIL_SECONDS
from ESPE.SMM.errors import ESPEError
from ESPE.SMM.sample_buffer import EchoParameters
from ESPE.SPM.pipeline import format_delay, to_fixed
from ESPE.engine import AudioEngine

DIVIDER = "=" * 68
PREVIEW_ROWS = 9


def render_preview(envelope, rows: int = PREVIEW_ROWS) -> list[str]:
    """Draw an envelope as text, one character column per envelope column."""
    lines = []
    for r in range(rows):
        # row 0 is +1.0, last row is -1.0
        level_hi = 1 - 2 * r / rows
        level_lo = 1 - 2 * (r + 1) / rows
        line = []
        for lo, hi in envelope:
            line.append("#" if lo <= level_hi and hi >= level_lo and lo <= hi else " ")
        lines.append("".join(line))
    return lines


def run_echo(
    source: Optional[str],
    params: EchoParameters,
    width: int,
    out_dir: Optional[str],
) -> bool:
    """
    Run the pipeline and print the report.
    Returns True on success, False if the input could not be used.
    """
    engine = AudioEngine()

    print(f"\n{DIVIDER}")
    print(f"  Echo Studio — pipeline run")
    print(DIVIDER)

    # -----------------------------------------------------------------------
    # [1] Source
    # -----------------------------------------------------------------------
    try:
        if source is None:
            src = engine.generate_test_signal()
        else:
            src = engine.load_file(source)
    except ESPEError as exc:
        print(f"  [!!] Load failed: {exc}")
        return False

    print(f"  Source   : {engine.source_name}")
    print(f"  Rate     : {src.sample_rate} Hz")
    print(f"  Samples  : {len(src):,}  ({src.duration:.2f} s)")
    print(f"  Peak     : {src.peak:.4f}")

    # -----------------------------------------------------------------------
    # [2] Parameters
    # -----------------------------------------------------------------------
    print(f"\n  -- Parameters --")
    try:
        params.validate()
    except ValueError as exc:
        print(f"  [!!] Invalid parameters: {exc}")
        return False
    fs = src.sample_rate
    print(f"  alpha    : {to_fixed(params.alpha, 2)}")
    print(f"  delay    : {format_delay(params.delay_ms)} ms  ({params.delay_samples(fs):,} samples)")
    print(f"  tail     : {params.tail_seconds:g} s  ({params.tail_samples(fs):,} samples)")
    if params.delay_samples(fs) == 0:
        print(f"  [INFO] delay rounds to 0 samples — output is a passthrough")
    if abs(params.alpha) >= 1:
        print(f"  [INFO] |alpha| >= 1 — echoes grow instead of decaying")

    # -----------------------------------------------------------------------
    # [3] Output
    # -----------------------------------------------------------------------
    out = engine.process(params)
    print(f"\n  -- Output --")
    print(f"  Samples  : {len(out):,}  ({out.duration:.2f} s)")
    print(f"  Peak     : {out.peak:.4f}")
    print()
    for line in engine.processing_report().splitlines():
        print(f"  {line}")

    # -----------------------------------------------------------------------
    # [4] Envelope preview
    # -----------------------------------------------------------------------
    print(f"\n  -- Envelope ({width} columns) --")
    for line in render_preview(engine.output_envelope(width)):
        print(f"  |{line}|")

    # -----------------------------------------------------------------------
    # [5] File
    # -----------------------------------------------------------------------
    if out_dir is not None:
        os.makedirs(out_dir, exist_ok=True)
        path = engine.save_output(out_dir)
        print(f"\n  Wrote    : {path}  ({os.path.getsize(path):,} bytes)")

    print(f"{DIVIDER}\n")
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Echo Studio — apply the recursive echo to a WAV file",
    )
    parser.add_argument("audio", nargs="?", help="Input audio file (any format soundfile reads)")
    parser.add_argument(
        "--generate", action="store_true",
        help="Use the built-in 5 s chirp test signal instead of a file",
    )
    parser.add_argument("--alpha", type=float, default=DEFAULT_ALPHA,
                        help=f"Feedback gain, default {DEFAULT_ALPHA}")
    parser.add_argument("--delay-ms", type=float, default=DEFAULT_DELAY_MS,
                        help=f"Echo delay in ms, default {DEFAULT_DELAY_MS:g}")
    parser.add_argument("--tail", type=float, default=DEFAULT_TAIL_SECONDS,
                        help=f"Ring-out tail in seconds, default {DEFAULT_TAIL_SECONDS:g}")
    parser.add_argument("--width", type=int, default=64,
                        help="Envelope preview width in columns, default 64")
    parser.add_argument("--out", default=".", help="Directory for the output WAV, default .")
    parser.add_argument("--no-write", action="store_true", help="Do not write the output WAV")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.generate == (args.audio is not None):
        parser.error("give either an audio file or --generate")
    if args.width <= 0:
        parser.error("--width must be > 0")

    ok = run_echo(
        source=None if args.generate else args.audio,
        params=EchoParameters(args.alpha, args.delay_ms, args.tail),
        width=args.width,
        out_dir=None if args.no_write else args.out,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
