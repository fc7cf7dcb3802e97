# =============================================================================
# engine.py — AudioEngine session
# =============================================================================
#
# One AudioEngine per frontend session.  It owns the session's current input
# and output buffers and the last parameters used, and strings the pure
# stages together:
#
#   load / generate  →  EchoFilter  →  Normalizer  →  { envelope, WAV bytes }
#
# The stages never see the engine; the engine is only glue.  Nothing here is
# a process-wide singleton; a server or UI adapter creates the instance it
# needs.
#
# BACKGROUND WORK:
#   submit_process() runs process() on a single worker thread and returns a
#   concurrent.futures.Future, so an interactive caller is never blocked by
#   a long recurrence.  Submitting again cancels the job still in flight via
#   its threading.Event; that job's Future then raises EchoCancelled.

from __future__ import annotations
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from ESPE.SGM.chirp_generator import SignalGenerator
from ESPE.SGM.pcm_encoder import PcmEncoder
from ESPE.SMM.constants import DEFAULT_ALPHA, DEFAULT_DELAY_MS, DEFAULT_TAIL_SECONDS
from ESPE.SMM.errors import EchoCancelled, NoInputError
from ESPE.SMM.sample_buffer import EchoParameters, SampleBuffer
from ESPE.SPM.pipeline import (
    format_delay, processing_report, run_pipeline, suggested_filename,
)
from ESPE.SViz.waveform_reducer import Envelope, reduce
from ESPE.audio_loader import decode_audio_bytes, load_audio_file

logger = logging.getLogger(__name__)


class AudioEngine:
    """
    Session state for one frontend.

    Usage:
        engine = AudioEngine()
        engine.generate_test_signal()
        engine.process(EchoParameters(0.5, 300, 2.0))
        wav = engine.encode_output()
        env = engine.output_envelope(800)
    """

    def __init__(self) -> None:
        self.input_buffer:  Optional[SampleBuffer] = None
        self.output_buffer: Optional[SampleBuffer] = None
        self.source_name:   str = ""
        self.params = EchoParameters(DEFAULT_ALPHA, DEFAULT_DELAY_MS, DEFAULT_TAIL_SECONDS)
        self.status = "idle"

        self._lock     = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending_cancel: Optional[threading.Event] = None

    # ── Input ───────────────────────────────────────────────────────────────

    def _set_input(self, buffer: SampleBuffer, name: str) -> SampleBuffer:
        with self._lock:
            self.input_buffer  = buffer
            self.output_buffer = None
            self.source_name   = name
            self.status = "Audio loaded"
        return buffer

    def load_file(self, path: str) -> SampleBuffer:
        """Decode a file from disk as the new input.  Raises LoadFailedError."""
        self.status = "Loading audio..."
        return self._set_input(load_audio_file(path), os.path.basename(path))

    def load_bytes(self, data: bytes, name: str = "upload") -> SampleBuffer:
        """Decode an in-memory file as the new input.  Raises LoadFailedError."""
        self.status = "Loading audio..."
        return self._set_input(decode_audio_bytes(data, name), name)

    def generate_test_signal(self) -> SampleBuffer:
        buf = SignalGenerator().generate()
        self._set_input(buf, f"Generated Test Signal ({buf.duration:.1f}s)")
        self.status = "Test signal generated"
        logger.info("test signal generated: %d samples", len(buf))
        return buf

    # ── Processing ──────────────────────────────────────────────────────────

    def process(self, params: Optional[EchoParameters] = None, cancel=None) -> SampleBuffer:
        """
        Run echo + normalize on the current input (blocking).

        Raises:
            NoInputError:  nothing has been loaded or generated yet.
            ValueError:    negative delay / tail.
            EchoCancelled: `cancel` was set while the recurrence ran.
        """
        params = params or self.params
        params.validate()
        with self._lock:
            source = self.input_buffer
            if source is None:
                raise NoInputError("load or generate an input signal before processing")
            self.status = "Processing..."

        try:
            output = run_pipeline(source, params, cancel=cancel)
        except EchoCancelled:
            with self._lock:
                if self.input_buffer is source:
                    self.status = "Processing cancelled"
            raise
        with self._lock:
            # a newer load may have replaced the input while we were running
            if self.input_buffer is source:
                self.output_buffer = output
                self.params = params
                self.status = "Processing complete!"
        logger.info(
            "processed %s: alpha=%.2f delay=%sms -> %.2fs",
            self.source_name or "input", params.alpha, format_delay(params.delay_ms), output.duration,
        )
        return output

    def submit_process(self, params: Optional[EchoParameters] = None) -> Future:
        """Dispatch process() to the worker thread; cancels any job in flight."""
        cancel = threading.Event()
        with self._lock:
            if self._pending_cancel is not None:
                self._pending_cancel.set()
            self._pending_cancel = cancel
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="espe-echo")
            executor = self._executor
        return executor.submit(self.process, params, cancel)

    def shutdown(self) -> None:
        with self._lock:
            if self._pending_cancel is not None:
                self._pending_cancel.set()
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    # ── Outputs ─────────────────────────────────────────────────────────────

    def _require_output(self) -> SampleBuffer:
        if self.output_buffer is None:
            raise NoInputError("no processed output yet")
        return self.output_buffer

    def input_envelope(self, width: int) -> Envelope:
        if self.input_buffer is None:
            raise NoInputError("no input loaded")
        return reduce(self.input_buffer.samples, width)

    def output_envelope(self, width: int) -> Envelope:
        return reduce(self._require_output().samples, width)

    def encode_output(self) -> bytes:
        return PcmEncoder.encode(self._require_output())

    def suggested_filename(self) -> str:
        return suggested_filename(self.params)

    def processing_report(self) -> str:
        if self.input_buffer is None:
            raise NoInputError("no input loaded")
        return processing_report(self.params, self.input_buffer, self._require_output())

    def save_output(self, directory: str = ".") -> str:
        """Write the encoded output under its suggested name; returns the path."""
        path = os.path.join(directory, self.suggested_filename())
        with open(path, "wb") as f:
            f.write(self.encode_output())
        logger.info("saved %s", path)
        return path
