"""
py_bridge_server.py — local HTTP bridge for the Echo Studio page

Lets the browser UI hand the heavy work to desktop Python instead of
Pyodide.  Routes:

  POST /echo-bridge/process   multipart: wav=<file> | generate=1,
                              alpha, delay_ms, tail_s
                              -> processed WAV (attachment, echo_alpha..ms.wav)
  POST /echo-bridge/waveform  multipart: wav=<file>, width[, height]
                              -> JSON envelope
  GET  /echo-bridge/generate  -> 5 s chirp test signal WAV
  GET  /echo-bridge/health    -> {"status": "ok"}

Usage:
  python tools/py_bridge_server.py            (127.0.0.1:5000)
  ESPE_BRIDGE_PORT=5050 python tools/py_bridge_server.py
"""
import io
import logging
import os
import sys
import importlib


# Fail loudly and helpfully if required Python packages are missing.
def _require_modules(mods):
    missing = []
    for m in mods:
        try:
            importlib.import_module(m)
        except ImportError:
            missing.append(m)
    if missing:
        print("\nERROR: Missing required Python package(s): {}".format(', '.join(missing)))
        print("Install them with:")
        print("  python -m pip install -e .")
        sys.exit(1)


if __name__ == '__main__':
    _require_modules(['flask', 'soundfile', 'numpy'])
    # Allow running from project root without installing
    sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from flask import Flask, request, send_file, jsonify

from ESPE.SGM.pcm_encoder import PcmEncoder
from ESPE.SMM.constants import (
    BRIDGE_HOST, BRIDGE_PORT,
    DEFAULT_ALPHA, DEFAULT_DELAY_MS, DEFAULT_TAIL_SECONDS, DEFAULT_DISPLAY_WIDTH,
)
from ESPE.SMM.errors import LoadFailedError
from ESPE.SMM.sample_buffer import EchoParameters
from ESPE.SViz.visualizer_bridge import waveform_envelope
from ESPE.engine import AudioEngine

logger = logging.getLogger('espe.bridge')


def _float_field(name, default):
    raw = request.form.get(name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f'field `{name}` must be a number, got {raw!r}')


def _wav_response(wav_bytes, filename):
    return send_file(
        io.BytesIO(wav_bytes),
        mimetype='audio/wav',
        as_attachment=True,
        download_name=filename,
    )


def create_app():
    app = Flask(__name__)

    @app.route('/echo-bridge/process', methods=['POST'])
    def process():
        engine = AudioEngine()
        try:
            params = EchoParameters(
                _float_field('alpha', DEFAULT_ALPHA),
                _float_field('delay_ms', DEFAULT_DELAY_MS),
                _float_field('tail_s', DEFAULT_TAIL_SECONDS),
            )
            params.validate()
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        if 'wav' in request.files:
            f = request.files['wav']
            try:
                engine.load_bytes(f.read(), f.filename or 'upload')
            except LoadFailedError as e:
                return jsonify({'error': str(e)}), 422
        elif request.form.get('generate'):
            engine.generate_test_signal()
        else:
            return jsonify({'error': 'missing file field `wav` (or generate=1)'}), 400

        engine.process(params)
        logger.info('%s', engine.processing_report().replace('\n', ' | '))
        return _wav_response(engine.encode_output(), engine.suggested_filename())

    @app.route('/echo-bridge/waveform', methods=['POST'])
    def waveform():
        if 'wav' not in request.files:
            return jsonify({'error': 'missing file field `wav`'}), 400
        try:
            width = int(request.form.get('width', DEFAULT_DISPLAY_WIDTH))
            height = request.form.get('height')
            height = float(height) if height else None
            if width <= 0:
                raise ValueError(f'width must be > 0, got {width}')
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        f = request.files['wav']
        engine = AudioEngine()
        try:
            buf = engine.load_bytes(f.read(), f.filename or 'upload')
        except LoadFailedError as e:
            return jsonify({'error': str(e)}), 422
        result = waveform_envelope(buf.samples, width, height)
        result['sample_rate'] = buf.sample_rate
        result['duration'] = round(buf.duration, 3)
        return jsonify(result)

    @app.route('/echo-bridge/generate', methods=['GET'])
    def generate():
        engine = AudioEngine()
        engine.generate_test_signal()
        return _wav_response(PcmEncoder.encode(engine.input_buffer), 'test_signal.wav')

    @app.route('/echo-bridge/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    create_app().run(host=BRIDGE_HOST, port=BRIDGE_PORT)
