import io
import sys
import unittest
from pathlib import Path

# Allow `import ESPE.*` and the tools/ scripts from repo root.
_ROOT = Path(__file__).resolve().parents[1]
for _p in (_ROOT, _ROOT / "tools"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))

import py_bridge_server
from ESPE.SGM.pcm_encoder import PcmEncoder
from ESPE.SMM.sample_buffer import SampleBuffer


def _wav(samples, sample_rate=8000) -> bytes:
    return PcmEncoder.encode(SampleBuffer(samples, sample_rate=sample_rate))


class TestBridgeServer(unittest.TestCase):
    def setUp(self) -> None:
        app = py_bridge_server.create_app()
        app.config["TESTING"] = True
        self.client = app.test_client()

    def test_health(self) -> None:
        resp = self.client.get("/echo-bridge/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"status": "ok"})

    def test_generate(self) -> None:
        resp = self.client.get("/echo-bridge/generate")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.mimetype, "audio/wav")
        self.assertEqual(len(resp.data), 44 + 2 * 220_500)

    def test_process_generated_signal(self) -> None:
        resp = self.client.post(
            "/echo-bridge/process",
            data={"generate": "1", "alpha": "0.5", "delay_ms": "300"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertIn("echo_alpha0.5_delay300ms.wav", resp.headers["Content-Disposition"])
        self.assertEqual(len(resp.data), 44 + 2 * (220_500 + 88_200))

    def test_process_upload(self) -> None:
        resp = self.client.post(
            "/echo-bridge/process",
            data={
                "wav": (io.BytesIO(_wav([1.0, 0.0, 0.0, 0.0])), "in.wav"),
                "alpha": "0.5", "delay_ms": "0.25", "tail_s": "0.00025",
            },
            content_type="multipart/form-data",
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 44 + 2 * 6)
        self.assertIn("echo_alpha0.5_delay0.25ms.wav", resp.headers["Content-Disposition"])

    def test_process_without_input(self) -> None:
        resp = self.client.post("/echo-bridge/process", data={"alpha": "0.5"})
        self.assertEqual(resp.status_code, 400)

    def test_process_bad_number(self) -> None:
        resp = self.client.post("/echo-bridge/process", data={"generate": "1", "alpha": "loud"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("alpha", resp.get_json()["error"])

    def test_process_negative_delay(self) -> None:
        resp = self.client.post("/echo-bridge/process", data={"generate": "1", "delay_ms": "-1"})
        self.assertEqual(resp.status_code, 400)

    def test_process_undecodable_upload(self) -> None:
        resp = self.client.post(
            "/echo-bridge/process",
            data={"wav": (io.BytesIO(b"garbage bytes"), "bad.wav")},
            content_type="multipart/form-data",
        )
        self.assertEqual(resp.status_code, 422)

    def test_waveform(self) -> None:
        resp = self.client.post(
            "/echo-bridge/waveform",
            data={"wav": (io.BytesIO(_wav([0.0] * 80)), "in.wav"), "width": "4", "height": "100"},
            content_type="multipart/form-data",
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()
        self.assertEqual(body["width"], 4)
        self.assertEqual(body["step"], 20)
        self.assertEqual(body["columns"], [[0.0, 0.0]] * 4)
        self.assertEqual(body["extents"], [[50.0, 50.0]] * 4)
        self.assertEqual(body["sample_rate"], 8000)
        self.assertEqual(body["duration"], 0.01)

    def test_waveform_bad_width(self) -> None:
        resp = self.client.post(
            "/echo-bridge/waveform",
            data={"wav": (io.BytesIO(_wav([0.0])), "in.wav"), "width": "0"},
            content_type="multipart/form-data",
        )
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
