import json
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler

import pytest


SAMPLE_READING = {
    "timestamp": "2026-10-18T09:15:00.000Z",
    "score": 84,
    "dew_point": 12.4,
    "temp": 21.5,
    "humid": 46.72,
    "abs_humid": 8.83,
    "co2": 612,
    "co2_est": 598,
    "co2_est_baseline": 35500,
    "voc": 221,
    "voc_baseline": 38123,
    "voc_h2_raw": 26,
    "voc_ethanol_raw": 37,
    "pm25": 3,
    "pm10_est": 4,
}


class FakeAwairDevice:
    """Serves canned replies on /air-data/latest from a loopback port"""

    def __init__(self):
        self.status = 200
        self.body = json.dumps(SAMPLE_READING).encode()
        self.requests = []

        device = self

        class Handler(BaseHTTPRequestHandler):
            def log_message(self, format, *args):
                pass

            def do_GET(self):
                device.requests.append(self.path)
                if self.path != "/air-data/latest":
                    self.send_error(404)
                    return
                self.send_response(device.status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(device.body)))
                self.end_headers()
                self.wfile.write(device.body)

        self.server = HTTPServer(("127.0.0.1", 0), Handler)
        self.url = f"http://127.0.0.1:{self.server.server_address[1]}"
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def reply(self, payload=None, status=200, raw=None):
        self.status = status
        if raw is not None:
            self.body = raw
        else:
            self.body = json.dumps(payload if payload is not None else SAMPLE_READING).encode()

    def start(self):
        self._thread.start()

    def stop(self):
        self.server.shutdown()
        self.server.server_close()


@pytest.fixture
def reading():
    return dict(SAMPLE_READING)


@pytest.fixture
def awair_device():
    device = FakeAwairDevice()
    device.start()
    yield device
    device.stop()
