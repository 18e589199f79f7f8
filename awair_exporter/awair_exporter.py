#!/usr/bin/env python3
"""
Awair Exporter - Prometheus exporter for an Awair air-quality sensor

Every scrape of /metrics polls the device once, writes the reading into
the gauge table and returns the rendered table. A failed poll answers 503
with an empty body and leaves the gauges as they were.
"""

import gzip
import logging
import threading
from io import BytesIO
from typing import Dict, NamedTuple, Optional, Tuple
from http.server import HTTPServer, BaseHTTPRequestHandler
from socketserver import ThreadingMixIn
from prometheus_client import CONTENT_TYPE_LATEST

from .awair_client import AwairClient, PollError
from .result_table import ResultTable

DEFAULT_METRICS_PORT = 8888
DEFAULT_LISTEN_ADDR = '0.0.0.0'
METRICS_PATH = '/metrics'


class ExporterConfig(NamedTuple):
    """Startup configuration, fixed for the lifetime of the process"""
    target: str
    metrics_port: int = DEFAULT_METRICS_PORT
    listen_addr: str = DEFAULT_LISTEN_ADDR


class ThreadedHTTPServer(ThreadingMixIn, HTTPServer):
    """HTTP Server with threading support for concurrent requests"""
    daemon_threads = True
    allow_reuse_address = True


def _gzip(data: bytes) -> bytes:
    compressed = BytesIO()
    with gzip.GzipFile(fileobj=compressed, mode='wb', compresslevel=6) as f:
        f.write(data)
    return compressed.getvalue()


def _accepts_gzip(accept_encoding: str) -> bool:
    """True if an Accept-Encoding header allows gzip with a non-zero q-value"""
    for item in accept_encoding.split(','):
        coding, *params = [part.strip() for part in item.split(';')]
        if coding.lower() != 'gzip':
            continue
        q = 1.0
        for param in params:
            key, _, value = param.partition('=')
            if key.strip().lower() == 'q':
                try:
                    q = float(value)
                except ValueError:
                    q = 0.0
        return q > 0
    return False


class AwairPrometheusExporter:
    """Prometheus exporter for a single Awair device"""

    def __init__(self, config: ExporterConfig,
                 client: Optional[AwairClient] = None,
                 table: Optional[ResultTable] = None):
        """
        Initialize the exporter

        Args:
            config: Startup configuration
            client: Device client, built from ``config.target`` if omitted
            table: Gauge table, a fresh one if omitted
        """
        self.config = config
        self.client = client or AwairClient(config.target)
        self.table = table or ResultTable()
        self.logger = logging.getLogger(__name__)

        self._server: Optional[ThreadedHTTPServer] = None
        self._server_thread: Optional[threading.Thread] = None

    def scrape(self) -> Tuple[int, bytes, Dict[str, str]]:
        """
        Poll the device and render the gauge table.

        Returns:
            tuple: (status, body, headers). 200 with the exposition on
            success, 503 with an empty body if the poll failed
        """
        try:
            data = self.client.get_air_data()
        except PollError as e:
            self.logger.error(f"error during metrics poll: {e}")
            return 503, b'', {}

        self.table.update(data)
        return 200, self.table.generate_metrics(), {'Content-Type': CONTENT_TYPE_LATEST}

    def _make_handler(self):
        """Build the request handler class bound to this exporter"""
        exporter = self
        logger = self.logger

        class AwairMetricsHandler(BaseHTTPRequestHandler):
            """HTTP handler that polls the device on every scrape"""

            def log_message(self, format, *args):
                logger.debug(f"{self.address_string()} - {format % args}")

            def do_GET(self):
                if self.path.split('?', 1)[0] != METRICS_PATH:
                    try:
                        self.send_error(404, "Not Found")
                    except (BrokenPipeError, ConnectionResetError):
                        pass
                    return

                try:
                    status, body, headers = exporter.scrape()

                    if status == 200 and _accepts_gzip(self.headers.get('Accept-Encoding', '')):
                        body = _gzip(body)
                        headers['Content-Encoding'] = 'gzip'

                    self.send_response(status)
                    for name, value in headers.items():
                        self.send_header(name, value)
                    self.send_header('Content-Length', str(len(body)))
                    self.end_headers()
                    self.wfile.write(body)

                except (BrokenPipeError, ConnectionResetError):
                    # Client disconnected, ignore silently
                    pass
                except Exception as e:
                    try:
                        logger.error(f"Error serving metrics: {e}", exc_info=True)
                        self.send_error(500, "Internal Server Error")
                    except (BrokenPipeError, ConnectionResetError):
                        pass

        return AwairMetricsHandler

    def _create_server(self) -> ThreadedHTTPServer:
        server = ThreadedHTTPServer(
            (self.config.listen_addr, self.config.metrics_port),
            self._make_handler()
        )
        self._server = server
        return server

    def serve_in_background(self) -> Tuple[str, int]:
        """
        Start the HTTP server on a daemon thread.

        Returns:
            tuple: (host, port) the server is bound to
        """
        server = self._create_server()
        self._server_thread = threading.Thread(
            target=server.serve_forever, daemon=True, name='http-server'
        )
        self._server_thread.start()
        host, port = server.server_address[:2]
        self.logger.info(f"Awair exporter HTTP server started on {host}:{port}")
        return host, port

    def start(self):
        """Start the exporter and serve until interrupted"""
        self.logger.info(f"Starting Awair exporter on {self.config.listen_addr}:{self.config.metrics_port}")
        self.logger.info(f"Polling Awair device at {self.client.url} on every scrape")

        server = self._create_server()
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            self.logger.info("Received interrupt signal, shutting down...")
        finally:
            server.server_close()
            self._server = None

    def stop(self):
        """Stop the exporter"""
        self.logger.info("Stopping exporter...")
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._server_thread:
            self._server_thread.join(timeout=5)
            self._server_thread = None
