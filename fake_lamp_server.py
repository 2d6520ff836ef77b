#!/usr/bin/env python3
"""
Fake Yeelight lamp
Accepts LAN control requests on TCP and answers them like a real lamp would.
"""

import argparse
import json
import logging
import socketserver
import threading

from yeelamp.constants import LAMP_PORT, LINE_TERMINATOR

_log = logging.getLogger("fake_lamp")

_METHODS = {"set_ct_abx", "set_rgb", "set_hsv", "set_bright", "toggle"}


class LampRequestHandler(socketserver.StreamRequestHandler):
    def handle(self):
        client_ip = self.client_address[0]
        _log.info(f"Connection from {client_ip}")
        for raw in self.rfile:
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            if not line:
                continue
            _log.info(f"Request: {line}")
            self.server.requests.append(line)
            response = self._respond(line)
            _log.info(f"Response: {response}")
            self.wfile.write((response + LINE_TERMINATOR).encode("utf-8"))
        _log.info(f"Connection from {client_ip} closed")

    def _respond(self, line: str) -> str:
        try:
            request = json.loads(line)
        except json.JSONDecodeError:
            _log.error(f"Invalid JSON: {line}")
            return json.dumps({"id": -1, "error": {"code": -1, "message": "invalid command"}}, separators=(",", ":"))

        req_id = request.get("id")
        if request.get("method") not in _METHODS:
            body = {"id": req_id, "error": {"code": -1, "message": "method not supported"}}
        else:
            body = {"id": req_id, "result": ["ok"]}
        return json.dumps(body, separators=(",", ":"))


class FakeLampServer(socketserver.ThreadingTCPServer):
    """Threaded TCP server; every request line received is kept in `requests`."""

    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, host: str = "", port: int = LAMP_PORT):
        self.requests: list[str] = []
        super().__init__((host, port), LampRequestHandler)

    @property
    def port(self) -> int:
        return self.server_address[1]

    def start_background(self) -> threading.Thread:
        thread = threading.Thread(target=self.serve_forever, daemon=True)
        thread.start()
        return thread


def run_server(port=LAMP_PORT):
    with FakeLampServer("", port) as server:
        _log.info(f"Starting fake lamp on port {server.port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            _log.info("Stopping fake lamp")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    parser = argparse.ArgumentParser(description="Fake Yeelight lamp (LAN control)")
    parser.add_argument("--port", type=int, default=LAMP_PORT, help=f"TCP port to bind (default: {LAMP_PORT})")
    args = parser.parse_args()
    run_server(args.port)
