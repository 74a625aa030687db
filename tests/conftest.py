"""Shared fixtures for the jira_kpis test suite.

The project root goes on sys.path so a plain checkout runs without
``pip install -e .``. ``jira_server`` is a throwaway HTTP server on
127.0.0.1 that answers the search endpoint, so the real ``jira`` session
can be exercised end to end.
"""

from __future__ import annotations

import sys
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class _SearchHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        server = self.server
        server.seen.append({"path": self.path, "authorization": self.headers.get("Authorization")})
        status, body, delay = server.reply
        if delay:
            time.sleep(delay)
        payload = body.encode("utf-8")
        try:
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)
        except OSError:
            # client gave up (timeout tests)
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def jira_server(monkeypatch):
    """Local search endpoint; set ``.reply = (status, body, delay_seconds)`` to change the answer."""
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _SearchHandler)
    httpd.seen = []
    httpd.reply = (200, '{"startAt": 0, "maxResults": 0, "total": 5, "issues": []}', 0)
    httpd.url = f"http://127.0.0.1:{httpd.server_address[1]}"
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()
