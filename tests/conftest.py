from __future__ import annotations

import socket
import threading
import time
from collections.abc import Callable, Generator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


@pytest.fixture(autouse=True)
def _no_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_PROXY", "*")


@pytest.fixture()
def serve_html() -> Generator[Callable[..., str], None, None]:
    """
    Serve a fixed body from a local HTTP server; returns its base URL (no trailing slash).
    """
    servers: list[ThreadingHTTPServer] = []

    def _serve(body: str, *, status: int = 200, content_type: str = "text/html; charset=utf-8") -> str:
        payload = body.encode("utf-8")

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:  # noqa: N802
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            def log_message(self, format: str, *args: object) -> None:  # noqa: A002
                pass

        server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}"

    yield _serve

    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.fixture()
def trickle_server() -> Generator[Callable[[list[bytes], float], str], None, None]:
    """
    Raw socket server that answers one request by sending `pieces` with `interval_s` pauses.
    """
    listeners: list[socket.socket] = []

    def _serve(pieces: list[bytes], interval_s: float) -> str:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        listeners.append(listener)

        def _run() -> None:
            try:
                conn, _ = listener.accept()
            except OSError:
                return
            with conn:
                try:
                    conn.recv(65536)
                    for piece in pieces:
                        conn.sendall(piece)
                        time.sleep(interval_s)
                except OSError:
                    pass  # client went away

        threading.Thread(target=_run, daemon=True).start()
        host, port = listener.getsockname()[:2]
        return f"http://{host}:{port}/"

    yield _serve

    for listener in listeners:
        listener.close()


SCENARIO_HTML = """
<!DOCTYPE html>
<html>
<head>
  <title>Test Page</title>
  <meta name="description" content="This is a test page">
  <meta property="og:title" content="OG Test Title">
  <meta property="og:description" content="OG test description">
  <meta property="og:image" content="https://example.com/image.jpg">
  <meta property="og:site_name" content="Test Site">
  <meta property="og:type" content="website">
  <meta name="author" content="Test Author">
  <meta name="keywords" content="test, metadata, go">
  <meta name="language" content="en">
  <link rel="icon" href="/favicon.ico">
</head>
<body>
  <h1>Test Page Content</h1>
</body>
</html>
"""


@pytest.fixture()
def scenario_html() -> str:
    return SCENARIO_HTML
