"""Browser test fixtures: a local stand-in for the Discord web app."""

import socket
import threading
from collections.abc import Generator
from contextlib import closing
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import cast

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Lazy chunks served under /assets/. bbb.js is a wasm loader and must be skipped.
CHUNKS = {
    "/assets/aaa.js": "console.log('chunk a');",
    "/assets/bbb.js": "fetch(new URL('x.module.wasm', location.href));",
    "/assets/ccc.js": "console.log('chunk c');",
}

LOGIN_PAGE = "<!doctype html><html><head><title>Login</title></head><body>login</body></html>"


def find_free_port() -> int:
    """Find an available port on localhost."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return cast(int, s.getsockname()[1])


class FakeAppHandler(BaseHTTPRequestHandler):
    """Serves the login page for every path except the chunk assets."""

    def do_GET(self) -> None:  # noqa: N802
        if self.path in CHUNKS:
            body = CHUNKS[self.path].encode()
            content_type = "application/javascript"
        else:
            body = LOGIN_PAGE.encode()
            content_type = "text/html"

        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture(scope="session")
def app_server() -> Generator[str, None, None]:
    """Run the fake app for the whole session and yield its base URL."""
    port = find_free_port()
    server = ThreadingHTTPServer(("127.0.0.1", port), FakeAppHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{port}"

    server.shutdown()
    server.server_close()


@pytest.fixture
def fake_bundle() -> Path:
    """Path to a minimal bundle exposing the Vencord globals."""
    return FIXTURES_DIR / "fake_mod.js"
