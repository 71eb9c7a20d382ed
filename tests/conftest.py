from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List

import pytest

PAGE_HTML = """<html>
<head><title>Stub</title></head>
<body>
<a href="/ok">ok</a>
<a href="/notfound">missing</a>
<a href="#top">anchor</a>
<a href="mailto:team@example.com">mail</a>
<a href="/nohead">no head</a>
</body>
</html>
"""


class _StubHandler(BaseHTTPRequestHandler):
    """Routes: /ok, /notfound, /nohead (405 on HEAD), /slow, /hop/N (slow redirect chain), /redirect, /page."""

    def _reply(self, status: int, body: bytes = b"", headers: Dict[str, str] | None = None) -> None:
        self.send_response(status)
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD" and body:
            self.wfile.write(body)

    def _route(self) -> None:
        self.server.seen.append((self.command, self.path))
        if self.path == "/ok":
            self._reply(200, b"ok")
        elif self.path == "/notfound":
            self._reply(404, b"missing")
        elif self.path == "/nohead":
            if self.command == "HEAD":
                self._reply(405)
            else:
                self._reply(200, b"ok")
        elif self.path == "/slow":
            time.sleep(1.0)
            self._reply(200, b"late")
        elif self.path.startswith("/hop/"):
            # Each hop answers slowly and points one step closer to /hop/0.
            time.sleep(0.4)
            remaining = int(self.path.rsplit("/", 1)[1])
            if remaining > 0:
                self._reply(302, headers={"Location": f"/hop/{remaining - 1}"})
            else:
                self._reply(200, b"arrived")
        elif self.path == "/redirect":
            self._reply(302, headers={"Location": "/ok"})
        elif self.path == "/page":
            self._reply(200, PAGE_HTML.encode("utf-8"), {"Content-Type": "text/html"})
        else:
            self._reply(404)

    do_HEAD = _route
    do_GET = _route

    def log_message(self, format, *args):  # noqa: A002
        pass


class _StubServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self) -> None:
        super().__init__(("127.0.0.1", 0), _StubHandler)
        self.seen: List[tuple] = []

    def handle_error(self, request, client_address) -> None:
        # Clients that time out leave broken pipes behind.
        pass


@pytest.fixture
def stub_server(monkeypatch: pytest.MonkeyPatch):
    """Serve the stub routes on a random local port; yields the server."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    server = _StubServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    server.base_url = f"http://127.0.0.1:{server.server_address[1]}"
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


class FakeRedis:
    """The handful of Redis list/string commands the service uses."""

    def __init__(self) -> None:
        self.lists: Dict[str, List[str]] = {}
        self.values: Dict[str, str] = {}
        self.expiry: Dict[str, int] = {}

    def rpush(self, key: str, *values: str) -> int:
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    def lrange(self, key: str, start: int, end: int) -> List[str]:
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    def expire(self, key: str, seconds: int) -> bool:
        self.expiry[key] = seconds
        return True

    def get(self, key: str):
        return self.values.get(key)

    def ping(self) -> bool:
        return True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
