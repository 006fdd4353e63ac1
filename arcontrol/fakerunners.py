"""A fake self-hosted runner registry served over HTTP."""

from __future__ import annotations

import json
import re
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Iterable
from urllib.parse import urlsplit

_LIST_ROUTE = re.compile(r"/(?:repos/[^/]+/[^/]+|orgs/[^/]+)/actions/runners")
_REMOVE_ROUTE = re.compile(r"/(?:repos/[^/]+/[^/]+|orgs/[^/]+)/actions/runners/(?P<id>[^/]+)")

_SERVE_HOST = "127.0.0.1"


@dataclass
class Runner:
    """A registered runner as the runners API reports it."""

    id: int | None = None
    name: str | None = None
    os: str | None = None
    status: str | None = None
    busy: bool | None = None
    labels: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the API representation, leaving out unset fields."""
        fields = {
            "id": self.id,
            "name": self.name,
            "os": self.os,
            "status": self.status,
            "busy": self.busy,
            "labels": self.labels or None,
        }
        return {key: value for key, value in fields.items() if value is not None}


class _RunnerServer:
    """A running fake API server; close it when done."""

    def __init__(self, httpd: ThreadingHTTPServer) -> None:
        self._httpd = httpd
        self._thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        self._thread.start()

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def close(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join()

    def __enter__(self) -> _RunnerServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class RunnersList:
    """A mutable list of runners, unique by name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._runners: list[Runner] = []

    @property
    def runners(self) -> list[Runner]:
        with self._lock:
            return list(self._runners)

    def add(self, runner: Runner) -> None:
        """Add ``runner`` unless one with the same name is already listed."""
        with self._lock:
            if all(r.name != runner.name for r in self._runners):
                self._runners.append(runner)

    def remove(self, runner_id: int | str) -> None:
        """Remove every runner whose id matches ``runner_id``."""
        key = str(runner_id)
        with self._lock:
            self._runners = [
                r for r in self._runners if r.id is None or str(r.id) != key
            ]

    def sync(self, names: Iterable[str]) -> None:
        """Replace the list with online runners named ``names``, ids counting from 0."""
        with self._lock:
            self._runners = []
        for index, name in enumerate(names):
            self.add(Runner(id=index, name=name, os="linux", status="online", busy=False))

    def add_offline(self, names: Iterable[str]) -> None:
        """Add offline runners named ``names``, ids counting from 1000."""
        for index, name in enumerate(names):
            self.add(
                Runner(id=1000 + index, name=name, os="linux", status="offline", busy=False)
            )

    def to_json(self) -> str:
        """Return the list as the runners API would serve it."""
        with self._lock:
            payload = {
                "total_count": len(self._runners),
                "runners": [r.to_dict() for r in self._runners],
            }
        return json.dumps(payload, separators=(",", ":"))

    def serve(self) -> _RunnerServer:
        """Start an HTTP server on a free local port for the runner routes."""
        registry = self

        class Handler(BaseHTTPRequestHandler):
            def _dispatch(self) -> None:
                path = urlsplit(self.path).path
                if _LIST_ROUTE.fullmatch(path):
                    self._reply(200, registry.to_json().encode("utf-8"))
                elif match := _REMOVE_ROUTE.fullmatch(path):
                    registry.remove(match["id"])
                    self._reply(200, b"")
                else:
                    self._reply(404, b"404 page not found\n")

            def _reply(self, status: int, body: bytes) -> None:
                self.send_response(status)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = _dispatch

            def log_message(self, format: str, *args: Any) -> None:
                pass

        return _RunnerServer(ThreadingHTTPServer((_SERVE_HOST, 0), Handler))