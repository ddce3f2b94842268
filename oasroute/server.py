"""HTTP front end that routes requests through a router and a dispatcher."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qsl

from .dispatcher import Dispatcher
from .router import Router

JSON_CONTENT_TYPE = "application/json"


def _encode(value: Any) -> bytes:
    return json.dumps(
        value, separators=(",", ":"), sort_keys=True, ensure_ascii=False
    ).encode("utf-8")


def _parse_body(body: bytes | str | None) -> Any:
    if not body:
        return None
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        return json.loads(body)
    except ValueError:
        return None


@dataclass
class AppService:
    """Turns raw HTTP requests into handler calls and JSON replies."""

    router: Router
    dispatcher: Dispatcher

    def call(self, method: str, path: str, body: bytes | str | None = None) -> tuple[int, str, bytes]:
        """Handle one request; return status code, reason phrase and JSON body."""
        route_path, _, query = path.partition("?")
        query_params = dict(parse_qsl(query, keep_blank_values=True)) if query else {}
        payload = _parse_body(body)

        route_match = self.router.route(method, route_path)
        if route_match is None:
            return 404, "Not Found", _encode(
                {"error": "Not Found", "method": method, "path": route_path}
            )

        route_match.query_params = query_params
        response = self.dispatcher.dispatch(route_match, payload)
        if response is None:
            return 500, "Internal Server Error", _encode(
                {
                    "error": "Handler failed or not registered",
                    "method": method,
                    "path": route_path,
                }
            )
        return response.status, "OK", _encode(response.body)


def make_server(service: AppService, host: str = "0.0.0.0", port: int = 8080) -> ThreadingHTTPServer:
    """Create a threading HTTP server that answers every request with ``service``."""

    class _RequestHandler(BaseHTTPRequestHandler):
        def _handle(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            raw = self.rfile.read(length) if length > 0 else b""
            status, reason, payload = service.call(self.command, self.path, raw)
            self.send_response(status, reason)
            self.send_header("Content-Type", JSON_CONTENT_TYPE)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(payload)

        do_GET = _handle
        do_POST = _handle
        do_PUT = _handle
        do_PATCH = _handle
        do_DELETE = _handle
        do_HEAD = _handle
        do_OPTIONS = _handle
        do_TRACE = _handle

    return ThreadingHTTPServer((host, port), _RequestHandler)