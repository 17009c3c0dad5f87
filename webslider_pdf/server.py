"""
Local static file server for the extracted deck.

The browser loads slides over http:// rather than file:// so relative
asset URLs, fetch() and ES modules behave as they do when the deck is
hosted.
"""

from __future__ import annotations

import contextlib
import http.server
import logging
import threading
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path
from typing import Iterator

log = logging.getLogger(__name__)

HOST = "127.0.0.1"

# Types slides ship that the platform mimetypes table may not know.
_EXTRA_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".mjs": "text/javascript; charset=utf-8",
    ".cjs": "text/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".map": "application/json; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
    ".yaml": "application/yaml; charset=utf-8",
    ".yml": "application/yaml; charset=utf-8",
    ".toml": "application/toml; charset=utf-8",
    ".webmanifest": "application/manifest+json; charset=utf-8",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".svg": "image/svg+xml",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".opus": "audio/opus",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".webm": "video/webm",
    ".ogv": "video/ogg",
    ".m4v": "video/mp4",
    ".wasm": "application/wasm",
    ".glb": "model/gltf-binary",
    ".gltf": "model/gltf+json",
    ".stl": "model/stl",
    ".dae": "model/vnd.collada+xml",
}


def _handler_for(root: Path) -> type[http.server.SimpleHTTPRequestHandler]:
    class _Handler(http.server.SimpleHTTPRequestHandler):
        extensions_map = {**http.server.SimpleHTTPRequestHandler.extensions_map, **_EXTRA_TYPES}

        def __init__(self, *args, **kwargs):
            super().__init__(*args, directory=str(root), **kwargs)

        def list_directory(self, path):
            # a folder without index.html is not a slide
            self.send_error(HTTPStatus.NOT_FOUND, "No index file")
            return None

        def log_message(self, format, *args):
            log.debug("http %s - %s", self.address_string(), format % args)

    return _Handler


@dataclass
class StaticServer:
    httpd: http.server.ThreadingHTTPServer
    thread: threading.Thread

    @property
    def port(self) -> int:
        return self.httpd.server_address[1]

    @property
    def base_url(self) -> str:
        return f"http://{HOST}:{self.port}"

    def url_for(self, path: str) -> str:
        return self.base_url + path

    def shutdown(self) -> None:
        self.httpd.shutdown()
        self.httpd.server_close()
        self.thread.join(timeout=5)


def start_server(root: Path, port: int = 0) -> StaticServer:
    """Start serving *root* on a background daemon thread. Port 0 = any free port."""
    httpd = http.server.ThreadingHTTPServer((HOST, port), _handler_for(Path(root)))
    httpd.daemon_threads = True
    thread = threading.Thread(target=httpd.serve_forever, name="webslider-http", daemon=True)
    thread.start()
    server = StaticServer(httpd=httpd, thread=thread)
    log.info("🌐 Serving at %s/", server.base_url)
    return server


@contextlib.contextmanager
def serve_directory(root: Path, port: int = 0) -> Iterator[StaticServer]:
    server = start_server(root, port)
    try:
        yield server
    finally:
        server.shutdown()
        log.debug("HTTP server on port %d stopped", server.port)
