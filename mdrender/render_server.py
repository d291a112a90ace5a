"""
Render Server
Small HTTP service wrapping the render pipeline for callers that are not
Python, e.g. a content store or page builder written in another language

    POST /render  {"content": "...", "config": {"defaultHeight": "320"}}
    GET  /stats
"""

import json
import logging
import sys
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from threading import Lock
from typing import Optional

from mdrender.config import RenderConfig
from mdrender.errors import ConfigError
from mdrender.pipeline import RenderPipeline

DEFAULT_LOG_FILE = Path.home() / '.cache' / 'mdrender' / 'mdrender.log'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def setup_logging(log_file: Optional[Path] = DEFAULT_LOG_FILE, level=logging.DEBUG):
    """Log to a file and to stderr"""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


class RenderServer:
    def __init__(self, port=8765, config: Optional[RenderConfig] = None,
                 pipeline: Optional[RenderPipeline] = None):
        self.port = port
        self.config = config or RenderConfig()
        self.pipeline = pipeline or RenderPipeline()

        # Request threads update these concurrently
        self._stats_lock = Lock()
        self._render_count = 0
        self._total_render_time = 0.0

    def render(self, content: str, config: Optional[RenderConfig] = None) -> str:
        """Render markdown with timing; errors propagate to the caller"""
        start_time = time.time()
        html = self.pipeline.render(content, config or self.config)
        render_time = time.time() - start_time

        with self._stats_lock:
            self._render_count += 1
            self._total_render_time += render_time
        logger.info(f"Rendered {len(content)} bytes in {render_time:.3f}s ({len(html)} bytes HTML)")
        return html

    def get_stats(self):
        with self._stats_lock:
            count = self._render_count
            total = self._total_render_time
        return {
            'renders': count,
            'avg_render_time_ms': (total / count * 1000) if count else 0,
            'backend': self.pipeline.adapter.backend,
        }


class RequestHandler(BaseHTTPRequestHandler):
    server_instance: Optional[RenderServer] = None

    def log_message(self, format, *args):
        logger.debug(f"HTTP {format % args}")

    def send_json(self, status, payload):
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        if self.path == '/stats':
            self.send_json(200, self.server_instance.get_stats())
        else:
            self.send_json(404, {'status': 'error', 'message': f"Not found: {self.path}"})

    def do_POST(self):
        if self.path != '/render':
            self.send_json(404, {'status': 'error', 'message': f"Not found: {self.path}"})
            return

        try:
            content_length = int(self.headers.get('Content-Length', 0))
            data = json.loads(self.rfile.read(content_length).decode() or '{}')
            if not isinstance(data, dict):
                raise ValueError("request body must be a JSON object")
            content = data.get('content', '')
            if not isinstance(content, str):
                raise ValueError("content must be a string")
            config = RenderConfig.from_mapping(data.get('config'))
        except (ConfigError, ValueError) as e:
            # json.JSONDecodeError is a ValueError too
            logger.warning(f"Bad render request: {e}")
            self.send_json(400, {'status': 'error', 'message': str(e)})
            return

        try:
            html = self.server_instance.render(content, config)
        except Exception as e:
            logger.error(f"Error rendering markdown: {e}", exc_info=True)
            self.send_json(500, {'status': 'error', 'message': str(e)})
            return
        self.send_json(200, {'html': html})


def make_http_server(server: RenderServer, host='localhost') -> ThreadingHTTPServer:
    RequestHandler.server_instance = server
    return ThreadingHTTPServer((host, server.port), RequestHandler)


def run(server: RenderServer, host='localhost'):
    httpd = make_http_server(server, host)
    logger.info(f"Render server started on http://{host}:{httpd.server_address[1]}")
    print(f"Server started on http://{host}:{httpd.server_address[1]}", flush=True)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        print("\nServer stopped", flush=True)
    finally:
        httpd.server_close()
