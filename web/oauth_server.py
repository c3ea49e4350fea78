"""
Local HTTP server for the one-time OAuth consent flow.
Redirects the operator to Google's consent screen and receives the
authorization code on the callback route.
"""

import threading
import http.server
import socketserver
import logging
from typing import Callable, Optional
from urllib.parse import urlsplit, parse_qs

from config import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)


SUCCESS_PAGE = """
<h3>Authentication successful!</h3>
<p>You can close this window. The script is continuing in the console.</p>
"""


class OAuthServer:
    """HTTP server exposing /authorize and /oauth2callback."""

    def __init__(
        self,
        client,
        on_authorized: Callable[[], int],
        port: int = 3000,
        host: str = ""
    ):
        self.client = client
        self.on_authorized = on_authorized
        self.host = host
        self.port = port
        self.exit_code: Optional[int] = None
        self.ready = threading.Event()
        self._stop = threading.Event()

    class _TCPServer(socketserver.TCPServer):
        allow_reuse_address = True

    class CallbackHandler(http.server.BaseHTTPRequestHandler):
        """Routes the two OAuth endpoints; everything else is a 404."""

        def do_GET(self):
            parsed = urlsplit(self.path)
            oauth = self.server.oauth

            if parsed.path == '/authorize':
                self.handle_authorize(oauth)
            elif parsed.path == '/oauth2callback':
                self.handle_callback(oauth, parse_qs(parsed.query))
            else:
                self.send_text(404, "Not Found")

        def handle_authorize(self, oauth):
            url = oauth.client.authorization_url()
            log.info(f"Redirecting user to Google for consent: {url}")
            self.send_response(302)
            self.send_header('Location', url)
            self.end_headers()

        def handle_callback(self, oauth, query: dict):
            code = query.get('code', [''])[0]
            if not code:
                self.send_text(400, "Missing code parameter.")
                return

            try:
                oauth.client.exchange_code(code)
            except Exception as e:
                log.exception(f"Error retrieving tokens: {e}")
                self.send_text(500, "Error retrieving tokens.")
                return

            self.send_text(200, SUCCESS_PAGE, content_type='text/html')
            self.wfile.flush()

            # Remediation runs after the browser has its answer
            oauth.exit_code = oauth.on_authorized()

        def send_text(self, status: int, body: str, content_type: str = 'text/plain'):
            data = body.encode('utf-8')
            self.send_response(status)
            self.send_header('Content-type', f'{content_type}; charset=utf-8')
            self.send_header('Content-Length', str(len(data)))
            self.end_headers()
            self.wfile.write(data)

        def log_message(self, format, *args):
            """Route request logs into our logger instead of stderr."""
            log.debug(format % args)

    def serve_until_done(self) -> int:
        """
        Serve requests one at a time until the callback has run the
        remediation (or stop() is called). Returns the exit code.
        """
        with self._TCPServer((self.host, self.port), self.CallbackHandler) as httpd:
            httpd.oauth = self
            httpd.timeout = 0.5
            self.port = httpd.server_address[1]
            self.ready.set()

            log.info(f"OAuth server is listening at http://localhost:{self.port}")
            log.info(f"Go to http://localhost:{self.port}/authorize to begin the OAuth flow.")

            while self.exit_code is None and not self._stop.is_set():
                httpd.handle_request()

        return self.exit_code if self.exit_code is not None else 1

    def stop(self):
        """Ask serve_until_done() to return after the current request."""
        self._stop.set()
