"""UNIX domain socket server for lcserver.

Protocol: a stream of JSON values per connection.
- Request: {"id": 1, "method": "evaluate", "params": {"expression": "( x y )"}}
- Response: {"id": 1, "result": {"expression": "(x y)"}} or {"id": 1, "error": {"code": ..., "message": ...}}

Requests may be concatenated or separated by whitespace; every response is one JSON document followed by a newline.
Each connection is handled by its own thread. Sessions are shared between connections but carry no per-request state.
"""

import codecs
import json
import logging
import os
import re
import signal
import socket
import socketserver

from lcserver.lang.session import Session

logger = logging.getLogger(__name__)

RECV_SIZE = 4096
PARSE_ERROR = -32700

# what may be left at the error position when a valid document was cut short: a partial number, literal or escape
UNFINISHED_TOKEN = re.compile(r"[-+.eE\d]*|t(r(ue?)?)?|f(a(l(se?)?)?)?|n(u(ll?)?)?")
UNFINISHED_ESCAPE = re.compile(r"\\?u?[0-9a-fA-F]{0,4}")


class RequestHandler(socketserver.BaseRequestHandler):
    """Decodes requests from one connection until the peer hangs up or sends something that is not JSON."""

    def setup(self):
        self.decoder = json.JSONDecoder()
        self.utf8 = codecs.getincrementaldecoder("utf-8")()
        self.buf = ""

    def handle(self):
        logger.info("connection opened")
        try:
            while True:
                data = self.request.recv(RECV_SIZE)
                if not data:
                    if self.buf.strip():
                        self.reject(f"truncated request: {self.buf.strip()[:80]!r}")
                    logger.info("client closed the connection")
                    return

                try:
                    self.buf += self.utf8.decode(data)
                except UnicodeDecodeError as error:
                    self.reject(f"request is not valid UTF-8: {error}")
                    return

                if not self.drain():
                    return
        except (BrokenPipeError, ConnectionResetError):
            logger.info("client closed the connection")

    def drain(self):
        """Answers every complete request in the buffer. Returns False once the connection should be closed."""
        while True:
            self.buf = self.buf.lstrip()
            if not self.buf:
                return True

            try:
                request, end = self.decoder.raw_decode(self.buf)
            except json.JSONDecodeError as error:
                if _is_incomplete(error, self.buf):
                    return True  # wait for the rest of the document
                self.reject(f"invalid JSON: {error}")
                return False

            self.buf = self.buf[end:]
            self.respond(self.server.session.handle(request))

    def respond(self, response):
        self.request.sendall((json.dumps(response) + "\n").encode("utf-8"))

    def reject(self, msg):
        """Reports an undecodable stream. The stream cannot be resynchronised, so the connection is closed after."""
        logger.warning("failed to decode request: %s", msg)
        self.respond({"id": None, "error": {"code": PARSE_ERROR, "message": msg}})


def _is_incomplete(error, buf):
    """Whether or not a decode error could go away once more data arrives."""
    rest = buf[error.pos:]
    if error.msg.startswith("Unterminated string"):
        return True
    if error.msg.startswith("Invalid \\uXXXX escape"):
        return UNFINISHED_ESCAPE.fullmatch(rest) is not None
    return UNFINISHED_TOKEN.fullmatch(rest) is not None


class LambdaServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    """Threaded UNIX socket server. Owns the socket file: a stale file is replaced on start-up and the file is removed
    when the server is closed.
    """
    daemon_threads = True
    request_queue_size = socket.SOMAXCONN

    def __init__(self, socket_path, session=None):
        self.socket_path = socket_path
        self.session = session if session is not None else Session()

        create_socket_dir(socket_path)
        cleanup_socket(socket_path)
        super().__init__(socket_path, RequestHandler)

    def server_close(self):
        super().server_close()
        cleanup_socket(self.socket_path)

    def handle_error(self, request, client_address):
        logger.exception("unexpected error while handling a connection")


def create_socket_dir(socket_path):
    directory = os.path.dirname(socket_path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def cleanup_socket(socket_path):
    """Removes socket_path if it exists."""
    try:
        os.remove(socket_path)
    except FileNotFoundError:
        pass
    except OSError as error:
        logger.error("failed to remove socket file %s: %s", socket_path, error)


def serve(config):
    """Runs the server described by config until SIGINT or SIGTERM. Must be called from the main thread."""
    signal.signal(signal.SIGTERM, signal.default_int_handler)  # SIGTERM stops serve_forever like Ctrl-C

    with LambdaServer(config.socket_path, Session(config.reducer())) as server:
        logger.info("server started, listening on %s", config.socket_path)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("shutting down")
