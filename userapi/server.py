"""Process bootstrap.

Builds the storage handle, wires it into the Flask app and serves it with
werkzeug's threaded WSGI server until SIGTERM or SIGINT arrives.

Shutdown order:
    signal -> stop accepting connections -> close the database -> exit
"""

import logging
import signal
import sys
import threading
from typing import Optional

from flask import Flask
from werkzeug.serving import make_server

from userapi import create_app
from userapi.config import Config, settings
from userapi.database import Database, open_database
from userapi.logging_config import configure_logging

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class ApiServer:
    """Threaded WSGI server that owns the storage handle it was given."""

    def __init__(self, app: Flask, database: Database, host: str = "0.0.0.0", port: int = 3000):
        self.app = app
        self.database = database
        self.httpd = make_server(host, port, app, threaded=True)
        self._original_handlers = {}
        self._stopping = threading.Event()

    @property
    def port(self) -> int:
        return self.httpd.server_port

    def install_signal_handlers(self) -> None:
        """Route SIGTERM/SIGINT to a graceful shutdown."""
        for sig in HANDLED_SIGNALS:
            self._original_handlers[sig] = signal.signal(sig, self.handle_signal)

    def restore_signal_handlers(self) -> None:
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def handle_signal(self, signum, frame) -> None:
        logger.info(f"{signal.Signals(signum).name} received, shutting down gracefully...")
        self.stop()

    def stop(self) -> None:
        """Ask the serve loop to exit; safe to call from a signal handler."""
        if self._stopping.is_set():
            return
        self._stopping.set()
        # shutdown() blocks until serve_forever returns, so it cannot run on the serving thread
        threading.Thread(target=self.httpd.shutdown, daemon=True).start()

    def serve_forever(self) -> None:
        """Serve until stopped, then release the socket and the database."""
        logger.info(f"Server running on http://{self.httpd.host}:{self.port}")
        logger.info(f"Health check: http://{self.httpd.host}:{self.port}/health")
        try:
            self.httpd.serve_forever()
        finally:
            self.httpd.server_close()
            self.database.close()
            self.restore_signal_handlers()
            logger.info("Server stopped")


def main(config: Optional[Config] = None) -> int:
    """Start the API server; returns the process exit code."""
    config = config or settings
    configure_logging(config.LOG_LEVEL, sql_echo=config.SQL_ECHO)

    try:
        database = open_database(config.NODE_ENV, echo=config.SQL_ECHO)
    except Exception:
        logger.exception("Failed to initialize database")
        return 1
    logger.info("Database initialized successfully")

    app = create_app(database=database)
    try:
        server = ApiServer(app, database, host=config.HOST, port=config.PORT)
    except OSError:
        logger.exception(f"Could not listen on {config.HOST}:{config.PORT}")
        database.close()
        return 1
    server.install_signal_handlers()
    server.serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
