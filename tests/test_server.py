import signal
import threading

import pytest

from userapi import create_app
from userapi.server import ApiServer


class RecordingDatabase:
    """Stands in for a Database handle; records close() calls."""

    def __init__(self, real):
        self.real = real
        self.session_factory = real.session_factory
        self.closed = False

    def ping(self):
        return self.real.ping()

    def close(self):
        self.closed = True


@pytest.fixture
def server(database):
    recording = RecordingDatabase(database)
    app = create_app(database=recording, test_config={"TESTING": True})
    return ApiServer(app, recording, host="127.0.0.1", port=0)


def test_signal_stops_server_and_closes_database(server):
    thread = threading.Thread(target=server.serve_forever)
    thread.start()

    server.handle_signal(signal.SIGTERM, None)
    thread.join(timeout=10)

    assert not thread.is_alive()
    assert server.database.closed is True


def test_stop_is_idempotent(server):
    thread = threading.Thread(target=server.serve_forever)
    thread.start()

    server.stop()
    server.stop()
    thread.join(timeout=10)

    assert not thread.is_alive()


def test_signal_handlers_are_installed_and_restored(server):
    original = signal.getsignal(signal.SIGTERM)

    server.install_signal_handlers()
    assert signal.getsignal(signal.SIGTERM) == server.handle_signal

    server.restore_signal_handlers()
    assert signal.getsignal(signal.SIGTERM) == original
    server.httpd.server_close()


def test_listens_on_ephemeral_port(server):
    assert server.port > 0
    server.httpd.server_close()


def test_main_exits_non_zero_when_database_fails(monkeypatch):
    from userapi import server as server_module
    from userapi.config import TestingConfig
    from userapi.exceptions import ConfigurationError

    def fail(*args, **kwargs):
        raise ConfigurationError("DATABASE_URL must be set")

    monkeypatch.setattr(server_module, "configure_logging", lambda *a, **kw: None)
    monkeypatch.setattr(server_module, "open_database", fail)

    assert server_module.main(TestingConfig()) == 1
