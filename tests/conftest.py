import socket
import threading

import pytest

from lpr_printer.control_file import reset_job_ids
from lpr_printer.lpd_server import LPDServer


@pytest.fixture
def lpd_server(tmp_path):
    """Factory starting an LPDServer on a free local port in a background thread."""
    running = []

    def start(**kwargs):
        server = LPDServer(host="127.0.0.1", port=0, spool_dir=str(tmp_path / "spool"), conn_timeout=5.0, **kwargs)
        thread = threading.Thread(target=server.start, daemon=True)
        thread.start()
        assert server.ready.wait(5)
        running.append((server, thread))
        return server

    yield start

    for server, thread in running:
        server.stop()
        thread.join(5)


@pytest.fixture
def fixed_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "H")
    return "H"


@pytest.fixture(autouse=True)
def fresh_job_ids():
    reset_job_ids()
    yield
    reset_job_ids()


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return port
