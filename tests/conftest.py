"""
Shared fixtures. Live tests hit BASE_URL when set (see scripts/run_tests_live.py),
otherwise the demo service is started with uvicorn in a background thread.
"""

import os
import socket
import threading
import time

import pytest
import uvicorn

from httpkit.main import app


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def base_url():
    external = os.environ.get("BASE_URL")
    if external:
        yield external.rstrip("/")
        return

    port = _free_port()
    server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning"))
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    deadline = time.time() + 10
    while not server.started:
        if time.time() > deadline:
            pytest.fail("demo server did not start in time")
        time.sleep(0.05)
    yield f"http://127.0.0.1:{port}"
    server.should_exit = True
    thread.join(timeout=5)


@pytest.fixture
def closed_port_url():
    """URL on a port nothing listens on (connection refused)."""
    return f"http://127.0.0.1:{_free_port()}/"


@pytest.fixture
def stalling_server():
    """
    Factory for a raw socket server that reads one request, sends ``head`` (possibly empty)
    and then never finishes. Returns (url, received request bytes).
    """
    stop = threading.Event()
    sockets: list[socket.socket] = []

    def start(head: bytes = b""):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen()
        listener.settimeout(0.1)
        sockets.append(listener)
        received: list[bytes] = []

        def serve():
            while not stop.is_set():
                try:
                    conn, _ = listener.accept()
                except OSError:
                    continue
                sockets.append(conn)
                received.append(conn.recv(65536))
                if head:
                    conn.sendall(head)

        threading.Thread(target=serve, daemon=True).start()
        return f"http://127.0.0.1:{listener.getsockname()[1]}/", received

    yield start
    stop.set()
    for s in sockets:
        s.close()
