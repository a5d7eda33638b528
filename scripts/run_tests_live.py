#!/usr/bin/env python3
"""Run tests/test_client.py against the demo service in a uvicorn subprocess."""

import os
import subprocess
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from httpkit.client import get
from httpkit.errors import TransportError

BASE_URL = "http://127.0.0.1:8765"


def wait_for_server(timeout=10):
    for _ in range(timeout):
        try:
            get(f"{BASE_URL}/health", timeout=1)
            return True
        except TransportError:
            pass
        time.sleep(1)
    return False


def main():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    os.chdir(root)
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "httpkit.main:app", "--host", "127.0.0.1", "--port", "8765"],
        cwd=root,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        if not wait_for_server():
            print("Server did not start in time.")
            sys.exit(1)
        env = os.environ.copy()
        env["BASE_URL"] = BASE_URL
        result = subprocess.run(
            [sys.executable, "-m", "pytest", "tests/test_client.py", "-v"],
            env=env,
        )
        sys.exit(result.returncode)
    finally:
        proc.terminate()
        proc.wait(timeout=5)


if __name__ == "__main__":
    main()
