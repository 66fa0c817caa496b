import json
import os
import shutil
import socket
import tempfile
import threading
import time

import pytest


class FakeClient:
    """Stands in for NiriClient; records what would have been sent."""

    def __init__(self, windows=None, error=None):
        self._windows = windows or []
        self.error = error
        self.spawned = []
        self.focused = []

    def windows(self):
        if self.error:
            raise self.error
        return self._windows

    def spawn(self, command):
        if self.error:
            raise self.error
        self.spawned.append(list(command))

    def focus_window(self, window_id):
        if self.error:
            raise self.error
        self.focused.append(window_id)


class FakeNiri:
    """
    A Unix socket server answering each connection with the next queued
    reply. A reply of None never answers (stalled compositor).
    """

    def __init__(self, path):
        self.path = path
        self.replies = []
        self.requests = []
        self._stop = threading.Event()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(path)
        self._sock.listen(8)
        self._sock.settimeout(0.1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def reply(self, payload):
        if isinstance(payload, (bytes, type(None))):
            self.replies.append(payload)
        else:
            self.replies.append(json.dumps(payload).encode() + b"\n")

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.settimeout(2)
                data = b""
                while not data.endswith(b"\n"):
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    data += chunk
                self.requests.append(json.loads(data))
                reply = self.replies.pop(0) if self.replies else b'{"Ok":"Handled"}\n'
                if reply is None:
                    self._stop.wait(1.0)
                    continue
                conn.sendall(reply)

    def close(self):
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def niri_server():
    # AF_UNIX paths are limited to ~108 bytes; pytest's tmp_path can be longer.
    d = tempfile.mkdtemp(prefix="niri")
    server = FakeNiri(os.path.join(d, "niri.sock"))
    yield server
    server.close()
    shutil.rmtree(d, ignore_errors=True)


def write_desktop_file(directory, filename, **fields):
    lines = ["[Desktop Entry]", "Type=Application"]
    for key, value in fields.items():
        lines.append(f"{key}={value}")
    path = os.path.join(directory, filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return path


def set_mtime(path, ns):
    os.utime(path, ns=(ns, ns))


@pytest.fixture
def now():
    return int(time.time())
