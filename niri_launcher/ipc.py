#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Minimal client for niri's IPC socket.

niri speaks newline-delimited JSON over the Unix socket named in
$NIRI_SOCKET: the client writes one request, niri answers with one
`{"Ok": ...}` or `{"Err": "..."}` line. Each request uses its own
connection.
"""
from __future__ import annotations

import json
import socket
import logging
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .errors import CompositorError, IPCConnectionError, ProtocolError

logger = logging.getLogger(__name__)

MAX_REPLY_BYTES = 16 * 1024 * 1024


class NiriClient:
    def __init__(self, socket_path: Optional[str] = None, timeout: Optional[float] = None):
        self.socket_path = socket_path or config.niri_socket_path()
        self.timeout = timeout if timeout is not None else config.ipc_timeout()

    def _exchange(self, payload: bytes) -> bytes:
        if not self.socket_path:
            raise IPCConnectionError("NIRI_SOCKET is not set; is niri running?")

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.socket_path)
            sock.sendall(payload)
            sock.shutdown(socket.SHUT_WR)

            chunks = []
            size = 0
            while True:
                data = sock.recv(65536)
                if not data:
                    break
                chunks.append(data)
                size += len(data)
                if b"\n" in data:
                    break
                if size > MAX_REPLY_BYTES:
                    raise ProtocolError("Reply from niri is too large")
            return b"".join(chunks)
        except TimeoutError as e:
            raise IPCConnectionError(
                f"Timed out after {self.timeout}s talking to niri at {self.socket_path}"
            ) from e
        except OSError as e:
            raise IPCConnectionError(f"Failed to talk to niri at {self.socket_path}: {e}") from e
        finally:
            sock.close()

    def request(self, request: Any) -> Any:
        """Send one request and return the payload of its `Ok` reply."""
        logger.debug(f"niri request: {request!r}")
        raw = self._exchange(json.dumps(request).encode("utf-8") + b"\n")

        line = raw.split(b"\n", 1)[0].strip()
        if not line:
            raise ProtocolError("Empty reply from niri")
        try:
            reply = json.loads(line)
        except ValueError as e:
            raise ProtocolError(f"Reply from niri is not JSON: {e}") from e

        if not isinstance(reply, dict) or len(reply) != 1:
            raise ProtocolError(f"Unexpected reply shape from niri: {reply!r}")
        if "Err" in reply:
            raise CompositorError(f"niri error: {reply['Err']}")
        if "Ok" not in reply:
            raise ProtocolError(f"Unexpected reply variant from niri: {reply!r}")
        return reply["Ok"]

    def _action(self, action: Dict[str, Any]) -> None:
        response = self.request({"Action": action})
        if response != "Handled":
            raise ProtocolError(f"Unexpected response to action: {response!r}")

    def windows(self) -> List[Dict[str, Any]]:
        response = self.request("Windows")
        if not isinstance(response, dict) or not isinstance(response.get("Windows"), list):
            raise ProtocolError(f"Unexpected response to Windows request: {response!r}")
        return response["Windows"]

    def spawn(self, command: Sequence[str]) -> None:
        self._action({"Spawn": {"command": list(command)}})

    def focus_window(self, window_id: int) -> None:
        self._action({"FocusWindow": {"id": window_id}})
