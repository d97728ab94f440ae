from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from typing import Any, Optional


LISTEN_HOST = "0.0.0.0"
LISTEN_PORT = 8125
BUFFER_SIZE = 65536

RETRYABLE_RECEIVE_ERRORS = (
    InterruptedError,
    BlockingIOError,
    ConnectionRefusedError,
    ConnectionResetError,
)


class TransportSetupError(RuntimeError):
    pass


@dataclass
class UdpReceiver:
    host: str = LISTEN_HOST
    port: int = LISTEN_PORT
    buffer_size: int = BUFFER_SIZE
    logger: Optional[logging.Logger] = None
    _sock: Optional[socket.socket] = field(default=None, init=False)

    def open(self) -> None:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind((self.host, self.port))
        except OSError as exc:
            sock.close()
            raise TransportSetupError(
                f"Cannot bind UDP {self.host}:{self.port}: {exc}"
            ) from exc
        self._sock = sock

    @property
    def address(self) -> tuple[str, int]:
        if self._sock is None:
            raise TransportSetupError("receiver not open")
        return self._sock.getsockname()

    def receive(self) -> bytes:
        """Block until one datagram arrives; transient failures re-issue the receive."""
        if self._sock is None:
            raise TransportSetupError("receiver not open")
        while True:
            try:
                data, _ = self._sock.recvfrom(self.buffer_size)
                return data
            except RETRYABLE_RECEIVE_ERRORS as exc:
                if self.logger is not None:
                    self.logger.debug(
                        "receive_retry",
                        extra={"error": type(exc).__name__},
                    )

    def close(self) -> None:
        if self._sock is None:
            return
        self._sock.close()
        self._sock = None

    def __enter__(self) -> "UdpReceiver":
        self.open()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
