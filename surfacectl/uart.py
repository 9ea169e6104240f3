"""Byte transport over one polled serial port."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

from .errors import InvalidArgumentError, NotInitializedError, NotReadyError

log = logging.getLogger(__name__)


class SerialPort(Protocol):
    """A polled serial device."""

    def is_ready(self) -> bool: ...

    def poll_out(self, byte: int) -> None: ...

    def poll_in(self) -> Optional[int]:
        """Return one received byte, or None when nothing is waiting."""
        ...


class UART:
    """Polled byte-level access to one serial port."""

    def __init__(self, port: SerialPort) -> None:
        self._port = port
        self._initialized = False

    def init(self) -> None:
        """Check that the port is ready for use."""
        self._initialized = False
        if not self._port.is_ready():
            log.error("UART device is not ready")
            raise NotReadyError("UART device is not ready")
        self._initialized = True
        log.info("UART ready")

    def is_initialized(self) -> bool:
        """True once init has succeeded."""
        return self._initialized

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("UART not initialized")

    def write_byte(self, byte: int) -> None:
        """Send one byte."""
        self._require_initialized()
        if not 0 <= byte <= 0xFF:
            raise InvalidArgumentError(f"byte out of range: {byte}")
        self._port.poll_out(byte)

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> None:
        """Send a byte buffer, or a string encoded as UTF-8."""
        self._require_initialized()
        if isinstance(data, str):
            data = data.encode("utf-8")
        for byte in bytes(data):
            self._port.poll_out(byte)

    def read_byte(self) -> Optional[int]:
        """Return one waiting byte, or None when nothing has arrived."""
        self._require_initialized()
        return self._port.poll_in()

    def read_available(self, capacity: int) -> bytes:
        """Return every waiting byte, up to ``capacity`` of them."""
        self._require_initialized()
        if capacity < 0:
            raise InvalidArgumentError(f"invalid capacity {capacity}")

        received = bytearray()
        while len(received) < capacity:
            byte = self.read_byte()
            if byte is None:
                break
            received.append(byte)
        return bytes(received)