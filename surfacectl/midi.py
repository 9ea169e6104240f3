"""MIDI channel messages sent over a UART transport."""

from __future__ import annotations

import logging

from .errors import NotInitializedError, TransferError
from .uart import UART

log = logging.getLogger(__name__)

STATUS_NOTE_OFF = 0x80
STATUS_NOTE_ON = 0x90
STATUS_CONTROL_CHANGE = 0xB0


def _channel_message(status: int, data1: int, data2: int, channel: int) -> bytes:
    return bytes((status | (channel & 0x0F), data1 & 0x7F, data2 & 0x7F))


def note_on_message(key: int, velocity: int, channel: int) -> bytes:
    """Build a three-byte Note On message; fields are masked to their MIDI widths."""
    return _channel_message(STATUS_NOTE_ON, key, velocity, channel)


def note_off_message(key: int, velocity: int, channel: int) -> bytes:
    """Build a three-byte Note Off message; fields are masked to their MIDI widths."""
    return _channel_message(STATUS_NOTE_OFF, key, velocity, channel)


def control_change_message(control: int, value: int, channel: int) -> bytes:
    """Build a three-byte Control Change message; fields are masked to their MIDI widths."""
    return _channel_message(STATUS_CONTROL_CHANGE, control, value, channel)


class MIDI:
    """Sends MIDI channel messages through one initialized UART."""

    def __init__(self, uart: UART, name: str = "MIDI") -> None:
        if not uart.is_initialized():
            raise NotInitializedError("UART transport is not initialized")
        self._uart = uart
        self.name = name
        log.info("MIDI ready on UART transport")

    def is_initialized(self) -> bool:
        """True while the bound transport is ready to send."""
        return self._uart.is_initialized()

    def _write(self, data: bytes) -> None:
        for sent, byte in enumerate(data):
            try:
                self._uart.write_byte(byte)
            except Exception as exc:
                if sent == 0:
                    raise
                raise TransferError(f"only {sent} of {len(data)} bytes were sent") from exc

    def send_note_on(self, key: int, velocity: int, channel: int) -> None:
        """Send one Note On message."""
        log.info(
            "NoteOn key:%u velocity:%u channel:%u", key & 0x7F, velocity & 0x7F, channel & 0x0F
        )
        self._write(note_on_message(key, velocity, channel))

    def send_note_off(self, key: int, velocity: int, channel: int) -> None:
        """Send one Note Off message."""
        log.info(
            "NoteOff key:%u velocity:%u channel:%u", key & 0x7F, velocity & 0x7F, channel & 0x0F
        )
        self._write(note_off_message(key, velocity, channel))

    def send_cc(self, control: int, value: int, channel: int) -> None:
        """Send one Control Change message."""
        log.info(
            "ControlChange control:%u value:%u channel:%u",
            control & 0x7F,
            value & 0x7F,
            channel & 0x0F,
        )
        self._write(control_change_message(control, value, channel))