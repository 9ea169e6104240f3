import pytest

from surfacectl.errors import NotInitializedError, TransferError
from surfacectl.midi import (
    MIDI,
    control_change_message,
    note_off_message,
    note_on_message,
)
from surfacectl.uart import UART


class FakePort:
    def __init__(self, fail_after=None):
        self.sent = []
        self.fail_after = fail_after

    def is_ready(self):
        return True

    def poll_out(self, byte):
        if self.fail_after is not None and len(self.sent) >= self.fail_after:
            raise OSError("line fault")
        self.sent.append(byte)

    def poll_in(self):
        return None


def make_midi(port):
    uart = UART(port)
    uart.init()
    return MIDI(uart)


def test_note_on_message_bytes():
    assert note_on_message(60, 100, 0) == bytes([0x90, 60, 100])


def test_note_off_message_bytes():
    assert note_off_message(60, 0, 3) == bytes([0x83, 60, 0])


def test_control_change_message_bytes():
    assert control_change_message(7, 64, 15) == bytes([0xBF, 7, 64])


def test_messages_mask_fields():
    assert note_on_message(0xFF, 0xFF, 0xFF) == bytes([0x9F, 0x7F, 0x7F])


def test_send_note_on_writes_to_uart():
    port = FakePort()
    midi = make_midi(port)
    midi.send_note_on(60, 100, 2)
    assert bytes(port.sent) == note_on_message(60, 100, 2)


def test_send_sequence():
    port = FakePort()
    midi = make_midi(port)
    midi.send_note_on(64, 90, 1)
    midi.send_note_off(64, 10, 1)
    midi.send_cc(74, 127, 1)
    expected = (
        note_on_message(64, 90, 1)
        + note_off_message(64, 10, 1)
        + control_change_message(74, 127, 1)
    )
    assert bytes(port.sent) == expected


def test_requires_initialized_uart():
    with pytest.raises(NotInitializedError):
        MIDI(UART(FakePort()))


def test_is_initialized_after_binding():
    assert make_midi(FakePort()).is_initialized() is True


def test_partial_write_raises_transfer_error():
    port = FakePort(fail_after=1)
    midi = make_midi(port)
    with pytest.raises(TransferError):
        midi.send_cc(1, 2, 0)
    assert len(port.sent) == 1


def test_failure_on_first_byte_propagates():
    port = FakePort(fail_after=0)
    midi = make_midi(port)
    with pytest.raises(OSError):
        midi.send_note_on(1, 2, 0)
    assert port.sent == []