"""Discrete GPIO inputs sampled into one raw bitmask."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

from .errors import InvalidArgumentError, NotInitializedError, NotReadyError

log = logging.getLogger(__name__)

MASK_WIDTH = 16
"""Number of bits available in one raw input mask."""

ENCODER_INPUT_NAMES = (
    "ENC10SW",
    "ENC10A",
    "ENC10B",
    "ENC13SW",
    "ENC13B",
    "ENC13A",
    "ENC14SW",
    "ENC14B",
    "ENC14A",
)
"""Signal names of the discrete encoder inputs, in mask bit order."""


class GpioPort(Protocol):
    """A GPIO controller able to configure and read individual pins."""

    name: str

    def is_ready(self) -> bool: ...

    def configure_input(self, pin: int) -> None: ...

    def get_raw(self, pin: int) -> int: ...


@dataclass(frozen=True)
class InputPin:
    """One named input line on a GPIO controller."""

    name: str
    port: GpioPort
    pin: int


class GPIO:
    """Reads a fixed table of GPIO inputs as raw physical levels."""

    def __init__(self, pins: Iterable[InputPin]) -> None:
        self._pins = tuple(pins)
        if len(self._pins) > MASK_WIDTH:
            raise InvalidArgumentError(
                f"at most {MASK_WIDTH} inputs fit in one mask, got {len(self._pins)}"
            )
        self._initialized = False

    @property
    def input_count(self) -> int:
        """Number of configured inputs."""
        return len(self._pins)

    def init(self) -> None:
        """Check every controller and configure every pin as an input."""
        self._initialized = False

        for entry in self._pins:
            port = entry.port
            if not port.is_ready():
                log.error(
                    "%s controller not ready on %s pin %u", entry.name, port.name, entry.pin
                )
                raise NotReadyError(
                    f"{entry.name} controller not ready on {port.name} pin {entry.pin}"
                )

            try:
                port.configure_input(entry.pin)
            except Exception as exc:
                log.error(
                    "Failed to configure %s on %s pin %u: %s",
                    entry.name,
                    port.name,
                    entry.pin,
                    exc,
                )
                raise

            log.info("%s ready on %s pin %u", entry.name, port.name, entry.pin)

        self._initialized = True

    def read_pin(self, input_index: int) -> bool:
        """Return the raw level of one input: True means high."""
        if not 0 <= input_index < len(self._pins):
            raise InvalidArgumentError(f"invalid input index {input_index}")

        if not self._initialized:
            log.error("GPIO inputs not initialized")
            raise NotInitializedError("GPIO inputs not initialized")

        entry = self._pins[input_index]
        try:
            value = entry.port.get_raw(entry.pin)
        except Exception as exc:
            log.error("Failed to read %s: %s", entry.name, exc)
            raise
        return value != 0

    def read_state(self) -> int:
        """Return a bitmask with one set bit per input that reads high."""
        mask = 0
        for index in range(len(self._pins)):
            if self.read_pin(index):
                mask |= 1 << index
        return mask

    def log_state(self) -> int:
        """Read all inputs, log the mask in hexadecimal and return it."""
        mask = self.read_state()
        log.info("GPIO raw mask: 0x%04x", mask)
        return mask

    def log_state_binary(self) -> int:
        """Read all inputs, log the mask in binary and return it."""
        mask = self.read_state()
        log.info("GPIO raw mask: 0b%s", format(mask, f"0{MASK_WIDTH}b"))
        return mask