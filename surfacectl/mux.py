"""CD4067 16-channel multiplexers scanned into raw bitmasks."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from .errors import InvalidArgumentError, NotInitializedError, NotReadyError

log = logging.getLogger(__name__)

CHANNEL_COUNT = 16
"""Number of input channels on one CD4067."""


class MuxDevice(Protocol):
    """One CD4067 multiplexer with a selectable channel and a signal input."""

    name: str

    def is_ready(self) -> bool: ...

    def set_channel(self, channel: int) -> None: ...

    def read_raw(self) -> int: ...


class MUX:
    """Scans a fixed set of CD4067 multiplexers."""

    def __init__(self, devices: Iterable[MuxDevice]) -> None:
        self._devices = tuple(devices)
        self._initialized = False

    @property
    def mux_count(self) -> int:
        """Number of configured multiplexers."""
        return len(self._devices)

    def init(self) -> None:
        """Check that every multiplexer is ready, reporting each one."""
        self._initialized = False

        missing = []
        for index, device in enumerate(self._devices):
            if device.is_ready():
                log.info("CD4067 mux%u ready on %s", index, device.name)
            else:
                log.error("CD4067 mux%u not ready on %s", index, device.name)
                missing.append(index)

        if missing:
            raise NotReadyError(
                "CD4067 devices not ready: " + ", ".join(f"mux{i}" for i in missing)
            )

        self._initialized = True

    def read_state(self, mux_index: int) -> int:
        """Scan every channel of one multiplexer and return its raw mask."""
        if not 0 <= mux_index < len(self._devices):
            raise InvalidArgumentError(f"invalid mux index {mux_index}")

        if not self._initialized:
            log.error("CD4067 devices not initialized")
            raise NotInitializedError("CD4067 devices not initialized")

        device = self._devices[mux_index]
        mask = 0
        for channel in range(CHANNEL_COUNT):
            device.set_channel(channel)
            if device.read_raw() != 0:
                mask |= 1 << channel
        return mask

    def _read_all(self) -> list[int]:
        return [self.read_state(index) for index in range(len(self._devices))]

    def log_state(self) -> list[int]:
        """Scan every multiplexer, log each mask in hexadecimal and return them."""
        masks = []
        for index in range(len(self._devices)):
            mask = self.read_state(index)
            log.info("CD4067 mux%u active mask: 0x%04x", index, mask)
            masks.append(mask)
        return masks

    def log_state_binary(self) -> list[int]:
        """Scan every multiplexer, log each mask in binary and return them."""
        masks = []
        for index in range(len(self._devices)):
            mask = self.read_state(index)
            log.info(
                "CD4067 mux%u active mask: 0b%s",
                index,
                format(mask, f"0{CHANNEL_COUNT}b"),
            )
            masks.append(mask)
        return masks