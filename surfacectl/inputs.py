"""Cached raw input masks gathered from the multiplexers and the GPIO lines."""

from __future__ import annotations

import logging

from .errors import NotInitializedError
from .gpio import GPIO, MASK_WIDTH
from .mux import MUX

log = logging.getLogger(__name__)


class InputController:
    """Holds one raw mask per multiplexer plus one mask for the discrete GPIO inputs.

    The GPIO mask sits after the multiplexer masks, at index ``mux.mux_count``.
    """

    def __init__(self, mux: MUX, gpio: GPIO) -> None:
        self._mux = mux
        self._gpio = gpio
        self._initialized = False
        count = mux.mux_count + 1
        self._active = [0] * count
        self._previous = [0] * count

    @property
    def input_count(self) -> int:
        """Number of cached input masks."""
        return len(self._active)

    @property
    def _gpio_index(self) -> int:
        return self._mux.mux_count

    def init(self) -> None:
        """Initialize the multiplexers and the GPIO inputs."""
        self._initialized = False
        self._mux.init()
        self._gpio.init()
        self._previous = [1] * self.input_count
        self._initialized = True

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("input controller not initialized")

    def update(self) -> None:
        """Scan every multiplexer and the GPIO inputs into the cached masks."""
        self._require_initialized()
        for index in range(self._mux.mux_count):
            self._active[index] = self._mux.read_state(index)
        self._active[self._gpio_index] = self._gpio.read_state()

    def log_state(self) -> list[int]:
        """Log fresh multiplexer and GPIO masks in binary and return them."""
        self._require_initialized()
        masks = self._mux.log_state_binary()
        masks.append(self._gpio.log_state_binary())
        return masks

    def state(self, state_index: int) -> int:
        """Return one cached raw mask, or 0 for an invalid index."""
        if not 0 <= state_index < len(self._active):
            return 0
        return self._active[state_index]

    def log_mux_changes(self) -> list[tuple[int, int, bool]]:
        """Log and return every bit that changed since the previous call.

        Each change is ``(state_index, bit, active)``.
        """
        changes = []
        for state_index, (previous, active) in enumerate(zip(self._previous, self._active)):
            changed = previous ^ active
            if changed == 0:
                continue

            for bit in range(MASK_WIDTH):
                bit_mask = 1 << bit
                if not changed & bit_mask:
                    continue
                is_active = bool(active & bit_mask)
                log.info("MUX %u bit %u changed to %u", state_index, bit, int(is_active))
                changes.append((state_index, bit, is_active))

            self._previous[state_index] = active
        return changes