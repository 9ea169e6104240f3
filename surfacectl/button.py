"""Active-low push buttons with one mirrored LED each."""

from __future__ import annotations

from dataclasses import dataclass

from .encoder import InputSource
from .errors import InvalidArgumentError
from .gpio import MASK_WIDTH
from .leds import LEDSController

_LED_OFF_PERCENT = 0


@dataclass(frozen=True)
class ButtonConfig:
    """Where a button's input bit and LED live."""

    mux_index: int = 0
    pin: int = 0
    led_number: int = 0


class Button:
    """Tracks one active-low input bit and drives one LED channel."""

    def __init__(self, inputs: InputSource, config: ButtonConfig, leds: LEDSController) -> None:
        if (
            not 0 <= config.mux_index < inputs.input_count
            or not 0 <= config.pin < MASK_WIDTH
            or not 0 <= config.led_number < leds.led_count
        ):
            raise InvalidArgumentError(f"invalid button configuration {config}")

        self._inputs = inputs
        self._leds = leds
        self._mux_index = config.mux_index
        self._pin = config.pin
        self._led_number = config.led_number
        self._pressed = False

        self.set_led_val(_LED_OFF_PERCENT)

    def update(self) -> bool:
        """Sample the bound bit; return True when the pressed state changed."""
        previous = self._pressed
        mask = self._inputs.state(self._mux_index)
        self._pressed = ((mask >> self._pin) & 1) == 0
        return self._pressed != previous

    @property
    def pressed(self) -> bool:
        """True while the bound raw input bit reads 0."""
        return self._pressed

    def set_led_val(self, percent: int) -> None:
        """Drive the button's LED at a brightness between 0 and 100 percent."""
        self._leds.set_channel_percent(self._led_number, percent)