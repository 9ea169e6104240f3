"""Encoder knobs with a push button and an LED bar indicator."""

from __future__ import annotations

from dataclasses import dataclass

from .encoder import Encoder, InputSource
from .errors import InvalidArgumentError
from .gpio import MASK_WIDTH
from .leds import LEDSController

KNOB_MAX_VALUE = 127
"""Largest value a knob can hold."""

KNOB_BRIGHTNESS_PERCENT = 50
"""Brightness of the LED that marks the knob value."""


@dataclass(frozen=True)
class KnobConfig:
    """Where a knob's button bit, encoder phases and LED segment live."""

    button_mux_index: int = 0
    button_pin: int = 0
    encoder_mux_index: int = 0
    encoder_pin_a: int = 0
    encoder_pin_b: int = 0
    first_led: int = 0
    led_count: int = 0
    encoder_step_divider: int = 1


@dataclass(frozen=True)
class KnobUpdate:
    """What changed during one knob update."""

    value_changed: bool = False
    switch_changed: bool = False


class Knob:
    """Couples an encoder, an active-low button and an LED segment.

    The value stays in ``[0, 127]`` and is shown by lighting one LED of the
    segment; the lowest value lights the last LED of the segment.
    """

    def __init__(self, inputs: InputSource, config: KnobConfig, leds: LEDSController) -> None:
        if (
            not 0 <= config.button_mux_index < inputs.input_count
            or not 0 <= config.button_pin < MASK_WIDTH
            or config.encoder_step_divider <= 0
            or config.first_led < 0
            or config.led_count < 0
            or config.first_led + config.led_count > leds.led_count
        ):
            raise InvalidArgumentError(f"invalid knob configuration {config}")

        self._encoder = Encoder(
            inputs, config.encoder_mux_index, config.encoder_pin_a, config.encoder_pin_b
        )
        self._inputs = inputs
        self._leds = leds
        self._button_mux_index = config.button_mux_index
        self._button_pin = config.button_pin
        self._first_led = config.first_led
        self._led_count = config.led_count
        self._divider = config.encoder_step_divider

        self._value = 0
        self._pressed = False
        self._displayed_led_index = self._led_count
        self._pending_steps = 0

        self._render_current_value()

    @property
    def pressed(self) -> bool:
        """True while the knob's push button is held."""
        return self._pressed

    @property
    def value(self) -> int:
        """Current knob value in ``[0, 127]``."""
        return self._value

    def set_value(self, value: int) -> None:
        """Replace the value, clamped to ``[0, 127]``, and redraw the indicator."""
        self._value = min(max(value, 0), KNOB_MAX_VALUE)
        self._pending_steps = 0
        self._render_current_value()

    def update(self) -> KnobUpdate:
        """Sample the button and encoder, then move the value and redraw."""
        previous_pressed = self._pressed
        previous_value = self._value

        self._encoder.update()

        mask = self._inputs.state(self._button_mux_index)
        self._pressed = ((mask >> self._button_pin) & 1) == 0
        switch_changed = self._pressed != previous_pressed

        self._pending_steps += self._encoder.delta
        delta = 0
        while self._pending_steps >= self._divider:
            self._pending_steps -= self._divider
            delta += 1
        while self._pending_steps <= -self._divider:
            self._pending_steps += self._divider
            delta -= 1

        if delta == 0:
            return KnobUpdate(value_changed=False, switch_changed=switch_changed)

        self._value = min(max(self._value + delta, 0), KNOB_MAX_VALUE)
        value_changed = self._value != previous_value
        if value_changed:
            self._render_current_value()
        return KnobUpdate(value_changed=value_changed, switch_changed=switch_changed)

    def show_preview_value(self, value: int) -> None:
        """Show a value on the LEDs without changing the stored value."""
        if self._led_count == 0:
            return
        value = min(max(value, 0), KNOB_MAX_VALUE)
        self._render_led_index(self._led_index(value))

    def restore_displayed_value(self) -> None:
        """Make the LEDs show the stored value again."""
        self._render_current_value()

    def _render_current_value(self) -> None:
        if self._led_count == 0:
            return
        self._render_led_index(self._led_index(self._value))

    def _render_led_index(self, led_index: int) -> None:
        if self._led_count == 0:
            return
        if not 0 <= led_index < self._led_count:
            raise InvalidArgumentError(f"invalid knob LED index {led_index}")
        if led_index == self._displayed_led_index:
            return

        if self._displayed_led_index < self._led_count:
            self._leds.set_channel_percent(self._first_led + self._displayed_led_index, 0)

        self._leds.set_channel_percent(self._first_led + led_index, KNOB_BRIGHTNESS_PERCENT)
        self._displayed_led_index = led_index

    def _led_index(self, value: int) -> int:
        if self._led_count == 0:
            return 0
        index = (value * self._led_count) // (KNOB_MAX_VALUE + 1)
        return (self._led_count - 1) - index