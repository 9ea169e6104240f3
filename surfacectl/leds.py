"""LED outputs driven through a chain of PCA9685 PWM controllers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

from .errors import InvalidArgumentError, NotInitializedError, NotReadyError

log = logging.getLogger(__name__)

PCA9685_PERIOD_NS = 5_000_000
"""PWM period used for every channel: 5 ms in nanoseconds."""

CHANNELS_PER_CONTROLLER = 16
"""Number of PWM channels on one PCA9685."""


class PwmDevice(Protocol):
    """A PWM controller able to drive its channels."""

    def is_ready(self) -> bool: ...

    def set_pwm(self, channel: int, period: int, pulse: int) -> None: ...


@dataclass(frozen=True)
class PwmController:
    """One PCA9685 controller and its bus address."""

    device: PwmDevice
    address: int


class LEDSController:
    """Addresses all LEDs across the controllers as one global channel range."""

    def __init__(self, controllers: Iterable[PwmController]) -> None:
        self._controllers = tuple(controllers)
        self._initialized = False

    @property
    def led_count(self) -> int:
        """Total number of addressable LED channels."""
        return len(self._controllers) * CHANNELS_PER_CONTROLLER

    def init(self) -> None:
        """Check every controller and switch every LED off."""
        self._initialized = False
        self._report_status()

        self._initialized = True
        try:
            self.clear_all()
        except Exception:
            self._initialized = False
            raise

    def _report_status(self) -> None:
        missing = []
        for controller in self._controllers:
            if controller.device.is_ready():
                log.info("PCA9685 ready at 0x%02x", controller.address)
            else:
                log.error("PCA9685 not ready at 0x%02x", controller.address)
                missing.append(controller.address)

        if missing:
            raise NotReadyError(
                "PCA9685 not ready at " + ", ".join(f"0x{a:02x}" for a in missing)
            )

    def _require_initialized(self) -> None:
        if not self._initialized:
            log.error("LED controller not initialized")
            raise NotInitializedError("LED controller not initialized")

    def clear_all(self) -> None:
        """Turn off every channel on every controller."""
        self._require_initialized()

        for controller in self._controllers:
            for channel in range(CHANNELS_PER_CONTROLLER):
                try:
                    controller.device.set_pwm(channel, PCA9685_PERIOD_NS, 0)
                except Exception as exc:
                    log.error(
                        "Failed to clear controller 0x%02x channel %u: %s",
                        controller.address,
                        channel,
                        exc,
                    )
                    raise

    def set_channel_percent(self, channel: int, percent: int) -> None:
        """Set one LED to a brightness between 0 and 100 percent."""
        if not 0 <= percent <= 100:
            log.error("Invalid PCA9685 brightness %d%%", percent)
            raise InvalidArgumentError(f"invalid brightness {percent}%")

        self.set_channel(channel, (PCA9685_PERIOD_NS * percent) // 100)

    def set_channel(self, channel: int, pulse: int) -> None:
        """Set one LED to a raw pulse width, in PWM ticks."""
        self._require_initialized()

        if not 0 <= channel < self.led_count:
            log.error("Invalid PCA9685 channel %d", channel)
            raise InvalidArgumentError(f"invalid LED channel {channel}")

        if not 0 <= pulse <= PCA9685_PERIOD_NS:
            log.error("Invalid PCA9685 pulse %d", pulse)
            raise InvalidArgumentError(f"invalid pulse {pulse}")

        device_index, local_channel = divmod(channel, CHANNELS_PER_CONTROLLER)
        controller = self._controllers[device_index]
        try:
            controller.device.set_pwm(local_channel, PCA9685_PERIOD_NS, pulse)
        except Exception as exc:
            log.error(
                "Failed to set controller 0x%02x channel %u: %s",
                controller.address,
                local_channel,
                exc,
            )
            raise