"""Quadrature encoder decoding from cached input-state bits."""

from __future__ import annotations

from typing import Protocol

from .errors import InvalidArgumentError
from .gpio import MASK_WIDTH

# Index is previous AB in bits 3:2 and current AB in bits 1:0. Repeated or
# illegal changes map to 0 so contact bounce and skipped states are ignored.
_TRANSITIONS = (
    0, -1, 1, 0,
    1, 0, 0, -1,
    -1, 0, 0, 1,
    0, 1, -1, 0,
)


class InputSource(Protocol):
    """Anything that exposes cached raw input masks."""

    @property
    def input_count(self) -> int: ...

    def state(self, state_index: int) -> int: ...


def quadrature_step(previous_ab: int, current_ab: int) -> int:
    """Map one AB transition to -1, 0 or +1 quarter-steps.

    Each state packs phase A into bit 0 and phase B into bit 1.
    """
    if not (0 <= previous_ab <= 3 and 0 <= current_ab <= 3):
        raise InvalidArgumentError(
            f"AB states must be in 0..3, got {previous_ab} and {current_ab}"
        )
    return _TRANSITIONS[(previous_ab << 2) | current_ab]


class Encoder:
    """Decodes two bits of one cached input mask as a quadrature encoder."""

    def __init__(self, inputs: InputSource, mux_index: int, pin_a: int, pin_b: int) -> None:
        if (
            not 0 <= mux_index < inputs.input_count
            or not 0 <= pin_a < MASK_WIDTH
            or not 0 <= pin_b < MASK_WIDTH
            or pin_a == pin_b
        ):
            raise InvalidArgumentError(
                f"invalid encoder binding: mux {mux_index}, pins {pin_a}/{pin_b}"
            )

        self._inputs = inputs
        self._mux_index = mux_index
        self._pin_a = pin_a
        self._pin_b = pin_b
        self._seeded = False
        self._previous_ab = 0
        self._delta = 0
        self._position = 0

    def update(self) -> None:
        """Sample the bound bits and advance the decoder by one transition."""
        mask = self._inputs.state(self._mux_index)
        current_ab = ((mask >> self._pin_a) & 1) | (((mask >> self._pin_b) & 1) << 1)

        self._delta = 0

        if not self._seeded:
            # The first sample only establishes the starting state.
            self._previous_ab = current_ab
            self._seeded = True
            return

        step = quadrature_step(self._previous_ab, current_ab)
        self._previous_ab = current_ab
        self._delta = step
        self._position += step

    @property
    def delta(self) -> int:
        """Movement seen by the most recent update: -1, 0 or 1."""
        return self._delta

    @property
    def position(self) -> int:
        """Accumulated quarter-step position since construction."""
        return self._position