"""Durable state of every control-surface block, captured by one preset."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, List, Sequence

from .errors import InvalidArgumentError


def _grid(rows: int, cols: int) -> List[List[int]]:
    return [[0] * cols for _ in range(rows)]


def _check_byte(value: int, name: str) -> int:
    if not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise InvalidArgumentError(f"{name} holds {value!r}, not a byte value")
    return value


def _flat_row(values: Sequence[int], length: int, name: str) -> List[int]:
    if len(values) != length:
        raise InvalidArgumentError(f"{name} needs {length} values, got {len(values)}")
    return [_check_byte(value, name) for value in values]


def _flat_grid(grid: Sequence[Sequence[int]], rows: int, cols: int, name: str) -> List[int]:
    if len(grid) != rows:
        raise InvalidArgumentError(f"{name} needs {rows} rows, got {len(grid)}")
    return [value for row in grid for value in _flat_row(row, cols, name)]


def _take_row(values: Iterator[int], length: int) -> List[int]:
    return [next(values) for _ in range(length)]


def _take_grid(values: Iterator[int], rows: int, cols: int) -> List[List[int]]:
    return [_take_row(values, cols) for _ in range(rows)]


@dataclass
class ADSRState:
    """Envelope block: four knobs in each of three banks, plus one toggle per bank."""

    bank_count: ClassVar[int] = 3
    knob_count: ClassVar[int] = 4
    size: ClassVar[int] = bank_count * knob_count + bank_count

    knob_values: List[List[int]] = field(default_factory=lambda: _grid(3, 4))
    button3_values: List[int] = field(default_factory=lambda: [0] * 3)

    def _encode(self) -> List[int]:
        return _flat_grid(
            self.knob_values, self.bank_count, self.knob_count, "adsr.knob_values"
        ) + _flat_row(self.button3_values, self.bank_count, "adsr.button3_values")

    @classmethod
    def _decode(cls, values: Iterator[int]) -> "ADSRState":
        knobs = _take_grid(values, cls.bank_count, cls.knob_count)
        return cls(knob_values=knobs, button3_values=_take_row(values, cls.bank_count))


@dataclass
class FLTState:
    """Filter block: one selected mode button and three knobs."""

    knob_count: ClassVar[int] = 3
    size: ClassVar[int] = 1 + knob_count

    selected_button: int = 0
    knob_values: List[int] = field(default_factory=lambda: [0] * 3)

    def _encode(self) -> List[int]:
        return [_check_byte(self.selected_button, "flt.selected_button")] + _flat_row(
            self.knob_values, self.knob_count, "flt.knob_values"
        )

    @classmethod
    def _decode(cls, values: Iterator[int]) -> "FLTState":
        selected = next(values)
        return cls(selected_button=selected, knob_values=_take_row(values, cls.knob_count))


@dataclass
class LFOState:
    """LFO block: one knob and one radio selection in each of three banks."""

    bank_count: ClassVar[int] = 3
    knob_count: ClassVar[int] = 1
    size: ClassVar[int] = bank_count * knob_count + bank_count

    knob_values: List[List[int]] = field(default_factory=lambda: _grid(3, 1))
    radio_selection: List[int] = field(default_factory=lambda: [0] * 3)

    def _encode(self) -> List[int]:
        return _flat_grid(
            self.knob_values, self.bank_count, self.knob_count, "lfo.knob_values"
        ) + _flat_row(self.radio_selection, self.bank_count, "lfo.radio_selection")

    @classmethod
    def _decode(cls, values: Iterator[int]) -> "LFOState":
        knobs = _take_grid(values, cls.bank_count, cls.knob_count)
        return cls(knob_values=knobs, radio_selection=_take_row(values, cls.bank_count))


@dataclass
class MODState:
    """Modulation block: one knob per target in each selector group."""

    selector_group_count: ClassVar[int] = 6
    target_count_per_group: ClassVar[int] = 17
    bank_count: ClassVar[int] = selector_group_count * target_count_per_group
    knob_count: ClassVar[int] = 1
    size: ClassVar[int] = bank_count * knob_count + selector_group_count

    knob_values: List[List[int]] = field(default_factory=lambda: _grid(6 * 17, 1))
    selected_target_offset: List[int] = field(default_factory=lambda: [0] * 6)

    def _encode(self) -> List[int]:
        return _flat_grid(
            self.knob_values, self.bank_count, self.knob_count, "mod.knob_values"
        ) + _flat_row(
            self.selected_target_offset,
            self.selector_group_count,
            "mod.selected_target_offset",
        )

    @classmethod
    def _decode(cls, values: Iterator[int]) -> "MODState":
        knobs = _take_grid(values, cls.bank_count, cls.knob_count)
        return cls(
            knob_values=knobs,
            selected_target_offset=_take_row(values, cls.selector_group_count),
        )


@dataclass
class OSCState:
    """Oscillator block: five knobs in each of three banks."""

    bank_count: ClassVar[int] = 3
    knob_count: ClassVar[int] = 5
    size: ClassVar[int] = bank_count * knob_count

    knob_values: List[List[int]] = field(default_factory=lambda: _grid(3, 5))

    def _encode(self) -> List[int]:
        return _flat_grid(self.knob_values, self.bank_count, self.knob_count, "osc.knob_values")

    @classmethod
    def _decode(cls, values: Iterator[int]) -> "OSCState":
        return cls(knob_values=_take_grid(values, cls.bank_count, cls.knob_count))


SNAPSHOT_SIZE = ADSRState.size + FLTState.size + LFOState.size + MODState.size + OSCState.size
"""Number of bytes in one serialized snapshot."""


@dataclass
class PresetSnapshot:
    """The durable state of every block on the control surface."""

    adsr: ADSRState = field(default_factory=ADSRState)
    flt: FLTState = field(default_factory=FLTState)
    lfo: LFOState = field(default_factory=LFOState)
    mod: MODState = field(default_factory=MODState)
    osc: OSCState = field(default_factory=OSCState)

    def to_bytes(self) -> bytes:
        """Serialize every value as one byte, block by block."""
        return bytes(
            self.adsr._encode()
            + self.flt._encode()
            + self.lfo._encode()
            + self.mod._encode()
            + self.osc._encode()
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "PresetSnapshot":
        """Rebuild a snapshot from its serialized form."""
        if len(data) != SNAPSHOT_SIZE:
            raise InvalidArgumentError(
                f"a snapshot takes {SNAPSHOT_SIZE} bytes, got {len(data)}"
            )
        values = iter(bytes(data))
        return cls(
            adsr=ADSRState._decode(values),
            flt=FLTState._decode(values),
            lfo=LFOState._decode(values),
            mod=MODState._decode(values),
            osc=OSCState._decode(values),
        )


def default_preset_snapshot() -> PresetSnapshot:
    """Return a fresh all-zero snapshot."""
    return PresetSnapshot()