import pytest

from surfacectl.errors import InvalidArgumentError
from surfacectl.presets import (
    SNAPSHOT_SIZE,
    ADSRState,
    FLTState,
    LFOState,
    MODState,
    OSCState,
    PresetSnapshot,
    default_preset_snapshot,
)


def sample_snapshot():
    snap = default_preset_snapshot()
    snap.adsr.knob_values[0][0] = 11
    snap.adsr.knob_values[2][3] = 99
    snap.adsr.button3_values[1] = 1
    snap.flt.selected_button = 2
    snap.flt.knob_values[2] = 127
    snap.lfo.knob_values[1][0] = 64
    snap.lfo.radio_selection[2] = 3
    snap.mod.knob_values[101][0] = 77
    snap.mod.selected_target_offset[5] = 16
    snap.osc.knob_values[2][4] = 200
    return snap


def test_snapshot_size_matches_layout():
    assert SNAPSHOT_SIZE == 148
    assert len(default_preset_snapshot().to_bytes()) == SNAPSHOT_SIZE


def test_default_snapshot_is_all_zero():
    assert default_preset_snapshot().to_bytes() == bytes(SNAPSHOT_SIZE)


def test_default_snapshots_are_independent():
    first = default_preset_snapshot()
    second = default_preset_snapshot()
    first.osc.knob_values[0][0] = 5
    assert second.osc.knob_values[0][0] == 0
    assert first != second


def test_round_trip():
    snap = sample_snapshot()
    assert PresetSnapshot.from_bytes(snap.to_bytes()) == snap


def test_field_order_in_bytes():
    data = sample_snapshot().to_bytes()
    assert data[0] == 11
    assert data[ADSRState.size] == 2
    assert data[-1] == 200
    mod_start = ADSRState.size + FLTState.size + LFOState.size
    assert data[mod_start + MODState.size - 1] == 16


def test_block_sizes_sum_to_serialized_length():
    total = ADSRState.size + FLTState.size + LFOState.size + MODState.size + OSCState.size
    assert len(sample_snapshot().to_bytes()) == total


def test_mod_bank_count():
    assert MODState.bank_count == MODState.selector_group_count * MODState.target_count_per_group
    assert len(MODState().knob_values) == MODState.bank_count


def test_from_bytes_rejects_wrong_length():
    with pytest.raises(InvalidArgumentError):
        PresetSnapshot.from_bytes(bytes(SNAPSHOT_SIZE - 1))


def test_to_bytes_rejects_out_of_range_value():
    snap = default_preset_snapshot()
    snap.flt.knob_values[0] = 256
    with pytest.raises(InvalidArgumentError):
        snap.to_bytes()


def test_to_bytes_rejects_wrong_shape():
    snap = default_preset_snapshot()
    snap.adsr.knob_values[1] = [1, 2, 3]
    with pytest.raises(InvalidArgumentError):
        snap.to_bytes()


def test_to_bytes_rejects_negative_value():
    snap = default_preset_snapshot()
    snap.lfo.radio_selection[0] = -1
    with pytest.raises(InvalidArgumentError):
        snap.to_bytes()