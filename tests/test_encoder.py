import itertools

import pytest

from surfacectl.encoder import Encoder, quadrature_step
from surfacectl.errors import InvalidArgumentError


class StubInputs:
    def __init__(self, count=3):
        self.masks = [0] * count

    @property
    def input_count(self):
        return len(self.masks)

    def state(self, state_index):
        if not 0 <= state_index < len(self.masks):
            return 0
        return self.masks[state_index]


def feed(encoder, inputs, index, values):
    deltas = []
    for value in values:
        inputs.masks[index] = value
        encoder.update()
        deltas.append(encoder.delta)
    return deltas


@pytest.mark.parametrize(
    "mux_index, pin_a, pin_b",
    [(3, 0, 1), (-1, 0, 1), (0, 16, 1), (0, 0, 16), (0, 4, 4), (0, -1, 2)],
)
def test_invalid_binding_raises(mux_index, pin_a, pin_b):
    with pytest.raises(InvalidArgumentError):
        Encoder(StubInputs(), mux_index, pin_a, pin_b)


def test_quadrature_step_table_entries():
    assert quadrature_step(0, 1) == -1
    assert quadrature_step(0, 2) == 1
    assert quadrature_step(0, 3) == 0


def test_quadrature_step_is_antisymmetric():
    for a, b in itertools.product(range(4), repeat=2):
        assert quadrature_step(a, b) == -quadrature_step(b, a)


def test_quadrature_step_same_state_is_zero():
    assert [quadrature_step(s, s) for s in range(4)] == [0, 0, 0, 0]


def test_quadrature_step_rejects_bad_state():
    with pytest.raises(InvalidArgumentError):
        quadrature_step(4, 0)


def test_first_update_only_seeds():
    inputs = StubInputs()
    encoder = Encoder(inputs, 0, 0, 1)
    inputs.masks[0] = 0b01
    encoder.update()
    assert (encoder.delta, encoder.position) == (0, 0)


def test_one_direction_cycle():
    inputs = StubInputs()
    encoder = Encoder(inputs, 0, 0, 1)
    deltas = feed(encoder, inputs, 0, [0, 1, 3, 2, 0])
    assert deltas[1:] == [-1, -1, -1, -1]
    assert encoder.position == sum(deltas)


def test_opposite_cycle_returns_to_origin():
    inputs = StubInputs()
    encoder = Encoder(inputs, 0, 0, 1)
    feed(encoder, inputs, 0, [0, 1, 3, 2, 0])
    forward = encoder.position
    deltas = feed(encoder, inputs, 0, [2, 3, 1, 0])
    assert deltas == [1, 1, 1, 1]
    assert encoder.position == 0
    assert forward == -len(deltas)


def test_delta_resets_when_state_repeats():
    inputs = StubInputs()
    encoder = Encoder(inputs, 0, 0, 1)
    deltas = feed(encoder, inputs, 0, [0, 2, 2])
    assert deltas == [0, 1, 0]
    assert encoder.position == 1


def test_illegal_jump_is_ignored():
    inputs = StubInputs()
    encoder = Encoder(inputs, 0, 0, 1)
    deltas = feed(encoder, inputs, 0, [0, 3, 0])
    assert deltas == [0, 0, 0]
    assert encoder.position == 0


def test_reads_configured_pins_and_index():
    inputs = StubInputs()
    plain = Encoder(inputs, 0, 0, 1)
    shifted = Encoder(inputs, 2, 5, 9)
    for ab in [0, 2, 3, 1, 0]:
        inputs.masks[0] = ab
        inputs.masks[2] = ((ab & 1) << 5) | (((ab >> 1) & 1) << 9) | 0b1000_0000_0001
        plain.update()
        shifted.update()
        assert shifted.delta == plain.delta
    assert shifted.position == plain.position