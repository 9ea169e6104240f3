import logging

import pytest

from surfacectl.errors import InvalidArgumentError, NotInitializedError, NotReadyError
from surfacectl.gpio import GPIO, MASK_WIDTH, InputPin


class FakePort:
    def __init__(self, name="gpioa", levels=None, ready=True, fail_configure=False,
                 fail_read=False):
        self.name = name
        self.levels = dict(levels or {})
        self.ready = ready
        self.fail_configure = fail_configure
        self.fail_read = fail_read
        self.configured = []

    def is_ready(self):
        return self.ready

    def configure_input(self, pin):
        if self.fail_configure:
            raise OSError(5, "configure failed")
        self.configured.append(pin)

    def get_raw(self, pin):
        if self.fail_read:
            raise OSError(5, "read failed")
        return self.levels.get(pin, 0)


def make_gpio(port, count=3):
    return GPIO(InputPin(f"IN{i}", port, i) for i in range(count))


def test_input_count_matches_table():
    gpio = make_gpio(FakePort(), count=3)
    assert gpio.input_count == 3


def test_init_configures_every_pin():
    port = FakePort()
    gpio = make_gpio(port)
    gpio.init()
    assert port.configured == [0, 1, 2]


def test_read_before_init_raises():
    gpio = make_gpio(FakePort())
    with pytest.raises(NotInitializedError):
        gpio.read_pin(0)
    with pytest.raises(NotInitializedError):
        gpio.read_state()


@pytest.mark.parametrize("index", [3, -1, 100])
def test_read_pin_rejects_bad_index(index):
    gpio = make_gpio(FakePort())
    with pytest.raises(InvalidArgumentError):
        gpio.read_pin(index)


def test_read_pin_reports_levels():
    port = FakePort(levels={0: 1, 2: 1})
    gpio = make_gpio(port)
    gpio.init()
    assert [gpio.read_pin(i) for i in range(3)] == [True, False, True]


def test_read_state_bits_follow_pins():
    port = FakePort(levels={0: 1, 2: 1})
    gpio = make_gpio(port)
    gpio.init()
    mask = gpio.read_state()
    assert mask == 0b101
    for i in range(gpio.input_count):
        assert bool((mask >> i) & 1) == gpio.read_pin(i)


def test_not_ready_controller_raises_and_stays_uninitialized():
    gpio = make_gpio(FakePort(ready=False))
    with pytest.raises(NotReadyError):
        gpio.init()
    with pytest.raises(NotInitializedError):
        gpio.read_state()


def test_configure_failure_propagates():
    gpio = make_gpio(FakePort(fail_configure=True))
    with pytest.raises(OSError):
        gpio.init()
    with pytest.raises(NotInitializedError):
        gpio.read_pin(0)


def test_driver_read_error_propagates():
    port = FakePort()
    gpio = make_gpio(port)
    gpio.init()
    port.fail_read = True
    with pytest.raises(OSError):
        gpio.read_state()


def test_too_many_pins_rejected():
    port = FakePort()
    with pytest.raises(InvalidArgumentError):
        make_gpio(port, count=MASK_WIDTH + 1)


def test_log_state_hex(caplog):
    caplog.set_level(logging.INFO, logger="surfacectl.gpio")
    gpio = make_gpio(FakePort(levels={0: 1, 2: 1}))
    gpio.init()
    mask = gpio.log_state()
    assert mask == gpio.read_state()
    assert "GPIO raw mask: 0x0005" in caplog.text


def test_log_state_binary(caplog):
    caplog.set_level(logging.INFO, logger="surfacectl.gpio")
    gpio = make_gpio(FakePort(levels={0: 1, 2: 1}))
    gpio.init()
    gpio.log_state_binary()
    assert "GPIO raw mask: 0b0000000000000101" in caplog.text