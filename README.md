# surfacectl

The logic behind a synthesizer control surface, written as plain Python
objects. You supply small objects that stand in for the hardware. The package
handles scanning, decoding, LED rendering, MIDI framing and preset
persistence.

## What is in the package

| Module | Contents |
| --- | --- |
| `surfacectl.gpio` | `GPIO` and `InputPin`. Reads up to 16 discrete input lines into one raw bitmask. |
| `surfacectl.mux` | `MUX`. Scans CD4067 16-channel multiplexers, one raw mask per device. |
| `surfacectl.inputs` | `InputController`. Caches one mask per multiplexer plus one GPIO mask at index `mux.mux_count`. |
| `surfacectl.encoder` | `Encoder` and `quadrature_step`. Decode quadrature encoders from two bits of a cached mask. |
| `surfacectl.button` | `Button` and `ButtonConfig`. Active-low push buttons, each with one LED channel. |
| `surfacectl.knob` | `Knob`, `KnobConfig` and `KnobUpdate`. Encoder knobs with values 0–127, a push button and an LED-bar indicator. |
| `surfacectl.leds` | `LEDSController` and `PwmController`. LEDs on a chain of PCA9685-style PWM controllers, 16 channels each. |
| `surfacectl.uart` | `UART`. Polled byte transport over a serial port. |
| `surfacectl.midi` | `MIDI`, `note_on_message`, `note_off_message` and `control_change_message`. |
| `surfacectl.presets` | `PresetSnapshot`, `ADSRState`, `FLTState`, `LFOState`, `MODState`, `OSCState` and `default_preset_snapshot`. |
| `surfacectl.preset_store` | `PresetStore` and `MemoryFlashArea`. 128 preset slots kept in an append-only flash log. |
| `surfacectl.errors` | The exception classes. |

## Installation

```
pip install surfacectl
```

To run the tests:

```
pip install "surfacectl[test]"
pytest
```

## Hardware objects you provide

Each component takes objects of the following shapes. They are described as
`typing.Protocol` classes in the modules.

- **GPIO port** (`gpio.GpioPort`):
  - a `name` attribute
  - `is_ready()`
  - `configure_input(pin)`
  - `get_raw(pin)`, which returns non-zero for a high level
- **Multiplexer** (`mux.MuxDevice`):
  - a `name` attribute
  - `is_ready()`
  - `set_channel(channel)`
  - `read_raw()`
- **PWM device** (`leds.PwmDevice`):
  - `is_ready()`
  - `set_pwm(channel, period, pulse)`

  Wrap each device as `PwmController(device, address)`.
- **Serial port** (`uart.SerialPort`):
  - `is_ready()`
  - `poll_out(byte)`
  - `poll_in()`, which returns a byte or `None`
- **Flash area** (`preset_store.FlashArea`):
  - the attributes `size`, `alignment`, `erased_value` and `ready`
  - `read(offset, length)`
  - `write(offset, data)`
  - `erase(offset, length)`

  `MemoryFlashArea` implements this protocol in memory.

`GPIO`, `MUX`, `LEDSController`, `InputController` and `UART` must have
`init()` called before use. `Encoder`, `Button`, `Knob` and `MIDI` check their
configuration when they are constructed.

- A `Button` switches its LED off when it is built.
- A `Knob` lights its starting LED when it is built.

For both, the `LEDSController` must already be initialized.

## Inputs and knobs

```python
from surfacectl.inputs import InputController
from surfacectl.knob import Knob, KnobConfig

inputs = InputController(mux, gpio)
inputs.init()

knob = Knob(
    inputs,
    KnobConfig(
        button_mux_index=0,
        button_pin=2,
        encoder_mux_index=0,
        encoder_pin_a=0,
        encoder_pin_b=1,
        first_led=0,
        led_count=8,
        encoder_step_divider=2,
    ),
    leds,
)

inputs.update()
change = knob.update()
if change.value_changed:
    print(knob.value)
```

How a knob update works:

- Each valid quadrature edge counts as one encoder step. `encoder_step_divider`
  steps move the value by one.
- The value is clamped to 0–127.
- One LED of the segment is lit at 50 % brightness. The lowest values light the
  last LED of the segment.
- `show_preview_value(value)` shows a value on the LEDs without changing the
  stored value. `restore_displayed_value()` shows the stored value again.

A button reads as pressed while its bit is 0. `Button.update()` returns `True`
when the pressed state changed.

`InputController.log_mux_changes()` logs each bit that changed since its last
call and returns the changes as `(state_index, bit, active)` tuples.

## MIDI

```python
from surfacectl.midi import MIDI, note_on_message

note_on_message(60, 100, 0)     # b"\x90\x3c\x64"

midi = MIDI(uart)               # uart must already be initialized
midi.send_cc(74, 64, channel=0)
```

Data bytes are masked to 7 bits and the channel to 4 bits. If a send fails
after some bytes have gone out, it raises `TransferError`.

## Presets

```python
from surfacectl.preset_store import MemoryFlashArea, PresetStore
from surfacectl.presets import default_preset_snapshot

flash = MemoryFlashArea(size=64 * 1024, alignment=8, erased_value=0xFF)
store = PresetStore(flash)
store.init()

snapshot = default_preset_snapshot()
snapshot.flt.knob_values[0] = 64
store.save_preset(3, snapshot)
store.save_active_preset(3)

loaded, was_saved = store.load_preset(3)
active, active_saved = store.load_active_preset()
```

`PresetSnapshot.to_bytes()` and `PresetSnapshot.from_bytes()` serialize every
value as a single byte, block by block.

Each save appends one record to the log. A record is made of:

- a magic number
- a format version
- a record type
- a slot index
- the snapshot
- a CRC-32 checksum

Records are padded to the flash write alignment.

On `init()`, the store reads records until it reaches an erased one. If it
finds an invalid record, or the log is full, the next save erases the area and
writes back one record per saved slot and the active index. Slots that were
never saved load as the default all-zero snapshot.

`save_active_preset` writes nothing when the index is unchanged.

## Errors

Every failure raises a subclass of `surfacectl.errors.ControlSurfaceError`. A
failure raised by a hardware object you supply propagates unchanged.

| Exception | Raised when |
| --- | --- |
| `NotReadyError` | a device or the flash area reports that it is not ready |
| `NotInitializedError` | a component is used before `init()` succeeded, or `MIDI` is given an uninitialized `UART` |
| `InvalidArgumentError` | an index, channel, pin or value is out of range (also a `ValueError`) |
| `TransferError` | a MIDI message was sent only in part |
| `StorageError` | the flash area cannot hold a preset record, or its alignment is unsupported |

## What the package does not do

The package includes no device drivers: it does not talk to real pins, I²C
PWM chips, serial ports or flash.

It also has no command-line program and no main loop that scans the panel and
sends MIDI on a schedule. It does not include the synth blocks (envelope,
filter, LFO, modulation, oscillator) that would map knobs and buttons onto
parameters. For those blocks, only their preset state is defined, in
`surfacectl.presets`.