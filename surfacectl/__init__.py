"""Control-surface logic: multiplexed inputs, encoders, buttons, LED knobs, MIDI output and preset storage."""

__version__ = "0.1.0"