[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "surfacectl"
version = "0.1.0"
description = "Control-surface logic for a synthesizer front panel: multiplexed inputs, quadrature encoders, LED knobs, MIDI output and a log-structured preset store."
requires-python = ">=3.10"
dependencies = []
keywords = ["midi", "control-surface", "encoder", "presets", "synthesizer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["surfacectl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
