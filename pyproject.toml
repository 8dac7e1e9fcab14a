[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iqresample"
version = "0.1.0"
description = "Building blocks for an I/Q sample pipeline: logging, WAV capture metadata, SDRplay option handling, streaming loops and run summaries."
requires-python = ">=3.10"
dependencies = []
keywords = ["sdr", "iq", "wav", "riff", "sdrplay", "radio", "metadata"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["iqresample"]

[tool.hatch.build.targets.sdist]
include = ["iqresample", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
