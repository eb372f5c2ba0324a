[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmdvmcore"
version = "0.1.0"
description = "Signal-processing core of a multi-mode digital radio modem: FM repeater building blocks, CTCSS, D-Star and DMR framing"
requires-python = ">=3.10"
dependencies = []
keywords = ["ham radio", "d-star", "dmr", "fm", "ctcss", "repeater", "modem", "gmsk", "viterbi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mmdvmcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
