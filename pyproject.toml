[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stopwait"
version = "0.1.0"
description = "Discrete-event simulation of a stop-and-wait link with byte stuffing, parity checking and injected channel errors"
requires-python = ">=3.10"
dependencies = []
keywords = ["stop-and-wait", "arq", "byte-stuffing", "parity", "simulation", "discrete-event", "data-link"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
stopwait = "stopwait.network:main"

[tool.hatch.build.targets.wheel]
packages = ["stopwait"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
