[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tsmkit"
version = "0.1.0"
description = "Block codecs for time-series storage: simple8b, booleans, integers, unsigned integers, timestamps, strings and Gorilla floats"
requires-python = ">=3.10"
dependencies = []
keywords = ["time-series", "compression", "simple8b", "gorilla", "snappy", "tsm", "codec", "varint"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tsmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
