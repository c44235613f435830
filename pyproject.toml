[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ltetrack"
version = "0.1.0"
description = "Per-RNTI modulation and MCS table tracking, uplink grant scheduling and identity reporting for passive LTE traffic analysis"
requires-python = ">=3.10"
dependencies = []
keywords = ["lte", "rnti", "mcs", "dci", "uplink", "downlink", "telephony"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Telephony",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ltetrack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
