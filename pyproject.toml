[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "monotone"
version = "0.1.0"
description = "Building blocks of a storage engine for events and time-series data: cloud and storage settings, partition file naming, crash-recovery rules, partition locks, service requests and interval gap filling."
requires-python = ">=3.10"
dependencies = []
keywords = ["storage", "events", "time-series", "partitions", "cloud", "recovery"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["monotone"]

[tool.pytest.ini_options]
addopts = "-ra"
