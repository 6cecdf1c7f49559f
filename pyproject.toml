[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mbase"
version = "0.1.0"
description = "Threading, logging and time utilities: timestamps, dates, time zones, log formatting, rolling log files, blocking queues and thread pools."
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "threading", "thread-pool", "timezone", "tzif", "blocking-queue", "log-rotation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mbase"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
