[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agrifly"
version = "0.1.0"
description = "Math, telemetry, radio encoding, timing and monitoring utilities for quadcopter flight software"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "quadcopter",
    "rotation",
    "quaternion",
    "telemetry",
    "low-pass filter",
    "trajectory",
    "performance counter",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["agrifly"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
