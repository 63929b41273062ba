[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wombatlib"
version = "0.1.0"
description = "Robot control building blocks: PID control, behaviours, sensors, mechanisms, drivetrains and grid path planning"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "pid", "control", "behaviour", "drivetrain", "a-star", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wombatlib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
