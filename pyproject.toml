[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "locutils"
version = "0.1.0"
description = "GNSS location service helpers: NMEA sentence generation, SoC target detection, a FIFO list and small device and string utilities"
requires-python = ">=3.10"
dependencies = []
keywords = ["gps", "gnss", "nmea", "location", "glonass"]
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
    "Topic :: Scientific/Engineering :: GIS",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["locutils"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
