[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clew"
version = "0.1.0"
description = "Building blocks for log investigations: cases with timelines and evidence, reports, archives, query history and time parsing"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "logs",
    "logging",
    "investigation",
    "incident",
    "report",
    "typst",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["clew"]

[tool.pytest.ini_options]
addopts = "-ra"
