[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crevtools"
version = "0.1.0"
description = "Building blocks for distributed code review: safe file storage, review command options and parsing, crate statistics, a cached crates.io client and dependency graphs"
requires-python = ">=3.10"
keywords = ["code-review", "crev", "trust", "dependencies", "supply-chain", "crates-io"]
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
    "Topic :: Software Development :: Quality Assurance",
    "Topic :: Security",
]
dependencies = [
    "pyyaml",
    "semver",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["crevtools"]

[tool.hatch.build.targets.sdist]
include = [
    "crevtools",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
