[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tsview"
version = "0.1.0"
description = "Cost tables, cost functions and plain-text rendering of template switch alignments"
requires-python = ">=3.10"
dependencies = []
keywords = ["bioinformatics", "alignment", "template switch", "sequence", "cost table"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tsview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
