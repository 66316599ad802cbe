[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgsqltypes"
version = "0.1.0"
description = "PostgreSQL value types: arrays, hstore, JSON, decimals, bytes, bytea, timestamps and geometric types"
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "sql", "hstore", "array", "bytea", "timestamp", "geometry", "decimal", "types"]
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
    "Topic :: Database",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pgsqltypes"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
