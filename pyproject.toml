[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "typedb"
version = "0.1.0"
description = "Conversion of database column values to Python values, and serialization of Python values for SQL drivers"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "sql", "conversion", "serialization", "postgresql", "json"]
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
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["typedb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
