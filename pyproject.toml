[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iavl"
version = "0.1.0"
description = "Building blocks for a versioned AVL+ key-value store: varint encodings, an LRU cache, fast nodes, in-memory and prefixed stores, a self-flushing batch and export-stream compression"
requires-python = ">=3.10"
keywords = ["iavl", "avl", "key-value", "database", "varint", "lru", "batch"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "sortedcontainers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["iavl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
