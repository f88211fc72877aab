[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pagekv"
version = "0.1.0"
description = "An in-memory B-tree and the file layer of a page-based key-value store on memory-mapped files"
requires-python = ">=3.10"
dependencies = []
keywords = ["b-tree", "key-value", "database", "mmap", "storage"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pagekv-btree-demo = "pagekv.btree_demo:main"
pagekv-mmap-create = "pagekv.mmap_tools:create_main"
pagekv-mmap-read = "pagekv.mmap_tools:read_main"
pagekv-mmap-update = "pagekv.mmap_tools:update_main"

[tool.hatch.build.targets.wheel]
packages = ["pagekv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
