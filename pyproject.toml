[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cgraph"
version = "0.1.0"
description = "Concurrency and data-structure utilities: a work-stealing thread pool, task groups, queues, a timer, an LRU cache, a trie, vector distances and random vector generation."
requires-python = ">=3.10"
dependencies = []
keywords = ["thread pool", "work stealing", "lru", "trie", "timer", "distance", "concurrency"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cgraph-demo = "cgraph.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["cgraph"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
