[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "damon"
version = "0.1.0"
description = "Cluster state, watcher and view logic for a terminal dashboard of a Nomad cluster"
requires-python = ">=3.10"
dependencies = []
keywords = ["nomad", "monitoring", "dashboard", "terminal", "watcher"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["damon"]

[tool.pytest.ini_options]
addopts = "-ra"
