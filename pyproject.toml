[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ebikit"
version = "0.1.0"
description = "Objects and file formats for stochastic process mining: activity keys, automata, directly follows models, alignments, event logs and executions."
requires-python = ">=3.11"
dependencies = []
keywords = [
    "process mining",
    "stochastic process mining",
    "event log",
    "xes",
    "automaton",
    "alignments",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ebikit"]

[tool.pytest.ini_options]
addopts = "-ra"
