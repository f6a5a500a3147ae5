[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mobsim"
version = "0.1.0"
description = "Discrete-event node mobility models, ns-2 movement trace loading and circular orbit patrol simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["mobility", "simulation", "ns-2", "trace", "discrete-event", "network"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mobsim-ns2-trace = "mobsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mobsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
