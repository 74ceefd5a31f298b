[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "peridyn"
version = "0.4.0"
description = "Peridynamic force models, bond fracture, pre-notches, contact and boundary conditions for particle simulations"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["peridynamics", "fracture", "mechanics", "particles", "contact", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["peridyn"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
