[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecotrack"
version = "0.1.0"
description = "Building blocks of an ECO-style visual object tracker: sample space model, filter training helpers and shortest float-to-text conversion"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["tracking", "correlation-filter", "eco", "computer-vision", "conjugate-gradient", "grisu"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Recognition",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ecotrack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
