[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parlab"
version = "0.1.0"
description = "Concurrency and parallel computing exercises: synchronisation primitives, numeric kernels, sorting, Mandelbrot tiles and an option parser"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = [
    "concurrency",
    "threads",
    "parallel",
    "mandelbrot",
    "monte-carlo",
    "sorting",
    "command-line",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
parlab-mandelbrot = "parlab.tools:mandelbrot_main"
parlab-stitch = "parlab.tools:stitch_main"

[tool.hatch.build.targets.wheel]
packages = ["parlab"]

[tool.pytest.ini_options]
addopts = "-ra"
