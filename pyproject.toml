[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xsmforge"
version = "0.1.0"
description = "Code generators, symbol tables and helpers for SPL and ExpL programs targeting the XSM machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "xsm", "spl", "expl", "code generation", "assembly"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xsmforge-numbers = "xsmforge.numbers:main"

[tool.hatch.build.targets.wheel]
packages = ["xsmforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
