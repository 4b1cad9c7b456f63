[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "simplecomputer"
version = "0.1.0"
description = "Emulator of a small educational computer with an assembler and a full-screen terminal console"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "simple computer", "assembler", "terminal", "education"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
simplecomputer = "simplecomputer.app:main"
simplecomputer-asm = "simplecomputer.assembler:main"

[tool.setuptools.packages.find]
include = ["simplecomputer*"]

[tool.pytest.ini_options]
addopts = "-ra"
