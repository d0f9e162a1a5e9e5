[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "laicc"
version = "0.2.0"
description = "Compiler for .laic skill contract definitions, generating TypeScript contract bindings with Arrow IPC serialization"
requires-python = ">=3.10"
dependencies = []
keywords = ["idl", "compiler", "code-generation", "arrow", "contracts", "typescript"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
laicc = "laicc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["laicc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
