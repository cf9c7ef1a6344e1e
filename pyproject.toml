[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "exprasm"
version = "0.1.0"
description = "Compile arithmetic expressions with integer and floating-point operands to x86-64 assembly"
requires-python = ">=3.10"
keywords = ["compiler", "assembly", "x86-64", "expressions", "code generation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Programming Language :: Assembly",
    "Topic :: Software Development :: Compilers",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
exprasm = "exprasm.controller:main"

[tool.hatch.build.targets.wheel]
packages = ["exprasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
