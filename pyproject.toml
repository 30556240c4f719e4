[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gopatchkit"
version = "0.0.3.dev0"
description = "Parsing tools for Go patch files: section splitting, metavariable parsing and pgo syntax augmentation"
requires-python = ">=3.10"
keywords = ["go", "patch", "refactoring", "parser", "tokenizer"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gopatchkit"]

[tool.pytest.ini_options]
addopts = "-ra"
