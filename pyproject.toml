[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wirekit"
version = "0.1.0"
description = "Dependency injection analysis: resolves provider sets and plans injector calls"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "dependency-injection",
    "injector",
    "provider",
    "graph",
]
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
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wirekit"]

[tool.pytest.ini_options]
addopts = "-ra"
