[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelbatch"
version = "0.1.0"
description = "A 2D sprite batcher with texture packing, sprite fonts, Aseprite loading and shape drawing"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["2d", "sprite", "batch", "texture-atlas", "aseprite", "spritefont", "graphics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pixelbatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
