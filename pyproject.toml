[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsdx"
version = "0.1.0"
description = "Building blocks for a colourful ls: YAML configuration, colour themes, option parsing, LS_COLORS colouring and grid/tree layout."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
    "wcwidth",
]
keywords = ["ls", "listing", "terminal", "colors", "ls_colors", "tree", "grid", "theme"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lsdx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
