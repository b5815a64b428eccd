[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "amphora"
version = "0.1.0"
description = "A small 2D game engine built on pygame: scenes, sprites, tilemaps, text, sound, input mapping and persistent save data."
requires-python = ">=3.10"
keywords = ["game", "engine", "2d", "pygame", "sprites", "tilemap", "platformer"]
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
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: pygame",
]
dependencies = [
    "pygame",
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
amphora = "amphora.engine:main"

[tool.hatch.build.targets.wheel]
packages = ["amphora"]

[tool.pytest.ini_options]
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
