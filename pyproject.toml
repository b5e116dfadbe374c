[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "towerkit"
version = "0.1.0"
description = "Media library building blocks: release choosing, episode lookup, notifications, Plex file caching and route handlers"
requires-python = ">=3.10"
dependencies = []
keywords = ["media", "plex", "releases", "library", "downloads"]
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
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["towerkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
