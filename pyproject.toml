[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bmgedit"
version = "1.0.0"
description = "Terminal editor and reader/writer for BMG message files"
requires-python = ">=3.10"
dependencies = []
keywords = ["bmg", "messages", "editor", "terminal", "game-modding"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bmgedit = "bmgedit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bmgedit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
