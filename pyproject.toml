[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "projnotes"
version = "0.1.0"
description = "Keep short notes per project, tied to files, lines and tags, from the command line or a terminal UI"
requires-python = ">=3.10"
keywords = ["notes", "cli", "tui", "project", "tags"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: News/Diary",
    "Topic :: Utilities",
]
dependencies = [
    "termcolor",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
notes = "projnotes.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["projnotes"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
