[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitmodule"
version = "0.1.0"
description = "Drive the git binary from Python: run commands, manage repositories, parse diffs, write hooks and create archives."
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "version control", "diff", "repository", "hooks"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitmodule"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
