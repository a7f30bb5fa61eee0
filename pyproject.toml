[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "prreviewer"
version = "0.1.0"
description = "Pull request reviewer assignment: teams, users, least-loaded reviewer selection, merging and review statistics on SQLite storage."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "pull-request",
    "code-review",
    "reviewer-assignment",
    "teams",
    "sqlite",
]
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
    "Topic :: Software Development :: Version Control",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["prreviewer"]

[tool.hatch.build.targets.sdist]
include = [
    "prreviewer",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
