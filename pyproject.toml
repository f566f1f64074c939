[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "alameda"
version = "0.1.0"
description = "Scoped logging with per-scope output, stack-trace and caller settings, plus small helper utilities"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "scopes", "log-levels", "log-rotation"]
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
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["alameda"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
