[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "osxclean"
version = "0.1.0"
description = "macOS application uninstaller and system junk cleaner"
requires-python = ">=3.10"
keywords = ["macos", "cleaner", "uninstaller", "cache", "disk-space"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: System Administrators",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Utilities",
]
dependencies = [
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
osx = "osxclean.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["osxclean"]

[tool.pytest.ini_options]
addopts = "-ra"
