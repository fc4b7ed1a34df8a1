[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chipeight"
version = "0.1.0"
description = "A CHIP-8 emulator with a pygame display and keyboard."
requires-python = ">=3.11"
dependencies = [
    "pygame",
]
keywords = ["chip-8", "chip8", "emulator", "interpreter", "retro", "cosmac-vip"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chipeight = "chipeight.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["chipeight"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
