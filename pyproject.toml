[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bouncyclient"
version = "2.0.1"
description = "Text-mode client for a Bouncy World simulation server"
requires-python = ">=3.10"
dependencies = []
keywords = ["bouncy", "simulation", "client", "text-mode", "retro", "tcp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bouncyclient = "bouncyclient.client:main"

[tool.hatch.build.targets.wheel]
packages = ["bouncyclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
