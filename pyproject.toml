[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glicol"
version = "0.14.0.dev0"
description = "Parser for the Glicol live-coding language and a graph-based audio block processor."
requires-python = ">=3.10"
keywords = ["audio", "music", "DSP", "synth", "synthesizer", "live coding", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["glicol"]

[tool.pytest.ini_options]
addopts = "-ra"
