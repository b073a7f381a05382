[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rdpvideo"
version = "0.1.0"
description = "Video interface filters, texture memory fetches and depth-buffer logic of a classic console's display processor"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulation", "video-interface", "rdp", "tmem", "z-buffer", "texel"]
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
    "Topic :: System :: Emulators",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rdpvideo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
