[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcrawview"
version = "0.5.0"
description = "Playback timing, frame view geometry, shader parameters and overlay data for MotionCam RAW (.mcraw) video players"
requires-python = ">=3.10"
dependencies = []
keywords = ["mcraw", "motioncam", "raw video", "playback", "bayer", "cfa", "viewer"]
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
    "Topic :: Multimedia :: Video :: Display",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mcrawview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
