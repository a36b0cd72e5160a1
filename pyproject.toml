[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "workstudy"
version = "1.0.0"
description = "Frame hashing, simulated OCR engines, text heuristics, capture polling and performance metrics"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ocr",
    "screen-capture",
    "perceptual-hash",
    "dhash",
    "text-extraction",
    "performance-monitoring",
    "thread-pool",
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
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["workstudy"]

[tool.hatch.build.targets.sdist]
include = ["workstudy", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
