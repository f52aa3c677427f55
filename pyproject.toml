[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "pin_intent"
version = "0.1.0"
description = "Intent data model, validation, metrics and block-builder bid matching for an intent broadcast network"
requires-python = ">=3.10"
dependencies = []
keywords = ["intent", "broadcast", "matching", "auction", "bids", "validation", "metrics"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["pin_intent*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
