[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "servingkit"
version = "0.1.0"
description = "Building blocks for model serving: error checks, link functions, record batches, feature adapters and operator kernels."
requires-python = ">=3.10"
dependencies = []
keywords = ["model serving", "inference", "link function", "sigmoid", "feature adapter", "operator kernel"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["servingkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
