[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tensorgraph"
version = "0.1.0"
description = "Small 4-D tensor library with a computation graph for neural-network inference"
requires-python = ">=3.10"
dependencies = []
keywords = ["tensor", "neural network", "inference", "computation graph", "convolution"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tensorgraph-demo = "tensorgraph.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tensorgraph"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
