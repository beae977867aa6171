[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zktensor"
version = "0.1.0"
description = "Integer tensors, quantized neural-network operations, column layouts and proof-file formats for circuit-friendly computation"
requires-python = ">=3.10"
dependencies = []
keywords = ["tensor", "quantization", "convolution", "pooling", "zero-knowledge", "circuit"]
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
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["zktensor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
