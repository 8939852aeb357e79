[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chiho"
version = "0.1.0"
description = "Hex-to-image conversion, fragmented relic storage and a multi-area transforming file store"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["filesystem", "fragments", "aes", "gzip", "rot13", "hex"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chiho-hexed = "chiho.hexed:main"

[tool.hatch.build.targets.wheel]
packages = ["chiho"]

[tool.pytest.ini_options]
addopts = "-ra"
