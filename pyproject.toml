[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bec256"
version = "0.1.0"
description = "secp256k1 field arithmetic, keys and deterministic ECDSA signatures"
requires-python = ">=3.10"
dependencies = []
keywords = ["secp256k1", "ecdsa", "elliptic-curve", "rfc6979", "signature", "der"]
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
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bec256"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
