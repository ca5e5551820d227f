[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "krmkit"
version = "0.1.0"
description = "Helpers for Kubernetes resource model objects: YAML-preserving edits, references, network attachment definitions and NF deployment assembly"
requires-python = ">=3.10"
dependencies = [
    "ruamel-yaml",
]
keywords = ["kubernetes", "krm", "yaml", "kpt", "network-attachment-definition", "cni"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["krmkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
