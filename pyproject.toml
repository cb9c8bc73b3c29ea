[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opskit"
version = "0.1.0"
description = "Toolkit for operations services: Linux metrics, logging, caching, hashing, containers and small helpers"
requires-python = ">=3.10"
keywords = [
    "operations",
    "monitoring",
    "procfs",
    "logging",
    "cache",
    "consistent-hashing",
    "utilities",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Logging",
    "Topic :: Utilities",
]
dependencies = [
    "pyyaml>=6.0",
    "psutil>=5.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
opskit = "opskit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["opskit"]

[tool.hatch.build.targets.sdist]
include = [
    "opskit",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
