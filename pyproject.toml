[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arcontrol"
version = "0.1.0"
description = "Building blocks for managing self-hosted CI runners: schedules, label selectors, template hashing, logging, rate-limit tracking, a fake runners API and release signing."
requires-python = ">=3.10"
keywords = [
    "ci",
    "runners",
    "scheduling",
    "recurrence",
    "label-selector",
    "hashing",
    "rate-limit",
    "release-signing",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "python-dateutil",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
arcontrol-signrel = "arcontrol.signrel:main"

[tool.hatch.build.targets.wheel]
packages = ["arcontrol"]

[tool.hatch.build.targets.sdist]
include = [
    "arcontrol",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
