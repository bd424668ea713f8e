[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cfprovision"
version = "0.1.0"
description = "Declarative management of content types, editor interfaces and entries for a headless content platform."
requires-python = ">=3.10"
dependencies = []
keywords = ["cms", "content-types", "provisioning", "infrastructure-as-code", "headless-cms"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Content Management System",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cfprovision"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
