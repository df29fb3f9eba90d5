[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sprest"
version = "0.1.0"
description = "Fluent client helpers for the SharePoint REST API and CSOM responses"
requires-python = ">=3.10"
dependencies = []
keywords = ["sharepoint", "rest", "odata", "csom", "taxonomy", "search"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sprest"]

[tool.pytest.ini_options]
addopts = "-ra"
