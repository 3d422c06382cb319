[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memecoin"
version = "0.1.0"
description = "Domain model, MySQL persistence, services and Flask request hooks for managing meme coins"
requires-python = ">=3.10"
keywords = ["meme-coin", "ddd", "snowflake", "mysql", "sqlalchemy", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "sqlalchemy",
    "pycryptodome",
    "pyyaml",
    "python-dotenv",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["memecoin"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
