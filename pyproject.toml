[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatadapter"
version = "0.1.0"
description = "Models, configuration, logging and tool-call parsing for a chat completion adapter"
requires-python = ">=3.10"
keywords = ["chat", "completion", "tool-call", "llm", "adapter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chatadapter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
