[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hnmcp"
version = "0.1.0"
description = "Model Context Protocol server that exposes Hacker News stories as tools"
requires-python = ">=3.10"
keywords = ["hacker-news", "mcp", "model-context-protocol", "llm", "sse", "json-rpc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "httpx>=0.24",
    "aiohttp>=3.8",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "pytest-asyncio>=0.21",
]

[project.scripts]
hn-mcp = "hnmcp.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hnmcp"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
