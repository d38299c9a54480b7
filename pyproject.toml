[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wsbridge"
version = "0.1.0"
description = "Framed binary messages over WebSocket: message codec, client connections, configuration and handler dispatch"
requires-python = ">=3.10"
keywords = ["websocket", "messaging", "framing", "asyncio", "tls", "codec"]
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
    "Framework :: AsyncIO",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]
dependencies = [
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
wsbridge-codec-perf = "wsbridge.codec_perf:main"

[tool.hatch.build.targets.wheel]
packages = ["wsbridge"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
