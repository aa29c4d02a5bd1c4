[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gossip"
version = "0.1.0"
description = "Building blocks for a peer-to-peer gossip node: message types, registration bookkeeping, a framed binary struct format and test-topology tooling"
requires-python = ">=3.10"
dependencies = []
keywords = ["gossip", "p2p", "peer-to-peer", "dissemination", "ringbuffer"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gossip"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
