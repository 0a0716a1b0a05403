[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dispatchbus"
version = "0.1.0"
description = "A small UDP publish/subscribe dispatcher with a TLV-encoded message format"
requires-python = ">=3.10"
dependencies = []
keywords = ["pubsub", "publish-subscribe", "dispatcher", "udp", "tlv", "messaging"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dispatchbus = "dispatchbus.dispatcher:main"

[tool.hatch.build.targets.wheel]
packages = ["dispatchbus"]

[tool.pytest.ini_options]
addopts = "-ra"
