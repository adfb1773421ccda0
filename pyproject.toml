[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asgclient"
version = "0.1.0"
description = "A small client for the AWS Auto Scaling query API with request signing and a retrying HTTP client"
requires-python = ">=3.10"
dependencies = []
keywords = ["aws", "autoscaling", "auto-scaling", "signature-v2", "query-api", "retry"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["asgclient"]

[tool.pytest.ini_options]
addopts = "-ra"
