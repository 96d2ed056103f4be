[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cognistore"
version = "0.1.0"
description = "Core of an RDF triple store: namespace-compressed triples, store limits and query variable bindings."
requires-python = ">=3.10"
dependencies = []
keywords = ["rdf", "triple-store", "semantic-web", "namespaces", "linked-data"]
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
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cognistore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
