[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "rvacrm"
version = "0.1.0"
description = "Customer relationship management models, services, SQL repositories and WSGI handlers"
requires-python = ">=3.10"
dependencies = []
keywords = ["crm", "customers", "opportunities", "wsgi", "sql", "dataclasses"]
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
    "Topic :: Office/Business",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools]
packages = ["rvacrm"]

[tool.pytest.ini_options]
addopts = "-ra"
