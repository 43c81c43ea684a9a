[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshremap"
version = "1.0.0"
description = "Map flat hexahedral meshes onto bent structured reference meshes and unfold bent meshes"
requires-python = ">=3.10"
dependencies = []
keywords = ["mesh", "finite elements", "hexahedral", "interpolation", "remapping", "structured grid"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["meshremap"]

[tool.pytest.ini_options]
addopts = "-ra"
