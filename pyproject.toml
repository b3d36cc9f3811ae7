[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadui"
version = "0.1.0"
description = "An immediate-mode user interface toolkit with a quadtree glyph atlas and a batched quad renderer"
requires-python = ">=3.10"
keywords = ["ui", "immediate-mode", "gui", "layout", "font-atlas", "renderer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: User Interfaces",
]
dependencies = [
    "pillow",
    "pyglet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
quadui-demo = "quadui.app:main"

[tool.hatch.build.targets.wheel]
packages = ["quadui"]

[tool.pytest.ini_options]
addopts = "-ra"
