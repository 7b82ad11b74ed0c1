[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toyisa"
version = "0.1.0"
description = "Assembler and virtual machine for a small toy instruction set with 8-bit registers"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "virtual machine", "emulator", "instruction set", "rom"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
toyisa-asm = "toyisa.assembler:main"
toyisa-run = "toyisa.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["toyisa"]

[tool.pytest.ini_options]
addopts = "-ra"
