[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "teachos"
version = "0.1.0"
description = "A small teaching operating system modelled in Python: Sv39 page tables, ELF headers, a shell parser and classic user utilities"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "teaching",
    "risc-v",
    "page-table",
    "shell",
    "grep",
    "malloc",
    "elf",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
teachos-cat = "teachos.commands:cat_main"
teachos-echo = "teachos.commands:echo_main"
teachos-wc = "teachos.commands:wc_main"
teachos-ln = "teachos.commands:ln_main"
teachos-rm = "teachos.commands:rm_main"
teachos-mkdir = "teachos.commands:mkdir_main"
teachos-grep = "teachos.grep:main"

[tool.hatch.build.targets.wheel]
packages = ["teachos"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
