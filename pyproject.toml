[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bitchess"
version = "0.2.0"
description = "Bitboard chess position model with attack tables, Zobrist hashing, FEN support and chat data types"
requires-python = ">=3.10"
keywords = ["chess", "bitboard", "fen", "zobrist"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Board Games",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest>=7",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[tool.hatch.build.targets.wheel]
packages = ["bitchess"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
