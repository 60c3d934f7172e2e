# tests/conftest.py
import random
import sys
from pathlib import Path

import matplotlib
import pytest

# Ajoute la racine du projet au sys.path pour importer les modules sudoku_*
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

matplotlib.use("Agg")

PUZZLE_ROWS = [
    "530070000",
    "600195000",
    "098000060",
    "800060003",
    "400803001",
    "700020006",
    "060000280",
    "000419005",
    "000080079",
]

SOLUTION_ROWS = [
    "534678912",
    "672195348",
    "198342567",
    "859761423",
    "426853791",
    "713924856",
    "961537284",
    "287419635",
    "345286179",
]


def _rows_to_grid(rows):
    return [[int(ch) for ch in row] for row in rows]


@pytest.fixture
def puzzle():
    """Puzzle classique à solution unique (30 indices)."""
    return _rows_to_grid(PUZZLE_ROWS)


@pytest.fixture
def solution():
    return _rows_to_grid(SOLUTION_ROWS)


@pytest.fixture
def rng():
    return random.Random(1234)
