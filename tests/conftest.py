import random

import pytest

from cattetris.grid import Board
from cattetris.pieces import PieceDefinition, PieceInstance


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_piece(shape, piece_id="TEST", color="#123456", instance_id=None) -> PieceInstance:
    definition = PieceDefinition(id=piece_id, name=piece_id, shape=shape, color=color)
    return PieceInstance(definition, instance_id or f"{piece_id}-1")


def board_from_rows(*rows: str) -> Board:
    """Build a 9x9 board from strings of '#' (filled) and '.' (empty); missing rows are empty"""
    occupancy = [[0] * 9 for _ in range(9)]
    for y, row in enumerate(rows):
        for x, ch in enumerate(row.replace(" ", "")):
            occupancy[y][x] = 1 if ch == "#" else 0
    return Board.from_lists(occupancy, default_color="#AAAAAA")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def dot():
    return make_piece([[1]], piece_id="DOT1")


@pytest.fixture
def row9():
    return make_piece([[1] * 9], piece_id="ROW9")
