"""
Cat Tetris - Board, placement validation and line clearing
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import numpy as np

from .errors import InvalidPlacement

Cell = Tuple[int, int]

BOARD_SIZE = 9
REGION_SIZE = 3


class Board:
    """
    Square occupancy grid with a parallel grid of color tags.

    `occupancy[y, x]` is 1 for a filled cell; `colors[y, x]` holds the color of
    the piece that filled it and is None exactly when the cell is empty.
    """

    def __init__(self, size: int = BOARD_SIZE, region_size: int = REGION_SIZE):
        if size % region_size != 0:
            raise ValueError(f"region_size {region_size} does not divide size {size}")
        self.size = size
        self.region_size = region_size
        self.occupancy = np.zeros((size, size), dtype=np.int8)
        self.colors = np.full((size, size), None, dtype=object)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_empty(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the board")
        return bool(self.occupancy[y, x] == 0)

    def place(self, piece, x: int, y: int):
        """Fill the cells of `piece` anchored at (x, y) with its color"""
        if not can_place(self, piece, x, y):
            raise InvalidPlacement(getattr(piece, 'instance_id', piece.id), x, y)
        for dx, dy in piece.cells:
            self.occupancy[y + dy, x + dx] = 1
            self.colors[y + dy, x + dx] = piece.color

    def clear_cells(self, cells: Iterable[Cell]):
        cells = list(cells)
        for x, y in cells:
            if not self.in_bounds(x, y):
                raise IndexError(f"Cell ({x}, {y}) is outside the board")
        for x, y in cells:
            self.occupancy[y, x] = 0
            self.colors[y, x] = None

    def reset(self):
        self.occupancy[:, :] = 0
        self.colors[:, :] = None

    def copy(self) -> "Board":
        board = Board.__new__(Board)
        board.size = self.size
        board.region_size = self.region_size
        board.occupancy = self.occupancy.copy()
        board.colors = self.colors.copy()
        return board

    def region_anchors(self) -> List[Cell]:
        """Top-left cells of the fixed regions, row-major"""
        step = self.region_size
        return [(rx, ry)
                for ry in range(0, self.size, step)
                for rx in range(0, self.size, step)]

    def filled_count(self) -> int:
        return int(self.occupancy.sum())

    def is_clear(self) -> bool:
        return self.filled_count() == 0

    def to_lists(self) -> Tuple[List[List[int]], List[List[Optional[str]]]]:
        return self.occupancy.tolist(), self.colors.tolist()

    @classmethod
    def from_lists(cls, occupancy: List[List[int]],
                   colors: Optional[List[List[Optional[str]]]] = None,
                   region_size: int = REGION_SIZE,
                   default_color: str = '#9CA3AF') -> "Board":
        """
        Build a board from nested lists.

        Occupied cells without a color get `default_color` so the color
        invariant holds for boards loaded from partial data.
        """
        size = len(occupancy)
        if any(len(row) != size for row in occupancy):
            raise ValueError("Board must be square")
        if colors is not None and (len(colors) != size or any(len(row) != size for row in colors)):
            raise ValueError("Colors must have the same shape as the board")
        board = cls(size, region_size)
        for y, row in enumerate(occupancy):
            for x, v in enumerate(row):
                if v:
                    color = colors[y][x] if colors is not None else None
                    board.occupancy[y, x] = 1
                    board.colors[y, x] = color or default_color
        return board

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self.size == other.size
                and self.region_size == other.region_size
                and np.array_equal(self.occupancy, other.occupancy)
                and self.colors.tolist() == other.colors.tolist())

    def __repr__(self) -> str:
        return f"Board(size={self.size}, filled={self.filled_count()})"


def can_place(board: Board, piece, x: int, y: int) -> bool:
    """Check if piece can be placed with its top-left cell at (x, y)"""
    for dx, dy in piece.cells:
        px, py = x + dx, y + dy
        if px < 0 or px >= board.size or py < 0 or py >= board.size:
            return False
        if board.occupancy[py, px] != 0:
            return False
    return True


@dataclass(frozen=True)
class ClearResult:
    """Full rows, columns and regions of a board"""
    rows: FrozenSet[int] = frozenset()
    columns: FrozenSet[int] = frozenset()
    regions: FrozenSet[Cell] = frozenset()

    @property
    def lines(self) -> int:
        """Each full row, column or region counts once"""
        return len(self.rows) + len(self.columns) + len(self.regions)

    @property
    def is_empty(self) -> bool:
        return self.lines == 0

    def cells(self, size: int = BOARD_SIZE, region_size: int = REGION_SIZE) -> Set[Cell]:
        """Union of the cells covered by the reported lines"""
        cleared: Set[Cell] = set()
        for r in self.rows:
            cleared.update((x, r) for x in range(size))
        for c in self.columns:
            cleared.update((c, y) for y in range(size))
        for rx, ry in self.regions:
            cleared.update((x, y)
                           for y in range(ry, ry + region_size)
                           for x in range(rx, rx + region_size))
        return cleared

    def to_dict(self) -> Dict:
        return {
            "rows": sorted(self.rows),
            "columns": sorted(self.columns),
            "regions": [list(a) for a in sorted(self.regions)],
        }


EMPTY_CLEAR = ClearResult()


def detect_clears(board: Board) -> ClearResult:
    grid = board.occupancy
    rows = frozenset(i for i in range(board.size) if grid[i, :].all())
    cols = frozenset(i for i in range(board.size) if grid[:, i].all())
    step = board.region_size
    regions = frozenset(
        (rx, ry) for rx, ry in board.region_anchors()
        if grid[ry:ry + step, rx:rx + step].all()
    )
    return ClearResult(rows=rows, columns=cols, regions=regions)


def apply_clears(board: Board, result: ClearResult) -> Set[Cell]:
    """Empty every cell of the reported lines; returns the cells emptied"""
    cells = result.cells(board.size, board.region_size)
    board.clear_cells(cells)
    return cells


def preview_clear(board: Board, piece, x: int, y: int) -> ClearResult:
    """What would clear if `piece` went at (x, y); never touches `board`"""
    if not can_place(board, piece, x, y):
        return EMPTY_CLEAR
    temp = board.copy()
    temp.place(piece, x, y)
    return detect_clears(temp)
