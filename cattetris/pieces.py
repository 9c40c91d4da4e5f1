"""
Cat Tetris - Piece Catalog and Set Generator
"""

import itertools
import random
from typing import List, Tuple, Dict, Optional, Sequence
from dataclasses import dataclass

Shape = Tuple[Tuple[int, ...], ...]

# id -> (name, shape, color)
PIECES_DATA = {
    # Classic tetrominoes
    'I': ('Line', [[1, 1, 1, 1]], '#06B6D4'),
    'O': ('Square', [[1, 1],
                     [1, 1]], '#FACC15'),
    'T': ('T', [[0, 1, 0],
                [1, 1, 1]], '#A855F7'),
    'S': ('S', [[0, 1, 1],
                [1, 1, 0]], '#22C55E'),
    'Z': ('Z', [[1, 1, 0],
                [0, 1, 1]], '#EF4444'),
    'J': ('J', [[1, 0, 0],
                [1, 1, 1]], '#3B82F6'),
    'L': ('L', [[0, 0, 1],
                [1, 1, 1]], '#F97316'),

    # Extra shapes
    'CROSS': ('Cross', [[0, 1, 0],
                        [1, 1, 1],
                        [0, 1, 0]], '#60A5FA'),
    'CORNER': ('Corner', [[1, 1],
                          [1, 0]], '#10B981'),
    'LINE3': ('Three', [[1, 1, 1]], '#FB923C'),
    'LINE2': ('Two', [[1, 1]], '#A78BFA'),
    'DOT': ('Dot', [[1]], '#F87171'),
    'LONG': ('Long', [[1, 1, 1, 1, 1]], '#FBBF24'),
    'STAIRS': ('Stairs', [[1, 0, 0],
                          [1, 1, 0],
                          [1, 1, 1]], '#84CC16'),
    'SMALLT': ('Small T', [[0, 1, 0],
                           [1, 1, 1]], '#2563EB'),
    'PLUS': ('Plus', [[0, 1, 0],
                      [1, 1, 1],
                      [0, 1, 0]], '#059669'),
    'L_SHAPE': ('L shape', [[1, 0],
                            [1, 0],
                            [1, 1]], '#EA580C'),
    'LINE4': ('Four', [[1, 1, 1, 1]], '#6D28D9'),
    'CORNER3': ('Long corner', [[1, 1],
                                [1, 0],
                                [1, 0]], '#DC2626'),
    'ZIGZAG': ('Zigzag', [[1, 1, 0],
                          [0, 1, 1],
                          [0, 0, 1]], '#D97706'),
    'HOOK': ('Hook', [[1, 1],
                      [1, 0],
                      [1, 1]], '#65A30D'),
    'DIAMOND': ('Diamond', [[0, 1, 0],
                            [1, 1, 1],
                            [0, 1, 0]], '#0284C7'),
    'CROSS2': ('X', [[1, 0, 1],
                     [0, 1, 0],
                     [1, 0, 1]], '#14B8A6'),
    'LONG4': ('Long four', [[1, 1, 1, 1]], '#F59E0B'),
    'BLOCK': ('Block', [[1, 1],
                        [1, 1],
                        [1, 0]], '#8B5CF6'),
}

MAX_CELLS_PER_PIECE = 4


def normalize_shape(shape: Sequence[Sequence[int]]) -> Shape:
    """Validate a 0/1 matrix and return it as nested tuples"""
    rows = tuple(tuple(int(v) for v in row) for row in shape)
    if not rows or not rows[0]:
        raise ValueError("Shape needs at least one row and one column")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("Shape rows must all have the same length")
    if any(v not in (0, 1) for row in rows for v in row):
        raise ValueError("Shape cells must be 0 or 1")
    if not any(rows[0]) or not any(rows[-1]):
        raise ValueError("Shape has an empty boundary row")
    if not any(row[0] for row in rows) or not any(row[-1] for row in rows):
        raise ValueError("Shape has an empty boundary column")
    return rows


@dataclass(frozen=True)
class PieceDefinition:
    id: str
    name: str
    shape: Shape
    color: str

    def __post_init__(self):
        object.__setattr__(self, 'shape', normalize_shape(self.shape))

    @property
    def cells(self) -> List[Tuple[int, int]]:
        """Offsets (dx, dy) of occupied cells, row by row"""
        return [(dx, dy)
                for dy, row in enumerate(self.shape)
                for dx, v in enumerate(row) if v]

    def get_size(self) -> Tuple[int, int]:
        """Width and height of the bounding box"""
        return len(self.shape[0]), len(self.shape)

    def num_cells(self) -> int:
        return sum(sum(row) for row in self.shape)


@dataclass(frozen=True)
class PieceInstance:
    """A catalog piece dealt into an active set"""
    definition: PieceDefinition
    instance_id: str

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def shape(self) -> Shape:
        return self.definition.shape

    @property
    def color(self) -> str:
        return self.definition.color

    @property
    def cells(self) -> List[Tuple[int, int]]:
        return self.definition.cells

    def num_cells(self) -> int:
        return self.definition.num_cells()

    def get_size(self) -> Tuple[int, int]:
        return self.definition.get_size()


FULL_CATALOG: Tuple[PieceDefinition, ...] = tuple(
    PieceDefinition(id=pid, name=name, shape=shape, color=color)
    for pid, (name, shape, color) in PIECES_DATA.items()
)

_BY_ID: Dict[str, PieceDefinition] = {p.id: p for p in FULL_CATALOG}


def build_catalog(max_cells: Optional[int] = MAX_CELLS_PER_PIECE) -> Tuple[PieceDefinition, ...]:
    """Catalog filtered to pieces with at most `max_cells` cells (None keeps all)"""
    if max_cells is None:
        return FULL_CATALOG
    return tuple(p for p in FULL_CATALOG if p.num_cells() <= max_cells)


# Classic ruleset
CATALOG: Tuple[PieceDefinition, ...] = build_catalog()


def get_piece_by_id(piece_id: str) -> PieceDefinition:
    """Catalog piece by id; raises ValueError for unknown ids"""
    if piece_id not in _BY_ID:
        raise ValueError(f"Unknown piece ID: {piece_id}")
    return _BY_ID[piece_id]


def get_all_piece_ids(catalog: Sequence[PieceDefinition] = CATALOG) -> List[str]:
    return [p.id for p in catalog]


class PieceSetGenerator:
    """
    Deals sets of piece instances.

    Sampling is uniform with replacement over the catalog and goes through
    `rng`, so a seeded random.Random gives a reproducible sequence. Instance ids
    are unique for the lifetime of the generator.
    """

    def __init__(self, catalog: Sequence[PieceDefinition] = CATALOG,
                 rng: Optional[random.Random] = None):
        if not catalog:
            raise ValueError("Catalog is empty")
        self.catalog = tuple(catalog)
        self.rng = rng if rng is not None else random.Random()
        self._serial = itertools.count(1)

    def _new_id(self, piece_id: str) -> str:
        return f"{piece_id}-{next(self._serial)}"

    def generate_set(self, count: int = 3) -> List[PieceInstance]:
        """Draw `count` pieces uniformly with replacement"""
        definitions = self.rng.choices(self.catalog, k=count)
        return [PieceInstance(d, self._new_id(d.id)) for d in definitions]

    def instance_for(self, piece_id: str, instance_id: Optional[str] = None) -> PieceInstance:
        """Instance of a known piece, e.g. when restoring a saved set"""
        for definition in self.catalog:
            if definition.id == piece_id:
                break
        else:
            definition = get_piece_by_id(piece_id)
        return PieceInstance(definition, instance_id or self._new_id(piece_id))


def generate_set(catalog: Sequence[PieceDefinition] = CATALOG, count: int = 3,
                 rng: Optional[random.Random] = None) -> List[PieceInstance]:
    """One-off set from a throwaway generator"""
    return PieceSetGenerator(catalog, rng).generate_set(count)
