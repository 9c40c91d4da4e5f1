"""
Cat Tetris game session

One session owns one board and one active set of pieces. The only mutating
entry points are attempt_placement() and start_new_session(); everything else
is a read-only view for renderers, players and persistence.
"""

import logging
import random
import time
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import GameConfig
from .errors import InvalidPlacement, SessionTerminated
from .grid import Board, ClearResult, EMPTY_CLEAR, apply_clears, can_place, detect_clears, preview_clear
from .pieces import PieceDefinition, PieceInstance, PieceSetGenerator, build_catalog
from .scoring import level_for_lines, score_for_clear

logger = logging.getLogger(__name__)


def has_valid_moves(board: Board, pieces: Sequence[PieceInstance]) -> bool:
    """Check if any piece fits at any anchor of the board"""
    for piece in pieces:
        for y in range(board.size):
            for x in range(board.size):
                if can_place(board, piece, x, y):
                    return True
    return False


def count_available_moves(board: Board, pieces: Sequence[PieceInstance]) -> int:
    return sum(
        1
        for piece in pieces
        for y in range(board.size)
        for x in range(board.size)
        if can_place(board, piece, x, y)
    )


@dataclass(frozen=True)
class GameOverStats:
    """Final numbers of a finished session"""
    score: int
    level: int
    lines_cleared: int
    pieces_placed: int
    game_duration_seconds: int
    game_mode: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class PlacementResult:
    instance_id: str
    x: int
    y: int
    clears: ClearResult
    score_delta: int
    refilled: bool
    game_over: bool

    @property
    def lines(self) -> int:
        return self.clears.lines


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of the session for drawing"""
    grid: List[List[int]]
    colors: List[List[Optional[str]]]
    region_size: int
    pieces: List[str]
    piece_ids: List[str]
    piece_colors: List[str]
    piece_shapes: List[List[List[int]]]
    score: int
    level: int
    lines_cleared: int
    pieces_placed: int
    running: bool
    num_valid: int

    def to_dict(self) -> Dict:
        return asdict(self)


class GameSession:
    """
    Cat Tetris game session.

    States: running (initial) and game over (terminal). A placement runs, in
    order: validate, place, drop the piece from the set, count it, clear full
    rows/columns/regions, score, refill an empty set, detect game over.
    """

    def __init__(self,
                 config: Optional[GameConfig] = None,
                 catalog: Optional[Sequence[PieceDefinition]] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.time,
                 on_game_over: Optional[Callable[[GameOverStats], None]] = None):
        self.config = (config or GameConfig()).validate()
        if catalog is None:
            catalog = build_catalog(self.config.max_cells_per_piece)
        self.generator = PieceSetGenerator(catalog, rng)
        self.clock = clock
        self.on_game_over = on_game_over

        self.board = Board(self.config.board_size, self.config.region_size)
        self.active_set: List[PieceInstance] = []
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.start_time = 0.0
        self.running = True
        self.final_stats: Optional[GameOverStats] = None

        self.start_new_session()

    # ------------------------------------------------------------------
    # Mutations

    def start_new_session(self):
        """Reset board and counters and deal a fresh set"""
        self.board.reset()
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.start_time = self.clock()
        self.running = True
        self.final_stats = None
        self.active_set = self.generator.generate_set(self.config.set_size)
        logger.info("New session, pieces %s", [p.instance_id for p in self.active_set])
        self._check_game_over()

    def attempt_placement(self, instance_id: str, x: int, y: int) -> PlacementResult:
        if not self.running:
            raise SessionTerminated()

        piece = self.get_piece(instance_id)
        if piece is None:
            raise InvalidPlacement(instance_id, x, y, reason="not in active set")
        if not can_place(self.board, piece, x, y):
            raise InvalidPlacement(instance_id, x, y)

        self.board.place(piece, x, y)
        self.active_set = [p for p in self.active_set if p.instance_id != instance_id]
        self.pieces_placed += 1

        clears = detect_clears(self.board)
        score_delta = 0
        if not clears.is_empty:
            apply_clears(self.board, clears)
            score_delta = score_for_clear(clears.lines, self.level, self.config)
            self.score += score_delta
            self.lines_cleared += clears.lines
            self.level = level_for_lines(self.lines_cleared, self.config)

        logger.debug("Placed %s at (%d, %d): %d lines, +%d",
                     instance_id, x, y, clears.lines, score_delta)

        refilled = False
        if not self.active_set:
            self.active_set = self.generator.generate_set(self.config.set_size)
            refilled = True
            logger.debug("Refilled set: %s", [p.instance_id for p in self.active_set])

        self._check_game_over()

        return PlacementResult(
            instance_id=instance_id,
            x=x,
            y=y,
            clears=clears,
            score_delta=score_delta,
            refilled=refilled,
            game_over=not self.running,
        )

    def resume(self):
        """Bring restored state back in line: refill an empty set, then detect game over"""
        if self.running and not self.active_set:
            self.active_set = self.generator.generate_set(self.config.set_size)
            logger.debug("Refilled empty set on resume: %s", [p.instance_id for p in self.active_set])
        self._check_game_over()

    def _check_game_over(self):
        if not self.running or not self.active_set:
            return
        if has_valid_moves(self.board, self.active_set):
            return

        self.running = False
        self.final_stats = self.game_over_stats()
        logger.info("Game over: score=%d level=%d lines=%d pieces=%d",
                    self.score, self.level, self.lines_cleared, self.pieces_placed)
        if self.on_game_over is not None:
            try:
                self.on_game_over(self.final_stats)
            except Exception:
                logger.exception("Game over callback failed")

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def game_over(self) -> bool:
        return not self.running

    def get_piece(self, instance_id: str) -> Optional[PieceInstance]:
        for piece in self.active_set:
            if piece.instance_id == instance_id:
                return piece
        return None

    def preview_clear(self, instance_id: str, x: int, y: int) -> ClearResult:
        """Rows/columns/regions that would clear; empty if the move is invalid"""
        piece = self.get_piece(instance_id)
        if piece is None:
            return EMPTY_CLEAR
        return preview_clear(self.board, piece, x, y)

    def duration_seconds(self) -> int:
        return max(0, int(round(self.clock() - self.start_time)))

    def game_over_stats(self) -> GameOverStats:
        if self.final_stats is not None:
            return self.final_stats
        return GameOverStats(
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            pieces_placed=self.pieces_placed,
            game_duration_seconds=self.duration_seconds(),
            game_mode=self.config.game_mode,
        )

    def has_valid_moves(self) -> bool:
        return has_valid_moves(self.board, self.active_set)

    def count_available_moves(self) -> int:
        return count_available_moves(self.board, self.active_set)

    def valid_placements(self) -> List[Tuple[str, int, int]]:
        """All (instance_id, x, y) moves that would be accepted"""
        if not self.running:
            return []
        size = self.board.size
        return [
            (piece.instance_id, x, y)
            for piece in self.active_set
            for y in range(size)
            for x in range(size)
            if can_place(self.board, piece, x, y)
        ]

    def get_valid_action_mask(self) -> np.ndarray:
        """Boolean mask indexed [slot, y, x]"""
        size = self.board.size
        mask = np.zeros((self.config.set_size, size, size), dtype=bool)
        for slot, piece in enumerate(self.active_set):
            for y in range(size):
                for x in range(size):
                    mask[slot, y, x] = can_place(self.board, piece, x, y)
        return mask

    def snapshot(self) -> SessionSnapshot:
        grid, colors = self.board.to_lists()
        return SessionSnapshot(
            grid=grid,
            colors=colors,
            region_size=self.board.region_size,
            pieces=[p.instance_id for p in self.active_set],
            piece_ids=[p.id for p in self.active_set],
            piece_colors=[p.color for p in self.active_set],
            piece_shapes=[[list(row) for row in p.shape] for p in self.active_set],
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            pieces_placed=self.pieces_placed,
            running=self.running,
            num_valid=self.count_available_moves(),
        )

    def render(self, mode: str = "ansi") -> Optional[str]:
        if mode == "ansi":
            from .render import render_ansi
            return render_ansi(self.snapshot())
        return None
