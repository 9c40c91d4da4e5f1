"""
Cat Tetris - Game Configuration
"""

from dataclasses import dataclass


@dataclass
class GameConfig:
    """Configuration for the classic ruleset"""
    # Board
    board_size: int = 9               # Side of the square board
    region_size: int = 3              # Side of a clearing region

    # Pieces
    set_size: int = 3                 # Pieces offered per set
    max_cells_per_piece: int = 4      # Catalog filter

    # Scoring
    points_per_line: int = 10         # Base points per cleared line
    lines_per_level: int = 20         # Cumulative lines per level step
    game_mode: str = "classic"        # Ruleset tag for finished records

    # Saved games
    save_max_age_seconds: int = 7 * 24 * 60 * 60

    def validate(self) -> "GameConfig":
        if self.board_size <= 0 or self.region_size <= 0:
            raise ValueError("board_size and region_size must be positive")
        if self.board_size % self.region_size != 0:
            raise ValueError(
                f"region_size {self.region_size} does not divide board_size {self.board_size}")
        if self.set_size <= 0:
            raise ValueError("set_size must be positive")
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        return self
