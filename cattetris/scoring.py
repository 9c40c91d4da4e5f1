"""
Scoring and level progression
"""

from typing import Optional

from .config import GameConfig


def score_for_clear(lines: int, level: int, config: Optional[GameConfig] = None) -> int:
    """Points for clearing `lines` lines at `level`"""
    if config is None:
        config = GameConfig()
    return lines * config.points_per_line * level


def level_for_lines(total_lines: int, config: Optional[GameConfig] = None) -> int:
    """Level reached after `total_lines` cumulative cleared lines"""
    if config is None:
        config = GameConfig()
    return total_lines // config.lines_per_level + 1
