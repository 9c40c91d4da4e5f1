"""
Baseline players for Cat Tetris
ValidRandom, Greedy and MaxClear agents
"""

import random
from typing import Dict, List, Optional, Tuple

from .scoring import score_for_clear

Move = Tuple[str, int, int]


def moves_with_info(session) -> List[Dict]:
    """Every valid move with its preview, for scoring heuristics"""
    moves = []
    for instance_id, x, y in session.valid_placements():
        clears = session.preview_clear(instance_id, x, y)
        piece = session.get_piece(instance_id)
        moves.append({
            "move": (instance_id, x, y),
            "lines": clears.lines,
            "score": score_for_clear(clears.lines, session.level, session.config),
            "cells": piece.num_cells(),
        })
    return moves


class ValidRandomAgent:
    """Random agent that only picks valid moves"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.name = "ValidRandom"
        self.rng = rng if rng is not None else random.Random()

    def select_action(self, session) -> Optional[Move]:
        moves = session.valid_placements()
        if not moves:
            return None
        return self.rng.choice(moves)

    def reset(self):
        pass


class GreedyAgent:
    """Agent that always picks the move with maximum immediate score"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.name = "Greedy"

    def select_action(self, session) -> Optional[Move]:
        moves = moves_with_info(session)
        if not moves:
            return None
        # max() keeps the first of equal scores, i.e. slot order then row-major anchor
        return max(moves, key=lambda m: m["score"])["move"]

    def reset(self):
        pass


class MaxClearAgent:
    """Agent that picks the move with most clears, then the biggest piece"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.name = "MaxClear"

    def select_action(self, session) -> Optional[Move]:
        moves = moves_with_info(session)
        if not moves:
            return None
        return max(moves, key=lambda m: (m["lines"], m["cells"]))["move"]

    def reset(self):
        pass


def get_agent(name: str, rng: Optional[random.Random] = None):
    """Get agent by name"""
    agents = {
        'validrandom': ValidRandomAgent,
        'greedy': GreedyAgent,
        'maxclear': MaxClearAgent,
    }
    name_lower = name.lower().replace('_', '').replace('-', '')
    if name_lower not in agents:
        raise ValueError(f"Unknown agent: {name}. Available: {list(agents.keys())}")
    return agents[name_lower](rng)
