"""
Saved game state and local best score

A running game can be written to disk after every move and picked up later.
Saves older than GameConfig.save_max_age_seconds are ignored.
"""

import json
import logging
from pathlib import Path
from typing import Dict

from .grid import Board
from .records import NumpyEncoder
from .session import GameSession

logger = logging.getLogger(__name__)

SAVE_VERSION = 1


def session_to_dict(session: GameSession) -> Dict:
    grid, colors = session.board.to_lists()
    return {
        "version": SAVE_VERSION,
        "board": grid,
        "board_colors": colors,
        "score": session.score,
        "level": session.level,
        "lines": session.lines_cleared,
        "pieces_placed": session.pieces_placed,
        "available_pieces": [
            {"id": p.id, "instance_id": p.instance_id} for p in session.active_set
        ],
        "running": session.running,
        "game_start_time": session.start_time,
        "timestamp": session.clock(),
    }


def save_game_state(session: GameSession, path: str):
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, 'w') as f:
        json.dump(session_to_dict(session), f, cls=NumpyEncoder)
    logger.info("Game saved to %s", out)


def load_game_state(session: GameSession, path: str) -> bool:
    """
    Restore a saved game into `session`.

    Returns False and leaves the session alone when the file is missing,
    unreadable, stale or does not fit the session's board.
    """
    src = Path(path)
    if not src.exists():
        return False

    try:
        with open(src, 'r') as f:
            state = json.load(f)
        if session.clock() - state["timestamp"] > session.config.save_max_age_seconds:
            logger.warning("Saved game %s is too old, starting fresh", src)
            return False
        board = Board.from_lists(state["board"], state.get("board_colors"),
                                 region_size=session.config.region_size)
        if board.size != session.config.board_size:
            logger.warning("Saved game %s has board size %d, expected %d",
                           src, board.size, session.config.board_size)
            return False
        pieces = [session.generator.instance_for(p["id"], p["instance_id"])
                  for p in state["available_pieces"]]
        score = int(state["score"])
        level = int(state["level"])
        lines = int(state["lines"])
        pieces_placed = int(state.get("pieces_placed", 0))
        start_time = float(state.get("game_start_time", session.clock()))
    except (OSError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning("Could not load saved game %s: %s", src, e)
        return False

    session.board = board
    session.active_set = pieces
    session.score = score
    session.level = level
    session.lines_cleared = lines
    session.pieces_placed = pieces_placed
    session.start_time = start_time
    session.running = bool(state.get("running", True))
    session.final_stats = None if session.running else session.game_over_stats()
    session.resume()
    logger.info("Game loaded from %s", src)
    return True


def clear_game_state(path: str):
    src = Path(path)
    if src.exists():
        src.unlink()
        logger.info("Saved game %s removed", src)


def load_best_score(path: str) -> int:
    src = Path(path)
    if not src.exists():
        return 0
    try:
        return int(src.read_text().strip() or 0)
    except (OSError, ValueError) as e:
        logger.warning("Could not read best score %s: %s", src, e)
        return 0


def save_best_score(path: str, score: int) -> bool:
    """Store `score` if it beats the saved best; True on a new record"""
    if score <= load_best_score(path):
        return False
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(str(score))
    return True
