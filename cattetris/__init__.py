from .config import GameConfig
from .errors import CatTetrisError, InvalidPlacement, PersistenceFailure, SessionTerminated
from .grid import Board, ClearResult, apply_clears, can_place, detect_clears, preview_clear
from .pieces import CATALOG, PieceDefinition, PieceInstance, PieceSetGenerator, generate_set, get_piece_by_id
from .session import GameOverStats, GameSession, PlacementResult, SessionSnapshot, has_valid_moves
from .records import FinishedSessionRecord, JsonLeaderboardStore, RecordPublisher

__version__ = "0.1.0"
