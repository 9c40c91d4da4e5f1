"""
Engine errors
"""


class CatTetrisError(Exception):
    """Base class for engine errors"""


class InvalidPlacement(CatTetrisError):
    """Piece cannot go at the requested anchor, or is not in the active set"""

    def __init__(self, instance_id, x: int, y: int, reason: str = "blocked"):
        self.instance_id = instance_id
        self.x = x
        self.y = y
        self.reason = reason
        super().__init__(f"Cannot place {instance_id!r} at ({x}, {y}): {reason}")


class SessionTerminated(CatTetrisError):
    """Mutating call made against a finished session"""

    def __init__(self, message: str = "Game is over, start a new session"):
        super().__init__(message)


class PersistenceFailure(CatTetrisError):
    """Writing a finished-session record failed"""
