"""
Exceptions used across layers.

All of them derive from GameError, so the API layer can catch one type and turn it into a response.
"""

from typing import Any, Optional


class GameError(Exception):
    """Base exception. `code` is a machine-readable category, `message` the human-readable reason."""

    code: str = "GAME_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


# --- DOMAIN ERRORS ---
class InvalidMoveError(GameError):
    """The submitted action is not one of the legal moves (or cannot even be read as a move)."""

    code = "INVALID_MOVE"

    def __init__(self, message: str, move: Optional[str] = None) -> None:
        super().__init__(message)
        self.move = move

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "move": self.move}


class MalformedStateError(GameError):
    """An internal invariant is broken. Indicates corrupted state, not bad input: never try to repair it."""

    code = "MALFORMED_STATE"


class GameOverError(GameError):
    """Moves and resignations are rejected once the game has ended."""

    code = "GAME_OVER"


class GameStateError(GameError):
    """The game is not in a state that allows the request (ex. still waiting for a second player)."""

    code = "GAME_STATE"


class NotYourTurnError(GameError):
    code = "NOT_YOUR_TURN"


class UnknownPlayerError(GameError):
    code = "UNKNOWN_PLAYER"


# --- BOUNDARY ERRORS ---
class InvalidRequestError(GameError):
    code = "INVALID_REQUEST"


class RepositoryError(GameError):
    code = "REPOSITORY"
