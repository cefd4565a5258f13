"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING_FOR_PLAYERS = "waiting for players"
    IN_PROGRESS = "in progress"
    FENCED_IN = "fenced in"
    PASSED_OUT = "passed out"
    RESIGNED = "resigned"


# --- NOTE: the game is over in any of these
GAME_OVER_STATUSES: frozenset[Status] = frozenset(
    {Status.FENCED_IN, Status.PASSED_OUT, Status.RESIGNED}
)


class Seat(StrEnum):
    ONE = "one"
    TWO = "two"


class ActionType(StrEnum):
    PLACE = "place"
    MOVE = "move"
    PASS = "pass"
