"""
What happened during a turn, in a form the history / log renderers can match on.

Closed set of variants: anything consuming results can `match` over MoveResult exhaustively.
"""

from dataclasses import dataclass
from typing import Literal

from src.fendo.cell import Cell
from src.fendo.pieces import Player


@dataclass(frozen=True)
class PlaceResult:
    where: Cell
    type: Literal["place"] = "place"


@dataclass(frozen=True)
class StepResult:
    """One step of a piece moving along its path (a move over several cells produces several steps)"""

    from_cell: Cell
    to_cell: Cell
    type: Literal["move"] = "move"


@dataclass(frozen=True)
class BlockResult:
    between: tuple[Cell, Cell]
    type: Literal["block"] = "block"


@dataclass(frozen=True)
class PassResult:
    type: Literal["pass"] = "pass"


@dataclass(frozen=True)
class EndOfGameResult:
    type: Literal["eog"] = "eog"


@dataclass(frozen=True)
class WinnersResult:
    players: tuple[Player, ...]
    type: Literal["winners"] = "winners"


@dataclass(frozen=True)
class ResignedResult:
    player: Player
    type: Literal["resigned"] = "resigned"


MoveResult = (
    PlaceResult
    | StepResult
    | BlockResult
    | PassResult
    | EndOfGameResult
    | WinnersResult
    | ResignedResult
)


def describe(result: MoveResult) -> str:
    """Short plain-text description, mostly useful for logging."""
    match result:
        case PlaceResult(where=where):
            return f"placed a piece on {where}"
        case StepResult(from_cell=from_cell, to_cell=to_cell):
            return f"moved {from_cell} -> {to_cell}"
        case BlockResult(between=(a, b)):
            return f"fenced off {a} from {b}"
        case PassResult():
            return "passed"
        case EndOfGameResult():
            return "game over"
        case WinnersResult(players=players):
            return "winners: " + ", ".join(p.seat for p in players)
        case ResignedResult(player=player):
            return f"player {player.seat} resigned"
