"""Requests and Response models"""

import re
from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import ActionType, Seat, Status

SeatName = str
PlayerName = str

_CELL_PATTERN = re.compile(r"^[a-zA-Z]\d+$")
_DIRECTIONS = ("N", "E", "S", "W")


def _is_algebraic_notation(value: str) -> bool:
    return bool(_CELL_PATTERN.match(value))


# --- ACTIONS ---
class ActionModel(BaseModel):
    """
    Structured form of a move.

    * place: `cell` is where the piece from hand enters
    * move: `from_cell` -> `to_cell`, then a fence on the `direction` side of `to_cell`
    * pass: nothing else
    """

    type: ActionType
    cell: Optional[str] = None
    from_cell: Optional[str] = None
    to_cell: Optional[str] = None
    direction: Optional[str] = None

    @field_validator("cell", "from_cell", "to_cell")
    @classmethod
    def validate_cell(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid cell name."
            )
        return value.lower()

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if value.upper() not in _DIRECTIONS:
            raise InvalidRequestError(
                f"Fence direction must be one of {','.join(_DIRECTIONS)}, got {value!r}."
            )
        return value.upper()

    @model_validator(mode="after")
    def validate_fields_for_type(self) -> Self:
        required: dict[ActionType, tuple[str, ...]] = {
            ActionType.PLACE: ("cell",),
            ActionType.MOVE: ("from_cell", "to_cell", "direction"),
            ActionType.PASS: (),
        }
        missing = [name for name in required[self.type] if getattr(self, name) is None]
        if missing:
            raise InvalidRequestError(
                f"A {self.type} action needs: {', '.join(missing)}."
            )
        return self

    def to_notation(self) -> str:
        match self.type:
            case ActionType.PLACE:
                return f"{self.cell}"
            case ActionType.MOVE:
                return f"{self.from_cell}-{self.to_cell}{self.direction}"
            case _:
                return "pass"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    seat: Seat = Seat.ONE


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class LegalMovesRequest(BaseModel):
    game_id: UUID
    player_name: str


class MoveRequest(BaseModel):
    """Either a structured action or its notation ("c4", "a4-c4N", "pass"). Not both."""

    game_id: UUID
    player_name: str
    action: Optional[ActionModel] = None
    notation: Optional[str] = None

    @model_validator(mode="after")
    def validate_one_move(self) -> Self:
        if (self.action is None) == (self.notation is None):
            raise InvalidRequestError(
                "Supply exactly one of 'action' or 'notation' to make a move."
            )
        return self

    def move_notation(self) -> str:
        if self.action is not None:
            return self.action.to_notation()
        # for the type checker: the validator guarantees one of the two
        assert self.notation is not None
        return self.notation


class ResignRequest(BaseModel):
    game_id: UUID
    player_name: str


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    players: dict[SeatName, PlayerName]
    status: Status
    occupancy: dict[str, SeatName]
    fences: list[tuple[str, str]]
    pieces_in_hand: dict[SeatName, int]
    scores: dict[SeatName, int]
    current_player: SeatName
    game_over: bool
    winners: list[SeatName]
    move_history: list[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_name: str
    seat: Seat
    legal_moves: list[ActionModel]
