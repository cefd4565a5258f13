"""
A single entry of the history stack, and the record string it can be stored as.
----

A record holds everything needed to pick the game up again at that point, in 7 space-separated fields:

<layout> <fences> <pieces in hand> <player to move> <status> <winners> <last move>

* layout: the board layout string (see Board.from_layout)
* fences: in the order they were placed, "c4:c5" for a fence put down by the piece arriving on c4, comma-separated
* pieces in hand: one count per player in turn order, comma-separated
* player to move: seat name
* status: the game status, with underscores instead of spaces
* winners: comma-separated seat names
* last move: move notation

Empty fields (no fences, no winners, no move yet) are written as '-'.

ex) both players seated, nothing played yet:
-------/-------/-------/A-----B/-------/-------/------- - 7,7 one in_progress - -
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Self

from src.core.exceptions import InvalidMoveError, MalformedStateError
from src.core.shared_types import Status
from src.fendo.board import Board, Fence
from src.fendo.cell import BOARD_DIMENSIONS, Cell
from src.fendo.moves import parse_move
from src.fendo.pieces import PLAYER_ORDER, Player
from src.fendo.results import MoveResult

EMPTY_FIELD = "-"
NUM_RECORD_FIELDS = 7
_FENCE_PATTERN = re.compile(r"^([a-z]\d+):([a-z]\d+)$")


def fences_to_record(fences: Iterable[Fence]) -> str:
    return ",".join(f"{cell}:{neighbour}" for cell, neighbour in fences) or EMPTY_FIELD


def fences_from_record(fences_field: str) -> tuple[Fence, ...]:
    if fences_field == EMPTY_FIELD:
        return ()
    fences: list[Fence] = []
    for fence in fences_field.split(","):
        match = _FENCE_PATTERN.match(fence)
        if match is None:
            raise MalformedStateError(f"Cannot read {fence!r} as a fence.")
        fences.append((Cell.from_algebraic(match[1]), Cell.from_algebraic(match[2])))
    return tuple(fences)


def seats_from_record(seats_field: str) -> tuple[Player, ...]:
    if seats_field == EMPTY_FIELD:
        return ()
    try:
        return tuple(Player.from_seat(seat) for seat in seats_field.split(","))
    except KeyError as error:
        raise MalformedStateError(f"Unknown seat in {seats_field!r}.") from error


def pieces_in_hand_from_record(pieces_field: str) -> dict[Player, int]:
    counts = pieces_field.split(",")
    if len(counts) != len(PLAYER_ORDER) or not all(c.isdigit() for c in counts):
        raise MalformedStateError(
            f"Expected {len(PLAYER_ORDER)} non-negative counts of pieces in hand, got {pieces_field!r}."
        )
    return {player: int(count) for player, count in zip(PLAYER_ORDER, counts)}


def status_from_record(status_field: str) -> Status:
    status = status_field.replace("_", " ")
    if status not in {s.value for s in Status}:
        raise MalformedStateError(f"Unknown status {status_field!r} in record.")
    return Status(status)


@dataclass(frozen=True)
class MoveState:
    """One entry of the history stack: the state right after a move (or the initial state)."""

    current_player: Player
    layout: str
    fences: tuple[Fence, ...]
    pieces_in_hand: dict[Player, int]
    status: Status
    winners: tuple[Player, ...] = ()
    last_move: Optional[str] = None
    # what happened during the move, for the log / history views. Not part of the record.
    results: tuple[MoveResult, ...] = ()

    def to_board(self) -> Board:
        return Board.from_layout(
            self.layout, [(a.to_algebraic(), b.to_algebraic()) for a, b in self.fences]
        )

    def to_record(self) -> str:
        fields = [
            self.layout,
            fences_to_record(self.fences),
            ",".join(str(self.pieces_in_hand[p]) for p in PLAYER_ORDER),
            self.current_player.seat,
            self.status.value.replace(" ", "_"),
            ",".join(p.seat for p in self.winners) or EMPTY_FIELD,
            self.last_move or EMPTY_FIELD,
        ]
        return " ".join(fields)

    @classmethod
    def from_record(cls, record: str) -> Self:
        """Parse a record. Anything that does not add up to a board is a MalformedStateError."""
        fields = record.split(" ")
        if len(fields) != NUM_RECORD_FIELDS:
            raise MalformedStateError(
                f"A state record has {NUM_RECORD_FIELDS} fields, got {len(fields)}: {record!r}"
            )
        layout, fences, pieces, to_move, status, winners, last_move = fields

        current_player = seats_from_record(to_move)
        if len(current_player) != 1:
            raise MalformedStateError(f"Expected a single player to move, got {to_move!r}.")

        if last_move != EMPTY_FIELD:
            try:
                last_move = parse_move(last_move).to_notation()
            except InvalidMoveError as error:
                raise MalformedStateError(f"Cannot read last move {last_move!r}.") from error

        state = cls(
            current_player=current_player[0],
            layout=layout,
            fences=fences_from_record(fences),
            pieces_in_hand=pieces_in_hand_from_record(pieces),
            status=status_from_record(status),
            winners=seats_from_record(winners),
            last_move=None if last_move == EMPTY_FIELD else last_move,
        )
        # layout and fences have to fit on the board together
        if state.to_board().dimensions != BOARD_DIMENSIONS:
            raise MalformedStateError(f"Layout {layout!r} is not a {BOARD_DIMENSIONS[0]}x{BOARD_DIMENSIONS[1]} board.")
        return state
