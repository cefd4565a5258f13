"""
The moves a player can make, their notation, and the generation of the legal move set.

Key idea: a move+fence is only legal if the board it leaves behind is legal.
So every candidate is tried out on a copy of the board before it is accepted.


Turn order / pieces in hand / game over are the Game's business, not this module's.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import InvalidMoveError, MalformedStateError
from src.fendo.board import Board, Fence
from src.fendo.cell import Cell, Direction, bearing
from src.fendo.paths import find_path
from src.fendo.pieces import Player
from src.fendo.regions import Region, classify_regions

logger = logging.getLogger(__name__)

PASS_NOTATION = "pass"
_PLACEMENT_PATTERN = re.compile(r"^([a-z])(\d+)$")
_MOVE_PATTERN = re.compile(r"^([a-z]\d+)-([a-z]\d+)([nesw])$")


@dataclass(frozen=True)
class Placement:
    """Enter a piece from hand"""

    cell: Cell

    def to_notation(self) -> str:
        return self.cell.to_algebraic()


@dataclass(frozen=True)
class MoveAndFence:
    """Move a piece, then put a fence on one side of the cell it arrived on"""

    from_cell: Cell
    to_cell: Cell
    direction: Direction

    @property
    def fence(self) -> Fence:
        return (self.to_cell, self.to_cell.step(self.direction))

    def to_notation(self) -> str:
        return f"{self.from_cell.to_algebraic()}-{self.to_cell.to_algebraic()}{self.direction.name}"


@dataclass(frozen=True)
class Pass:
    def to_notation(self) -> str:
        return PASS_NOTATION


Move = Placement | MoveAndFence | Pass


def parse_move(notation: str) -> Move:
    """
    Canonical notation
    ---
    * "c4": place a piece from hand on c4
    * "a4-c4N": move the piece on a4 to c4, then fence off c4 from its northern neighbour
    * "pass"

    Case and whitespace do not matter.
    """
    text = re.sub(r"\s+", "", notation).lower()
    if text == PASS_NOTATION:
        return Pass()

    if match := _MOVE_PATTERN.match(text):
        from_alg, to_alg, direction = match.groups()
        return MoveAndFence(
            Cell.from_algebraic(from_alg),
            Cell.from_algebraic(to_alg),
            Direction[direction.upper()],
        )

    if _PLACEMENT_PATTERN.match(text):
        return Placement(Cell.from_algebraic(text))

    raise InvalidMoveError(f"Cannot interpret {notation!r} as a move.", move=notation)


def simulate(board: Board, move: Move, player: Player) -> Board:
    """Apply the move to a copy of the board. The original board is left untouched."""
    trial = board.copy()
    match move:
        case Placement(cell=cell):
            trial.place_piece(cell, player)
        case MoveAndFence(from_cell=from_cell, to_cell=to_cell, direction=direction):
            trial.move_piece(from_cell, to_cell)
            trial.add_fence_towards(to_cell, direction)
        case Pass():
            pass
    return trial


# --- LEGAL MOVE GENERATION ---
def open_region(board: Board) -> Optional[Region]:
    """The single contested region, if there still is one"""
    regions = classify_regions(board.graph, board.position)
    if len(regions.open) > 1:
        raise MalformedStateError(
            f"There should never be more than one open region, found {len(regions.open)}."
        )
    return regions.open[0] if regions.open else None


def reachable_targets(
    board: Board, player: Player, region: Optional[Region] = None
) -> dict[Cell, list[Cell]]:
    """
    For every piece of `player` in the open region: the empty cells of that region it can move to in a single move.
    Pieces that cannot move at all are left out.
    """
    if region is None:
        region = open_region(board)
        if region is None:
            return {}

    pieces = [cell for cell in board.locate_player(player) if cell in region]
    empties = [cell for cell in board.empty_cells() if cell in region]

    targets: dict[Cell, list[Cell]] = {}
    for piece in pieces:
        for target in empties:
            if find_path(board.graph, board.position, piece, target) is not None:
                targets.setdefault(piece, []).append(target)
    return targets


def generate_legal_moves(
    board: Board, player: Player, pieces_in_hand: int
) -> list[Move]:
    """
    List of legal moves for `player`
    ----

    ----
    **Combines the following**

    1. find the open region (no open region: nothing left to do but pass)
    2. find every empty cell of that region your pieces can reach in one move
    3. placements: any of those cells, as long as you still have a piece in hand
    4. move+fence: for every reachable cell and every connection it still has, make the move on a copy of the board,
       place the fence, and keep it if the result has no empty region and at most one open region.
    5. nothing found? Then you pass.
    """
    region = open_region(board)
    if region is None:
        return [Pass()]

    targets = reachable_targets(board, player, region)
    moves: list[Move] = []

    if pieces_in_hand > 0:
        # same cell may be reachable by several pieces
        unique_targets = dict.fromkeys(t for cells in targets.values() for t in cells)
        moves.extend(Placement(cell) for cell in unique_targets)

    rejected = 0
    for from_cell, cells in targets.items():
        for to_cell in cells:
            neighbours = sorted(
                board.graph.neighbours(to_cell), key=lambda c: (c.file, c.rank)
            )
            for neighbour in neighbours:
                direction = bearing(to_cell, neighbour)
                # for the type checker: graph neighbours are always adjacent
                assert direction is not None
                candidate = MoveAndFence(from_cell, to_cell, direction)
                trial = simulate(board, candidate, player)
                if classify_regions(trial.graph, trial.position).satisfies_move_invariant():
                    moves.append(candidate)
                else:
                    rejected += 1

    logger.debug(
        "player %s: %d reachable pieces, %d legal moves, %d fence placements rejected",
        player.seat,
        len(targets),
        len(moves),
        rejected,
    )

    if not moves:
        return [Pass()]
    return moves
