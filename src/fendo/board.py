"""The Game board: which cell holds whose piece, and the fences that cut the board into regions."""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import MalformedStateError
from src.fendo.cell import BOARD_DIMENSIONS, Cell, Direction
from src.fendo.graph import BoardGraph
from src.fendo.pieces import LAYOUT_TO_PLAYER, PLAYER_TO_LAYOUT, Player

EMPTY_CELL = "-"

# A fence as it was placed: the cell the piece moved to, and the neighbour it got cut off from.
Fence = tuple[Cell, Cell]


@dataclass
class Board:
    position: dict[Cell, Player]
    graph: BoardGraph = field(default_factory=BoardGraph)
    fences: list[Fence] = field(default_factory=list)

    @classmethod
    def from_layout(
        cls, layout: str, fences: Optional[list[tuple[str, str]]] = None
    ) -> Self:
        """Construct a board from a layout string (and optionally a list of fences in algebraic notation).

        Rows are separated by slashes and read from the top rank down, each row from the a-file onwards.
        ex. the starting position on the 7x7 board:
        -------/-------/-------/A-----B/-------/-------/-------
        means:
        * the first player's piece ('A') on a4
        * the second player's piece ('B') on g4
        * every other cell is empty ('-')
        """
        rows = layout.split("/")
        width = len(rows[0])
        height = len(rows)
        if any(len(row) != width for row in rows):
            raise MalformedStateError(f"Board layout rows differ in length: {layout!r}")

        position: dict[Cell, Player] = {}
        for row_idx, row in enumerate(rows):
            # layout is read from top rank to bottom rank
            rank = height - row_idx
            for file_idx, character in enumerate(row, start=1):
                if character == EMPTY_CELL:
                    continue
                if character not in LAYOUT_TO_PLAYER:
                    raise MalformedStateError(
                        f"Unknown character {character!r} in board layout."
                    )
                position[Cell(file_idx, rank)] = LAYOUT_TO_PLAYER[character]

        board = cls(position, BoardGraph(width, height))
        for cell_alg, neighbour_alg in fences or []:
            board.add_fence(
                Cell.from_algebraic(cell_alg), Cell.from_algebraic(neighbour_alg)
            )
        return board

    def to_layout(self) -> str:
        rows: list[str] = []
        for rank in range(self.graph.height, 0, -1):
            row = ""
            for file in range(1, self.graph.width + 1):
                occupant = self.occupant(Cell(file, rank))
                row += PLAYER_TO_LAYOUT[occupant] if occupant else EMPTY_CELL
            rows.append(row)
        return "/".join(rows)

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.graph.dimensions

    def occupant(self, cell: Cell) -> Optional[Player]:
        return self.position.get(cell)

    def is_occupied(self, cell: Cell) -> bool:
        return cell in self.position

    def locate_player(self, player: Player) -> list[Cell]:
        """In board order, whatever order the pieces were put down in"""
        return [cell for cell in self.graph.cells() if self.position.get(cell) == player]

    def empty_cells(self) -> list[Cell]:
        return [cell for cell in self.graph.cells() if cell not in self.position]

    def place_piece(self, cell: Cell, player: Player) -> None:
        self.position[cell] = player

    def move_piece(self, from_cell: Cell, to_cell: Cell) -> None:
        """Update the position on the board"""
        player = self.position.pop(from_cell)
        self.position[to_cell] = player

    def add_fence(self, cell: Cell, neighbour: Cell) -> None:
        """Cut the connection between two adjacent cells, and keep track of the order fences were placed in."""
        if not self.graph.has_edge(cell, neighbour):
            raise MalformedStateError(
                f"No connection left between {cell} and {neighbour} to put a fence on."
            )
        self.graph.sever_edge(cell, neighbour)
        self.fences.append((cell, neighbour))

    def add_fence_towards(self, cell: Cell, direction: Direction) -> Fence:
        neighbour = cell.step(direction)
        self.add_fence(cell, neighbour)
        return (cell, neighbour)

    def copy(self) -> "Board":
        """Independent board for trying out a move. Graph copies are cheap (copy-on-write)."""
        return Board(dict(self.position), self.graph.copy(), list(self.fences))

    def fences_algebraic(self) -> list[tuple[str, str]]:
        return [(a.to_algebraic(), b.to_algebraic()) for a, b in self.fences]


def starting_layout(
    seeds: dict[Player, str], dimensions: tuple[int, int] = BOARD_DIMENSIONS
) -> str:
    """Layout string of an otherwise empty board with a single piece on each seed cell."""
    board = Board({}, BoardGraph(*dimensions))
    for player, cell in seeds.items():
        board.place_piece(Cell.from_algebraic(cell), player)
    return board.to_layout()
