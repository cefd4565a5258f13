"""
A cell on the board, plus the grid helpers (directions, ray casting) the rest of the engine needs.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Fendo is played on a 7x7 grid. The graph accepts other sizes, the rules are only defined for this one.
BOARD_DIMENSIONS = (7, 7)


class Direction(Enum):
    """Compass directions. Values are the (file, rank) deltas: North is up the board (higher rank)."""

    N = (0, 1)
    NE = (1, 1)
    E = (1, 0)
    SE = (1, -1)
    S = (0, -1)
    SW = (-1, -1)
    W = (-1, 0)
    NW = (-1, 1)

    @property
    def opposite(self) -> Direction:
        df, dr = self.value
        return Direction((-df, -dr))


ORTHOGONAL_DIRECTIONS: tuple[Direction, ...] = (
    Direction.N,
    Direction.E,
    Direction.S,
    Direction.W,
)


@dataclass(frozen=True)
class Cell:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, cell: str) -> Cell:
        """Algebraic notation: 'a1' - 'g7' get converted to (1,1) - (7,7)"""
        file = ord(cell[0].lower()) - ord("a") + 1
        rank = int(cell[1:])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self, dimensions: tuple[int, int] = BOARD_DIMENSIONS) -> bool:
        return (1 <= self.file <= dimensions[0]) and (1 <= self.rank <= dimensions[1])

    def step(self, direction: Direction) -> Cell:
        df, dr = direction.value
        return Cell(self.file + df, self.rank + dr)

    def __str__(self) -> str:
        return self.to_algebraic()


def ray(
    start: Cell, direction: Direction, dimensions: tuple[int, int] = BOARD_DIMENSIONS
) -> list[Cell]:
    """
    Raycasting
    -----
    All cells from the neighbour of `start` up to the edge of the grid along `direction`.
    The starting cell itself is not part of the ray.
    """
    cells: list[Cell] = []
    current = start.step(direction)
    while current.is_within_bounds(dimensions):
        cells.append(current)
        current = current.step(direction)
    return cells


def bearing(from_cell: Cell, to_cell: Cell) -> Optional[Direction]:
    """Direction of a neighbouring cell (8-way). None if the cells are not neighbours."""
    delta = (to_cell.file - from_cell.file, to_cell.rank - from_cell.rank)
    for direction in Direction:
        if direction.value == delta:
            return direction
    return None


def orthogonal_neighbours(
    cell: Cell, dimensions: tuple[int, int] = BOARD_DIMENSIONS
) -> list[Cell]:
    neighbours = [cell.step(direction) for direction in ORTHOGONAL_DIRECTIONS]
    return [n for n in neighbours if n.is_within_bounds(dimensions)]


def all_cells(dimensions: tuple[int, int] = BOARD_DIMENSIONS) -> list[Cell]:
    """Every cell of the grid, top rank first and a-file first within a rank (the reading order of a layout)."""
    return [
        Cell(file, rank)
        for rank in range(dimensions[1], 0, -1)
        for file in range(1, dimensions[0] + 1)
    ]
