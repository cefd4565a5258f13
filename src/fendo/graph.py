"""
Connectivity graph of the board.

Every pair of orthogonally adjacent cells starts out connected. Fences sever those connections for the rest of the game,
so the graph only ever shrinks. Nothing in here adds an edge back.
"""

from __future__ import annotations

from collections import deque
from typing import Optional

from src.fendo.cell import BOARD_DIMENSIONS, Cell, all_cells, orthogonal_neighbours

Edge = frozenset[Cell]


def make_edge(a: Cell, b: Cell) -> Edge:
    return frozenset((a, b))


class BoardGraph:
    """
    Grid graph stored as the set of severed edges.

    NOTE: the severed set is a frozenset that gets replaced (never mutated in place) when an edge is severed.
    A copy can therefore share it with the original until either of them severs another edge.
    """

    def __init__(
        self,
        width: int = BOARD_DIMENSIONS[0],
        height: int = BOARD_DIMENSIONS[1],
        severed: frozenset[Edge] = frozenset(),
    ) -> None:
        self.width = width
        self.height = height
        self._severed = severed

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self.width, self.height)

    def copy(self) -> BoardGraph:
        return BoardGraph(self.width, self.height, self._severed)

    def contains(self, cell: Cell) -> bool:
        return cell.is_within_bounds(self.dimensions)

    def cells(self) -> list[Cell]:
        return all_cells(self.dimensions)

    def is_grid_edge(self, a: Cell, b: Cell) -> bool:
        """True if a and b are orthogonal neighbours on this grid (whether severed or not)"""
        if not (self.contains(a) and self.contains(b)):
            return False
        return abs(a.file - b.file) + abs(a.rank - b.rank) == 1

    def has_edge(self, a: Cell, b: Cell) -> bool:
        return self.is_grid_edge(a, b) and make_edge(a, b) not in self._severed

    def neighbours(self, cell: Cell) -> set[Cell]:
        """Only those cells still connected to `cell` by an edge"""
        return {
            n
            for n in orthogonal_neighbours(cell, self.dimensions)
            if make_edge(cell, n) not in self._severed
        }

    def sever_edge(self, a: Cell, b: Cell) -> None:
        """Remove the edge between a and b. Does nothing if there is no such edge (anymore)."""
        if not self.has_edge(a, b):
            return
        self._severed = self._severed | {make_edge(a, b)}

    @property
    def edge_count(self) -> int:
        # a full w x h grid has w*(h-1) vertical and h*(w-1) horizontal edges
        full = self.width * (self.height - 1) + self.height * (self.width - 1)
        return full - len(self._severed)

    def shortest_path(self, start: Cell, end: Cell) -> Optional[list[Cell]]:
        """Breadth-first search over the present edges. Returns the cells from start to end (both included)."""
        if not (self.contains(start) and self.contains(end)):
            return None
        previous: dict[Cell, Optional[Cell]] = {start: None}
        queue: deque[Cell] = deque([start])
        while queue:
            current = queue.popleft()
            if current == end:
                break
            # sorted, so that ties between equally short paths are broken the same way every time
            for n in sorted(self.neighbours(current), key=lambda c: (c.file, c.rank)):
                if n not in previous:
                    previous[n] = current
                    queue.append(n)

        if end not in previous:
            return None

        path: list[Cell] = []
        node: Optional[Cell] = end
        while node is not None:
            path.append(node)
            node = previous[node]
        return path[::-1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardGraph):
            return NotImplemented
        return (self.dimensions, self._severed) == (other.dimensions, other._severed)

    def __repr__(self) -> str:
        return f"BoardGraph({self.width}x{self.height}, severed={len(self._severed)})"
