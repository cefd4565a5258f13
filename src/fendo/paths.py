"""
Movement rules: how far a piece can travel in one turn.

A piece moves along a straight line or an "L" (at most one change of direction).
It cannot jump over other pieces, cannot end on one, and cannot pass through a fence.
"""

from typing import Mapping, Optional

from src.core.exceptions import MalformedStateError
from src.fendo.cell import Cell, Direction, ray
from src.fendo.graph import BoardGraph
from src.fendo.pieces import Player

Path = list[Cell]


def count_turns(path: Path) -> int:
    """Number of times the direction of travel changes along the path"""
    turns = 0
    last: Optional[tuple[int, int]] = None
    for current, following in zip(path, path[1:]):
        step = (following.file - current.file, following.rank - current.rank)
        if last is not None and step != last:
            turns += 1
        last = step
    return turns


def is_passable(
    path: Path, graph: BoardGraph, occupancy: Mapping[Cell, Player]
) -> bool:
    """Every step follows an edge that is still there, and only the first cell (the moving piece) is occupied."""
    for current, following in zip(path, path[1:]):
        if not graph.has_edge(current, following):
            return False
    return not any(cell in occupancy for cell in path[1:])


def _directions_towards(start: Cell, end: Cell) -> list[Direction]:
    """Horizontal component first, then the vertical one"""
    directions: list[Direction] = []
    if end.file > start.file:
        directions.append(Direction.E)
    elif end.file < start.file:
        directions.append(Direction.W)
    if end.rank > start.rank:
        directions.append(Direction.N)
    elif end.rank < start.rank:
        directions.append(Direction.S)
    return directions


def naive_path(
    graph: BoardGraph, occupancy: Mapping[Cell, Player], start: Cell, end: Cell
) -> Optional[Path]:
    """
    Just tries the straight line or the two possible L-shapes.
    ---

    A shortest path on a wide open board will happily zig-zag, taking more turns than needed.
    So first cast rays: from `start` in the first direction and backwards from `end` in the second one.
    Where they cross is the corner of the L.
    """
    directions = _directions_towards(start, end)
    if not directions:
        return None

    dimensions = graph.dimensions
    if len(directions) == 1:
        line = ray(start, directions[0], dimensions)
        if end not in line:
            raise MalformedStateError(f"Ray from {start} never reached {end}.")
        path = [start, *line[: line.index(end) + 1]]
        return path if is_passable(path, graph, occupancy) else None

    for first, second in (directions, directions[::-1]):
        outgoing = ray(start, first, dimensions)
        incoming = ray(end, second.opposite, dimensions)
        crossing = [cell for cell in outgoing if cell in incoming]
        if len(crossing) != 1:
            raise MalformedStateError(f"Rays from {start} and {end} did not intersect.")
        corner = crossing[0]
        path = [
            start,
            *outgoing[: outgoing.index(corner)],
            corner,
            *reversed(incoming[: incoming.index(corner)]),
            end,
        ]
        if is_passable(path, graph, occupancy):
            return path
    return None


def find_path(
    graph: BoardGraph, occupancy: Mapping[Cell, Player], start: Cell, end: Cell
) -> Optional[Path]:
    """
    Path a piece on `start` can take to `end` in a single move, or None.
    ----

    1. try the ray-cast straight line / L-shapes
    2. fall back on the shortest path through the graph, but only if it happens to respect the same rules
    """
    if start == end:
        return None

    path = naive_path(graph, occupancy, start, end)
    if path is not None:
        return path

    path = graph.shortest_path(start, end)
    if path is None:
        return None
    if count_turns(path) > 1 or not is_passable(path, graph, occupancy):
        return None
    return path
