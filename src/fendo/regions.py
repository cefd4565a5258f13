"""
Splitting the board into regions.

A region is a maximal set of cells that can reach each other without crossing a fence.
Regions are classified by how many pieces they hold:
* no pieces: empty (never allowed to be the result of a move)
* a single piece: closed (scored for the owner of that piece)
* two or more pieces: open (still contested)

NOTE: the count is about pieces, not owners. Two pieces of the same player in one region still make it open.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from src.fendo.cell import Cell
from src.fendo.graph import BoardGraph
from src.fendo.pieces import Player

Region = frozenset[Cell]


@dataclass
class Regions:
    empty: list[Region] = field(default_factory=list)
    closed: list[Region] = field(default_factory=list)
    open: list[Region] = field(default_factory=list)

    def all(self) -> list[Region]:
        return self.empty + self.closed + self.open

    def satisfies_move_invariant(self) -> bool:
        """What every accepted move has to leave behind: no empty region, and at most one open region"""
        return len(self.empty) == 0 and len(self.open) <= 1


def flood_fill(graph: BoardGraph, start: Cell) -> Region:
    """All cells connected to `start`"""
    region: set[Cell] = set()
    todo = [start]
    while todo:
        cell = todo.pop()
        if cell in region:
            continue
        region.add(cell)
        todo.extend(graph.neighbours(cell) - region)
    return frozenset(region)


def classify_regions(graph: BoardGraph, occupancy: Mapping[Cell, Player]) -> Regions:
    """Partition the board into regions, visiting every cell exactly once."""
    regions = Regions()
    seen: set[Cell] = set()
    for cell in graph.cells():
        if cell in seen:
            continue
        region = flood_fill(graph, cell)
        seen |= region

        piece_count = sum(1 for occupied in occupancy if occupied in region)
        if piece_count == 0:
            regions.empty.append(region)
        elif piece_count == 1:
            regions.closed.append(region)
        else:
            regions.open.append(region)
    return regions


def region_owner(region: Region, occupancy: Mapping[Cell, Player]) -> Optional[Player]:
    """Owner of a closed region. None for empty or open regions."""
    owners = [player for cell, player in occupancy.items() if cell in region]
    return owners[0] if len(owners) == 1 else None


def player_scores(
    graph: BoardGraph, occupancy: Mapping[Cell, Player], players: Iterable[Player]
) -> dict[Player, int]:
    """Each player scores the size of every closed region holding one of their pieces."""
    scores = {player: 0 for player in players}
    for region in classify_regions(graph, occupancy).closed:
        owner = region_owner(region, occupancy)
        if owner in scores:
            scores[owner] += len(region)
    return scores
