"""Defines the players owning pieces. A piece is nothing more than a cell occupied by its owner."""

from enum import Enum
from typing import Self


class Player(Enum):
    ONE = 1
    TWO = 2

    @property
    def seat(self) -> str:
        """Name of the seat in transport models ('one' / 'two')"""
        return self.name.lower()

    @classmethod
    def from_seat(cls, seat: str) -> Self:
        return cls[seat.upper()]


PLAYER_ORDER: tuple[Player, ...] = (Player.ONE, Player.TWO)
AVAILABLE_SEAT_NAMES: list[str] = [player.name for player in Player]

# Board layout strings: upper case A for the first player's pieces, B for the second, '-' for an empty cell
LAYOUT_TO_PLAYER: dict[str, Player] = {
    "A": Player.ONE,
    "B": Player.TWO,
}

PLAYER_TO_LAYOUT: dict[Player, str] = {
    value: key for key, value in LAYOUT_TO_PLAYER.items()
}


def next_player(player: Player) -> Player:
    """Round-robin turn order"""
    idx = PLAYER_ORDER.index(player)
    return PLAYER_ORDER[(idx + 1) % len(PLAYER_ORDER)]


def other_players(player: Player) -> list[Player]:
    return [p for p in PLAYER_ORDER if p != player]
