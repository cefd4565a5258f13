"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from typing import Optional

# Type aliases to make GameModel easier to read
SeatName = str
PlayerName = str


@dataclass
class GameModel:
    """
    Transport-safe representation of a Fendo game used between API, Service, DB, and Game layers.

    `history` holds one state record per entry of the history stack (see src/fendo/state.py), the last one is the current state.
    """

    history: list[str]
    moves: list[str]
    registered_players: dict[SeatName, PlayerName]
    status: str
    resigned_by: Optional[SeatName] = None
