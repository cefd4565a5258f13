"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator, Optional

import pytest

from src.core.shared_types import Status
from src.db.memory_repository import InMemoryGameRepository
from src.fendo.board import Board
from src.fendo.game import Game
from src.fendo.pieces import PLAYER_ORDER, Player

PLAYER_ONE_NAME = "alice"
PLAYER_TWO_NAME = "bob"

Fences = list[tuple[str, str]]


@pytest.fixture
def started_game() -> Game:
    """Fresh game: both players registered, first player to move, seeds on a4 / g4."""
    game = Game.new_game(player=PLAYER_ONE_NAME, seat="one")
    game.register_player(PLAYER_TWO_NAME)
    return game


@pytest.fixture
def game_from_layout() -> Callable[..., Game]:
    """Call the inner function with a board layout (and fences) to get an in-progress game in that position."""

    def _create_game(
        layout: str,
        fences: Optional[Fences] = None,
        current_player: Player = Player.ONE,
        pieces_in_hand: Optional[dict[Player, int]] = None,
    ) -> Game:
        return Game(
            board=Board.from_layout(layout, fences),
            pieces_in_hand=pieces_in_hand or {p: 0 for p in PLAYER_ORDER},
            current_player=current_player,
            players={Player.ONE: PLAYER_ONE_NAME, Player.TWO: PLAYER_TWO_NAME},
            status=Status.IN_PROGRESS,
        )

    return _create_game


@pytest.fixture
def memory_repository() -> Generator[InMemoryGameRepository, None, None]:
    """Fresh in-memory repository for every test"""
    repo = InMemoryGameRepository()
    yield repo
