"""Unit tests for src/services/fendo_service.py"""

from uuid import UUID, uuid4

import pytest

from src.api.models import (
    ActionModel,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResignRequest,
)
from src.core.exceptions import (
    GameError,
    GameStateError,
    InvalidMoveError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.shared_types import ActionType, Seat, Status
from src.db.memory_repository import InMemoryGameRepository
from src.fendo.cell import Cell, Direction
from src.fendo.moves import MoveAndFence, Pass, Placement
from src.services.fendo_service import FendoService, to_action

PLAYER_ONE = "Mocker M. Mockerson"
PLAYER_TWO = "Mockette"


@pytest.fixture
def service(memory_repository: InMemoryGameRepository) -> FendoService:
    return FendoService(memory_repository)


@pytest.fixture
def game_id(service: FendoService) -> UUID:
    """Game with both players seated, first player to move"""
    response = service.create_new_game(CreateGameRequest(player_name=PLAYER_ONE))
    service.join_game(JoinGameRequest(game_id=response.game_id, player_name=PLAYER_TWO))
    return response.game_id


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(
    service: FendoService, memory_repository: InMemoryGameRepository
) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest(player_name=PLAYER_ONE, seat=Seat.TWO))

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.players == {"two": PLAYER_ONE}
    assert response.status == Status.WAITING_FOR_PLAYERS
    assert response.occupancy == {"a4": "one", "g4": "two"}
    assert response.fences == []
    assert response.pieces_in_hand == {"one": 7, "two": 7}
    assert response.current_player == "one"
    assert response.move_history == []

    # Check persisted data
    stored_game = memory_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.registered_players == {"two": PLAYER_ONE}
    assert stored_game.moves == []
    assert stored_game.status == Status.WAITING_FOR_PLAYERS


# --- SERVICE - JOIN GAME ----
def test_second_player_joins_game(
    service: FendoService, memory_repository: InMemoryGameRepository
) -> None:
    created = service.create_new_game(CreateGameRequest(player_name=PLAYER_ONE))
    response = service.join_game(JoinGameRequest(game_id=created.game_id, player_name=PLAYER_TWO))

    assert response.players == {"one": PLAYER_ONE, "two": PLAYER_TWO}
    assert response.status == Status.IN_PROGRESS
    stored_game = memory_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.status == Status.IN_PROGRESS
    # the game can be taken back to its first state and still be played from there
    assert stored_game.history == [
        "-------/-------/-------/A-----B/-------/-------/------- - 7,7 one in_progress - -"
    ]


def test_join_full_game(service: FendoService, game_id: UUID) -> None:
    with pytest.raises(GameStateError):
        service.join_game(JoinGameRequest(game_id=game_id, player_name="third wheel"))


def test_unknown_game(service: FendoService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_legal_moves(service: FendoService, game_id: UUID) -> None:
    response = service.legal_moves(LegalMovesRequest(game_id=game_id, player_name=PLAYER_ONE))
    assert isinstance(response, LegalMovesResponse)
    assert response.seat == Seat.ONE
    assert len(response.legal_moves) == 209
    assert ActionModel(type=ActionType.PLACE, cell="c4") in response.legal_moves
    assert (
        ActionModel(type=ActionType.MOVE, from_cell="a4", to_cell="c4", direction="N")
        in response.legal_moves
    )


def test_legal_moves_not_your_turn(service: FendoService, game_id: UUID) -> None:
    with pytest.raises(NotYourTurnError):
        service.legal_moves(LegalMovesRequest(game_id=game_id, player_name=PLAYER_TWO))


# --- SERVICE - MAKE MOVE ----
def test_make_move(
    service: FendoService, game_id: UUID, memory_repository: InMemoryGameRepository
) -> None:
    response = service.make_move(
        MoveRequest(game_id=game_id, player_name=PLAYER_ONE, notation="a4-c4N")
    )
    assert response.occupancy == {"c4": "one", "g4": "two"}
    assert response.fences == [("c4", "c5")]
    assert response.current_player == "two"
    assert response.move_history == ["a4-c4N"]

    response = service.make_move(
        MoveRequest(
            game_id=game_id,
            player_name=PLAYER_TWO,
            action=ActionModel(type=ActionType.PLACE, cell="d4"),
        )
    )
    assert response.pieces_in_hand == {"one": 7, "two": 6}
    assert response.move_history == ["a4-c4N", "d4"]

    stored_game = memory_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.moves == ["a4-c4N", "d4"]
    assert len(stored_game.history) == 3
    assert stored_game.history[-1].endswith(" one in_progress - d4")


def test_rejected_move_is_not_stored(
    service: FendoService, game_id: UUID, memory_repository: InMemoryGameRepository
) -> None:
    with pytest.raises(InvalidMoveError):
        service.make_move(MoveRequest(game_id=game_id, player_name=PLAYER_ONE, notation="pass"))

    stored_game = memory_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.moves == []


def test_rejected_move_is_logged(
    service: FendoService, game_id: UUID, caplog: pytest.LogCaptureFixture
) -> None:
    with pytest.raises(GameError):
        service.make_move(MoveRequest(game_id=game_id, player_name=PLAYER_TWO, notation="g4-e4N"))
    assert "rejected" in caplog.text


# --- SERVICE - RESIGN / DELETE ----
def test_resign(service: FendoService, game_id: UUID) -> None:
    response = service.resign(ResignRequest(game_id=game_id, player_name=PLAYER_ONE))
    assert response.status == Status.RESIGNED
    assert response.game_over
    assert response.winners == ["two"]

    # the resignation survives a reload
    reloaded = service.get_game_state(GetGameRequest(game_id=game_id))
    assert reloaded.status == Status.RESIGNED
    assert reloaded.winners == ["two"]


def test_delete_game(
    service: FendoService, game_id: UUID, memory_repository: InMemoryGameRepository
) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert memory_repository.get_game(game_id) is None


# --- CONVERSION ---
@pytest.mark.parametrize(
    "move, action",
    [
        (Placement(Cell(3, 4)), ActionModel(type=ActionType.PLACE, cell="c4")),
        (
            MoveAndFence(Cell(1, 4), Cell(3, 4), Direction.N),
            ActionModel(type=ActionType.MOVE, from_cell="a4", to_cell="c4", direction="N"),
        ),
        (Pass(), ActionModel(type=ActionType.PASS)),
    ],
)
def test_to_action(move, action: ActionModel) -> None:
    assert to_action(move) == action
    assert action.to_notation() == move.to_notation()
