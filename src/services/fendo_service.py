"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

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
from src.core.exceptions import GameError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import ActionType, Seat
from src.db.repository import GameRepository
from src.fendo.game import Game
from src.fendo.moves import Move, MoveAndFence, Placement

logger = logging.getLogger(__name__)


def to_action(move: Move) -> ActionModel:
    """Domain move -> structured action for the API layer"""
    match move:
        case Placement(cell=cell):
            return ActionModel(type=ActionType.PLACE, cell=cell.to_algebraic())
        case MoveAndFence(from_cell=from_cell, to_cell=to_cell, direction=direction):
            return ActionModel(
                type=ActionType.MOVE,
                from_cell=from_cell.to_algebraic(),
                to_cell=to_cell.to_algebraic(),
                direction=direction.name,
            )
        case _:
            return ActionModel(type=ActionType.PASS)


class FendoService:
    """Orchestration of layers for a game of Fendo."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        new_game = Game.new_game(player=request.player_name, seat=request.seat.value)
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(created_game_data)
        logger.info("game %s created by %s", game_id, request.player_name)

        # Return a GameResponse
        return self._create_game_response(game_id, new_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""

        # Retrieve persisted GameModel from repository, and rebuild the Game
        game = Game.from_model(self._fetch_game(request.game_id))

        # Register the requested player
        game.register_player(request.player_name)

        # store in repository
        self.repo.update_game(request.game_id, game.to_model())

        return self._create_game_response(request.game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves, as structured actions."""

        game = Game.from_model(self._fetch_game(request.game_id))
        legal_actions = game.legal_actions(request.player_name)
        seat = game.player_of(request.player_name).seat
        return LegalMovesResponse(
            game_id=request.game_id,
            player_name=request.player_name,
            seat=Seat(seat),
            legal_moves=[to_action(move) for move in legal_actions],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.

        A rejected move raises (InvalidMoveError, NotYourTurnError, GameOverError, ...) before anything gets stored.
        """
        game = Game.from_model(self._fetch_game(request.game_id))

        notation = request.move_notation()
        try:
            game.make_move(notation, request.player_name)
        except GameError as error:
            logger.warning(
                "game %s: move %r by %s rejected: %s",
                request.game_id,
                notation,
                request.player_name,
                error,
            )
            raise

        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def resign(self, request: ResignRequest) -> GameResponse:
        """A player gives up: the game ends right away."""
        game = Game.from_model(self._fetch_game(request.game_id))
        game.resign(request.player_name)
        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the public snapshot of the Game to a GameResponse (for game with given ID.)"""
        snapshot = game.snapshot()
        return GameResponse(
            game_id=game_id,
            players={player.seat: name for player, name in game.players.items()},
            status=snapshot.status,
            occupancy={
                cell: player.seat for cell, player in snapshot.occupancy.items()
            },
            fences=snapshot.fences,
            pieces_in_hand={p.seat: n for p, n in snapshot.pieces_in_hand.items()},
            scores={p.seat: s for p, s in snapshot.scores.items()},
            current_player=snapshot.current_player.seat,
            game_over=snapshot.game_over,
            winners=[p.seat for p in snapshot.winners],
            move_history=[move.to_notation() for move in game.moves],
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
