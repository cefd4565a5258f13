"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of Fendo -->
passes this information to the service layer, which can then pass it onwards to the API layer.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Self

from src.core.exceptions import (
    GameOverError,
    GameStateError,
    InvalidMoveError,
    MalformedStateError,
    NotYourTurnError,
    UnknownPlayerError,
)
from src.core.models import GameModel
from src.core.shared_types import GAME_OVER_STATUSES, Status
from src.fendo.board import Board, starting_layout
from src.fendo.moves import (
    PASS_NOTATION,
    Move,
    MoveAndFence,
    Pass,
    Placement,
    generate_legal_moves,
    parse_move,
    simulate,
)
from src.fendo.paths import find_path
from src.fendo.pieces import (
    AVAILABLE_SEAT_NAMES,
    PLAYER_ORDER,
    Player,
    next_player,
    other_players,
)
from src.fendo.regions import Regions, classify_regions, player_scores
from src.fendo.results import (
    BlockResult,
    EndOfGameResult,
    MoveResult,
    PassResult,
    PlaceResult,
    ResignedResult,
    StepResult,
    WinnersResult,
    describe,
)
from src.fendo.state import MoveState

logger = logging.getLogger(__name__)

# Each player starts with one piece on the board and this many in hand
STARTING_PIECES_IN_HAND = 7
SEED_CELLS: dict[Player, str] = {Player.ONE: "a4", Player.TWO: "g4"}


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the public state. Cells in algebraic notation."""

    occupancy: dict[str, Player]
    fences: list[tuple[str, str]]
    pieces_in_hand: dict[Player, int]
    scores: dict[Player, int]
    current_player: Player
    status: Status
    game_over: bool
    winners: list[Player]


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    pieces_in_hand: dict[Player, int]
    current_player: Player
    players: dict[Player, str]
    status: Status
    moves: list[Move] = field(default_factory=list)
    history: list[MoveState] = field(default_factory=list)
    winners: list[Player] = field(default_factory=list)
    results: list[MoveResult] = field(default_factory=list)
    resigned: Optional[Player] = None

    def __post_init__(self) -> None:
        # the stack always starts with the state the game was set up in
        if not self.history:
            self._save_state(last_move=None)

    @classmethod
    def new_game(cls, player: str, seat: str = "one") -> Self:
        """To start a new game with the player taking the indicated seat (first or second to move)."""
        if seat.upper() not in AVAILABLE_SEAT_NAMES:
            raise GameStateError(
                f"Cannot create new game. Seat {seat} not in {','.join([s.lower() for s in AVAILABLE_SEAT_NAMES])}."
            )
        board = Board.from_layout(starting_layout(SEED_CELLS))
        return cls(
            board=board,
            pieces_in_hand={p: STARTING_PIECES_IN_HAND for p in PLAYER_ORDER},
            current_player=PLAYER_ORDER[0],
            players={Player.from_seat(seat): player},
            status=Status.WAITING_FOR_PLAYERS,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Define how to construct a Game from the information the Service layer actually has.

        The last state record is the current position. Nothing gets replayed:
        the records only have to be consistent with each other and with the move list.
        """
        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.value for status in Status])}"
            )
        if not model.registered_players:
            raise GameStateError("Cannot load a game without any registered player.")
        if any(seat.upper() not in AVAILABLE_SEAT_NAMES for seat in model.registered_players):
            raise GameStateError(
                f"Invalid seat in {list(model.registered_players)}. Pick from {','.join([s.lower() for s in AVAILABLE_SEAT_NAMES])}"
            )

        # one state per move, plus the initial state, plus the resignation (if any)
        expected_states = len(model.moves) + 1 + (model.resigned_by is not None)
        if len(model.history) != expected_states:
            raise MalformedStateError(
                f"Expected {expected_states} states for {len(model.moves)} moves, got {len(model.history)}."
            )

        # create the Game
        history = [MoveState.from_record(record) for record in model.history]
        try:
            moves = [parse_move(notation) for notation in model.moves]
        except InvalidMoveError as error:
            raise MalformedStateError(f"Cannot read the stored moves {model.moves!r}.") from error
        players = {
            Player.from_seat(seat): name
            for seat, name in model.registered_players.items()
        }
        current = history[-1]
        if current.status != Status(model.status):
            raise MalformedStateError(
                f"Current state has status {current.status!r}, but the record says {model.status!r}."
            )

        return cls(
            board=current.to_board(),
            pieces_in_hand=dict(current.pieces_in_hand),
            current_player=current.current_player,
            players=players,
            status=current.status,
            moves=moves,
            history=history,
            winners=list(current.winners),
            resigned=(
                Player.from_seat(model.resigned_by)
                if model.resigned_by is not None
                else None
            ),
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            history=[state.to_record() for state in self.history],
            moves=[move.to_notation() for move in self.moves],
            registered_players={
                player.seat: name for player, name in self.players.items()
            },
            status=self.status.value,
            resigned_by=self.resigned.seat if self.resigned else None,
        )

    @property
    def game_over(self) -> bool:
        return self.status in GAME_OVER_STATUSES

    def register_player(self, player: str) -> None:
        """Registering the 2nd player to an open game"""
        if self.status != Status.WAITING_FOR_PLAYERS:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. status: {self.status}"
            )
        if player in self.players.values():
            raise GameStateError(f"Player {player!r} already joined this game.")

        open_seat = next((p for p in PLAYER_ORDER if p not in self.players), None)
        if open_seat is None:
            raise GameStateError("Cannot join this game. Every seat is taken.")
        self.players[open_seat] = player
        if len(self.players) == len(PLAYER_ORDER):
            self.status = Status.IN_PROGRESS
            # nothing can be played in the lobby, so the set-up state is still the only entry
            self.history[-1] = replace(self.history[-1], status=self.status)

    def legal_actions(self, player: str) -> list[Move]:
        """
        Service will request the set of legal moves.
        ----

        ----
        1. Once the game is over, nobody has any moves left
        2. Check if it is your turn
        3. Yes? Generate legal moves
        """
        self._assert_started()
        if self.game_over:
            return []
        self._assert_your_turn(player)
        self._assert_well_formed()
        return self._generate_legal_moves()

    def legal_moves(self, player: str) -> list[str]:
        """Same as legal_actions, in move notation."""
        return [move.to_notation() for move in self.legal_actions(player)]

    def make_move(self, move: Move | str, player: str) -> None:
        """
        Attempt to make a move
        -----

        1. check the game is still going, and it is your turn
        2. check the move is one of the legal moves
        3. build the board after the move (on a copy)
        4. commit: board, pieces in hand, move list, turn player
        5. check for the end of the game, and push the new state onto the history
        """
        if self.game_over:
            raise GameOverError(f"The game is over. status: {self.status}")
        self._assert_started()
        self._assert_your_turn(player)
        self._assert_well_formed()

        new_move = parse_move(move) if isinstance(move, str) else move
        if new_move not in self._generate_legal_moves():
            raise InvalidMoveError(
                f"Move not allowed: {new_move.to_notation()}", move=new_move.to_notation()
            )

        # everything below is computed before anything gets committed
        mover = self.current_player
        results = self._describe_move(new_move)
        new_board = simulate(self.board, new_move, mover)
        new_pieces_in_hand = dict(self.pieces_in_hand)
        if isinstance(new_move, Placement):
            new_pieces_in_hand[mover] -= 1

        self.board = new_board
        self.pieces_in_hand = new_pieces_in_hand
        self.moves.append(new_move)
        self.results = results
        self.current_player = next_player(mover)
        logger.info(
            "player %s played %s: %s",
            mover.seat,
            new_move.to_notation(),
            "; ".join(describe(r) for r in results),
        )

        self._update_game_status(new_move)
        self._save_state(last_move=new_move.to_notation())

    def resign(self, player: str) -> None:
        """Out-of-band end of the game: everybody else wins, whatever the score."""
        if self.game_over:
            raise GameOverError(f"The game is over. status: {self.status}")

        resigning = self.player_of(player)
        self.resigned = resigning
        self.status = Status.RESIGNED
        self.winners = other_players(resigning)
        self.results = [
            ResignedResult(resigning),
            EndOfGameResult(),
            WinnersResult(tuple(self.winners)),
        ]
        logger.info("player %s resigned", resigning.seat)
        self._save_state(last_move=self.history[-1].last_move)

    def regions(self) -> Regions:
        return classify_regions(self.board.graph, self.board.position)

    def scores(self) -> dict[Player, int]:
        return player_scores(self.board.graph, self.board.position, PLAYER_ORDER)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            occupancy={
                cell.to_algebraic(): player
                for cell, player in self.board.position.items()
            },
            fences=self.board.fences_algebraic(),
            pieces_in_hand=dict(self.pieces_in_hand),
            scores=self.scores(),
            current_player=self.current_player,
            status=self.status,
            game_over=self.game_over,
            winners=list(self.winners),
        )

    def state_at(self, index: int) -> MoveState:
        """An earlier state from the history stack (negative indexes count from the end)."""
        return self.history[self._history_index(index)]

    def rewind(self, index: int) -> Self:
        """
        A new Game as it was at an earlier point in the history (to take back moves / browse through the game).
        The history of this game is never modified.
        """
        index = self._history_index(index)
        state = self.history[index]
        return type(self)(
            board=state.to_board(),
            pieces_in_hand=dict(state.pieces_in_hand),
            current_player=state.current_player,
            players=dict(self.players),
            status=state.status,
            moves=self.moves[:index],
            history=self.history[: index + 1],
            winners=list(state.winners),
            results=list(state.results),
            resigned=self.resigned if state.status == Status.RESIGNED else None,
        )

    def player_of(self, name: str) -> Player:
        """Seat taken by the player with this name"""
        player = next((p for p, n in self.players.items() if n == name), None)
        if player is None:
            raise UnknownPlayerError(f"Player {name!r} is not part of this game.")
        return player

    # -- PRIVATE HELPERS ---
    def _history_index(self, index: int) -> int:
        """Position in the history stack, negative indexes count from the end."""
        if index < 0:
            index += len(self.history)
        if not 0 <= index < len(self.history):
            raise GameStateError("Could not load the requested state from the history.")
        return index

    def _assert_started(self) -> None:
        if self.status == Status.WAITING_FOR_PLAYERS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

    def _assert_your_turn(self, player: str) -> None:
        """You must wait for your turn before calculating legal moves / making a move."""
        if self.player_of(player) != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.players[self.current_player]} to make a move first."
            )

    def _assert_well_formed(self) -> None:
        """Anything failing here means the state got corrupted somewhere: stop, do not try to fix it."""
        if set(self.pieces_in_hand) != set(PLAYER_ORDER):
            raise MalformedStateError(
                f"Pieces in hand should be tracked for {len(PLAYER_ORDER)} players, got {self.pieces_in_hand!r}."
            )
        if any(count < 0 for count in self.pieces_in_hand.values()):
            raise MalformedStateError(
                f"Negative number of pieces in hand: {self.pieces_in_hand!r}."
            )
        off_board = [c for c in self.board.position if not self.board.graph.contains(c)]
        if off_board:
            raise MalformedStateError(f"Pieces placed outside the board: {off_board!r}.")

    def _generate_legal_moves(self) -> list[Move]:
        return generate_legal_moves(
            self.board, self.current_player, self.pieces_in_hand[self.current_player]
        )

    def _describe_move(self, move: Move) -> list[MoveResult]:
        """Results of a (legal) move, computed on the board before the move is made."""
        results: list[MoveResult] = []
        match move:
            case Placement(cell=cell):
                results.append(PlaceResult(cell))
            case MoveAndFence(from_cell=from_cell, to_cell=to_cell):
                path = find_path(self.board.graph, self.board.position, from_cell, to_cell)
                # for the type checker: legal moves always have a path
                assert path is not None
                results.extend(StepResult(a, b) for a, b in zip(path, path[1:]))
                results.append(BlockResult(move.fence))
            case Pass():
                results.append(PassResult())
        return results

    def _update_game_status(self, move: Move) -> None:
        """
        The game ends when
        * no open region is left (every piece is isolated), or
        * this move and the one before it were both passes.
        """
        passed_out = (
            isinstance(move, Pass) and self.history[-1].last_move == PASS_NOTATION
        )
        if not self.regions().open:
            self.status = Status.FENCED_IN
        elif passed_out:
            self.status = Status.PASSED_OUT
        else:
            return

        scores = self.scores()
        best = max(scores.values())
        self.winners = [p for p in PLAYER_ORDER if scores[p] == best]
        self.results.extend([EndOfGameResult(), WinnersResult(tuple(self.winners))])
        logger.info(
            "game over (%s), scores %s, winners %s",
            self.status,
            {p.seat: s for p, s in scores.items()},
            [p.seat for p in self.winners],
        )

    def _save_state(self, last_move: Optional[str]) -> None:
        self.history.append(
            MoveState(
                current_player=self.current_player,
                layout=self.board.to_layout(),
                fences=tuple(self.board.fences),
                pieces_in_hand=dict(self.pieces_in_hand),
                status=self.status,
                winners=tuple(self.winners),
                last_move=last_move,
                results=tuple(self.results),
            )
        )
