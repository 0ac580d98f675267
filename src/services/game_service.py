"""Orchestration of communication from the API models to the rule engines and the session repository (and the reverse direction)."""

import asyncio
from functools import partial
from random import Random
from typing import Any, Optional
from uuid import UUID

from loguru import logger

from src.api.models import (
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    NewGameRequest,
    PromoteRequest,
)
from src.core.config import EngineSettings, get_settings
from src.core.exceptions import (
    GameStateError,
    InvalidRequestError,
    NotYourTurnError,
    OccupiedPointError,
    SessionNotFoundError,
)
from src.core.models import GameSession
from src.db.repository import SessionRepository
from src.services.adapters import ADAPTERS, ChessAdapter, GameAdapter
from src.services.opponent import OpponentTurn


class GameService:
    """Orchestration of layers for all five games."""

    def __init__(
        self,
        repository: SessionRepository,
        settings: Optional[EngineSettings] = None,
        rng: Optional[Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or get_settings()
        self.rng = rng or Random(self.settings.random_seed)
        self._opponent_turns: dict[UUID, OpponentTurn[Any]] = {}

    # -- session lifecycle --
    def new_game(self, request: NewGameRequest, session_id: Optional[UUID] = None) -> GameResponse:
        """
        Start a game. Without a session id a new session is created, otherwise the existing session is replaced
        (any opponent turn still running for it is cancelled).
        """
        adapter = ADAPTERS[request.kind]
        session = GameSession(
            kind=request.kind,
            difficulty=request.difficulty,
            state=adapter.new_state(request, self.settings),
            human_side=self._human_side(adapter, request),
            options=request.model_dump(),
        )

        if session_id is None:
            session, session_id = self.repo.create_session(session)
        else:
            self._fetch_session(session_id)
            self._cancel_opponent_turn(session_id)
            self.repo.update_session(session_id, session)

        logger.info(
            f"services.game_service.new_game session={session_id} kind={request.kind} "
            f"difficulty={request.difficulty} human_side={session.human_side}"
        )
        return self._create_game_response(session_id, session)

    def reset(self, session_id: UUID) -> GameResponse:
        """Same game, same options, back to the starting position."""
        session = self._fetch_session(session_id)
        return self.new_game(NewGameRequest(**session.options), session_id=session_id)

    def get_session(self, session_id: UUID) -> GameResponse:
        return self._create_game_response(session_id, self._fetch_session(session_id))

    def end_session(self, session_id: UUID) -> None:
        self._cancel_opponent_turn(session_id)
        if self.repo.delete_session(session_id) is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        logger.info(f"services.game_service.end_session session={session_id}")

    # -- playing --
    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Destinations to highlight for the piece on `origin` (or every playable point in go / morris placement)."""
        session = self._fetch_session(request.session_id)
        adapter = ADAPTERS[session.kind]
        return LegalMovesResponse(
            session_id=request.session_id,
            origin=request.origin,
            destinations=adapter.legal_moves(session.state, request.origin),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt for the human player.
        ---
        An illegal move is not an error: the state stays as it was and the response says `accepted=False`.
        """
        session = self._fetch_session(request.session_id)
        adapter = ADAPTERS[session.kind]
        self._assert_human_can_move(session, adapter)

        move = adapter.parse_move(session.state, request)
        try:
            new_state = adapter.apply_move(session.state, move)
        except OccupiedPointError as exc:
            logger.warning(f"services.game_service.make_move session={request.session_id} {exc}")
            return self._create_game_response(request.session_id, session, accepted=False)

        if new_state is None:
            return self._create_game_response(request.session_id, session, accepted=False)

        session.state = new_state
        self.repo.update_session(request.session_id, session)
        return self._create_game_response(request.session_id, session)

    def promote(self, request: PromoteRequest) -> GameResponse:
        """Chess only: choose the piece for a pawn waiting on the last rank."""
        session = self._fetch_session(request.session_id)
        adapter = ADAPTERS[session.kind]
        if not isinstance(adapter, ChessAdapter):
            raise GameStateError(f"There is no promotion in {session.kind}.")
        if session.state.pending_promotion is None:
            raise GameStateError("No pawn is waiting for a promotion.")

        session.state = adapter.promote(session.state, request.piece)
        self.repo.update_session(request.session_id, session)
        return self._create_game_response(request.session_id, session)

    async def opponent_turn(self, session_id: UUID) -> GameResponse:
        """
        Let the computer play until it is the human's turn again (or the game is over).
        ---
        Usually one move, but a checkers multi-jump or a morris mill (followed by a removal) keeps the computer on turn.
        If the session gets a new game meanwhile the turn is cancelled and its move is thrown away.
        """
        session = self._fetch_session(session_id)
        adapter = ADAPTERS[session.kind]

        while self._is_computer_to_move(session, adapter):
            state = session.state
            turn = OpponentTurn(
                partial(adapter.select_opponent_move, state, session.difficulty, self.rng),
                self.settings.opponent_delay_seconds,
            ).start()
            self._opponent_turns[session_id] = turn

            try:
                move = await turn.result()
            except asyncio.CancelledError:
                if asyncio.current_task().cancelling():
                    raise
                logger.info(f"services.game_service.opponent_turn session={session_id} discarded")
                return self.get_session(session_id)
            finally:
                if self._opponent_turns.get(session_id) is turn:
                    del self._opponent_turns[session_id]

            if move is None:
                break

            session = self._fetch_session(session_id)
            if session.state is not state:
                logger.info(f"services.game_service.opponent_turn session={session_id} stale")
                break

            new_state = adapter.apply_move(state, move)
            if new_state is None:
                logger.warning(f"services.game_service.opponent_turn session={session_id} rejected move={move}")
                break
            session.state = new_state
            self.repo.update_session(session_id, session)

        return self._create_game_response(session_id, session)

    # -- Internal helpers --
    def _human_side(self, adapter: GameAdapter, request: NewGameRequest) -> Optional[str]:
        if not request.vs_computer:
            return None
        side = request.human_side or adapter.sides[0]
        if side not in adapter.sides:
            raise InvalidRequestError(f"{request.kind} is played by {adapter.sides}, not {side!r}.")
        return side

    def _assert_human_can_move(self, session: GameSession, adapter: GameAdapter) -> None:
        if session.state.is_over:
            raise GameStateError(f"The game is over ({session.state.status}).")
        if session.vs_computer and adapter.side_to_move(session.state) != session.human_side:
            raise NotYourTurnError(
                f"It is {adapter.side_to_move(session.state)}'s turn, you play {session.human_side}."
            )

    def _is_computer_to_move(self, session: GameSession, adapter: GameAdapter) -> bool:
        return (
            session.vs_computer
            and not session.state.is_over
            and adapter.side_to_move(session.state) != session.human_side
        )

    def _cancel_opponent_turn(self, session_id: UUID) -> None:
        turn = self._opponent_turns.pop(session_id, None)
        if turn is not None and turn.cancel():
            logger.info(f"services.game_service.cancel_opponent_turn session={session_id}")

    def _create_game_response(
        self, session_id: UUID, session: GameSession, accepted: bool = True
    ) -> GameResponse:
        """Convert the session into a GameResponse."""
        adapter = ADAPTERS[session.kind]
        state = session.state
        return GameResponse(
            session_id=session_id,
            kind=session.kind,
            difficulty=session.difficulty,
            human_side=session.human_side,
            board=adapter.board(state),
            side_to_move=adapter.side_to_move(state),
            status=state.status,
            winner=adapter.winner(state),
            move_count=len(state.history),
            accepted=accepted,
            details=adapter.details(state),
        )

    def _fetch_session(self, session_id: UUID) -> GameSession:
        """Attempt to find the session in the repository and raise error if it fails."""
        session = self.repo.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return session
